"""Common enums shared by the producer pipeline, the fetch service and the dashboard."""

from enum import Enum


class FetchPolicy(str, Enum):
    STRICT = "strict"
    RESILIENT = "resilient"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"
    UNAVAILABLE = "unavailable"
