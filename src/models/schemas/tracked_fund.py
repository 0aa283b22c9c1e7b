"""Schema for the static registry of tracked funds."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TrackedFundConfig:
    code: str
    name: str
