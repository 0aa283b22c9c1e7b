"""Error taxonomy for fetching, validating and computing fund data."""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised at startup when an environment setting cannot be parsed."""


class FundDataError(Exception):
    """Base class for consumer-side failures that abort one fetch attempt."""


class TransportError(FundDataError):
    """Network failure, non-success status or a non-JSON content type."""


class ShapeError(FundDataError):
    """Payload is not a non-empty array of objects."""


class MissingFundError(FundDataError):
    def __init__(self, code: str, name: str) -> None:
        super().__init__(f"Fund {name} ({code}) is missing from the published data")
        self.code = code
        self.name = name


class InvalidHistoryError(FundDataError):
    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Invalid history for fund {code}: {reason}")
        self.code = code
        self.reason = reason


class ComputeSkip(Exception):
    """A single fund produced no usable series; the producer omits it and moves on."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Skipping fund {code}: {reason}")
        self.code = code
        self.reason = reason
