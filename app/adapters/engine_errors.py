"""Project-native typed exceptions for conversion-engine failures."""

from __future__ import annotations


class ConversionEngineError(Exception):
    """Base exception for adapter-level conversion-engine failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConversionEngineConnectionError(ConversionEngineError, ConnectionError):
    """Transport-level connectivity failure during engine communication."""


class ConversionEngineTimeoutError(ConversionEngineError, TimeoutError):
    """Transport timeout while waiting for the engine response."""


class ConversionEngineContractError(ConversionEngineError, RuntimeError):
    """Engine response does not satisfy the batch conversion contract.

    Attributes:
        committed: True when the engine reported the batch as committed before
            the violation was detected, so destination records may exist.
    """

    def __init__(self, message: str, status_code: int | None = None, committed: bool = False):
        super().__init__(message, status_code=status_code)
        self.committed = committed
