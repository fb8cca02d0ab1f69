"""Typed interfaces for request and result mapping transformations."""

from typing import Protocol

from app.adapters.interfaces import EngineConvertRequest, EngineConvertResult
from app.domain import ConversionOutcome, ConversionRequest


class ConversionValidationError(ValueError):
    """Raised when a conversion request or batch fails mandatory-field validation.

    Attributes:
        request_index: Zero-based position of the offending request, None for batch-level failures.
        field_name: Name of the offending field, when applicable.
    """

    def __init__(self, message: str, request_index: int | None = None, field_name: str | None = None):
        super().__init__(message)
        self.request_index = request_index
        self.field_name = field_name


class RequestMapperPort(Protocol):
    """Port definition for caller/engine conversion mapping."""

    def mapping_contract_version(self) -> str:
        """Return mapping contract version used for engine requests.

        Returns:
            str: Mapping contract version identifier.
        """

    def mapping_map_request(self, request: ConversionRequest, request_index: int | None = None) -> EngineConvertRequest:
        """Map one caller request into an engine-native request.

        Args:
            request: Caller-supplied conversion request.
            request_index: Optional batch position used in validation messages.

        Returns:
            EngineConvertRequest: Engine-native request with suppression rules applied.

        Raises:
            ConversionValidationError: Raised when a mandatory field is missing or blank.
        """

    def mapping_map_outcome(self, result: EngineConvertResult) -> ConversionOutcome:
        """Map one engine-native result into a caller-facing outcome.

        Args:
            result: Engine-native conversion result.

        Returns:
            ConversionOutcome: Caller-facing conversion outcome.
        """
