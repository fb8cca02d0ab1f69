"""Lead conversion request mapper with engine-default preserving field policy."""

from __future__ import annotations

from dataclasses import dataclass

from app.adapters.interfaces import EngineConvertRequest, EngineConvertResult
from app.domain import ConversionOutcome, ConversionRequest

from .interfaces import ConversionValidationError, RequestMapperPort


@dataclass(frozen=True)
class RequestMapperConfig:
    """Configuration for request mapping defaults.

    Attributes:
        default_create_opportunity: Value applied when `create_opportunity` is unset.
    """

    default_create_opportunity: bool = True


class LeadConvertRequestMapper(RequestMapperPort):
    """Concrete mapper between caller conversion records and engine-native records.

    Optional fields are forwarded only when they change engine behavior. Boolean
    flags whose false value matches the engine default are forwarded only when
    true. `create_opportunity` has the opposite default polarity on the engine
    side, so it is always forwarded as the inverted suppress flag.
    """

    def __init__(self, config: RequestMapperConfig | None = None):
        self._config = config or RequestMapperConfig()

    def mapping_contract_version(self) -> str:
        """Return mapping contract version identifier.

        Returns:
            str: Mapping contract version string.
        """

        return "v1"

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

        source_id = self._mapping_validate_mandatory_text(request.source_id, "source_id", request_index)
        converted_status = self._mapping_validate_mandatory_text(
            request.converted_status,
            "converted_status",
            request_index,
        )

        create_opportunity = request.create_opportunity
        if create_opportunity is None:
            create_opportunity = self._config.default_create_opportunity

        return EngineConvertRequest(
            source_id=source_id,
            converted_status=converted_status,
            account_id=request.account_target,
            contact_id=request.contact_target,
            opportunity_id=request.opportunity_target,
            overwrite_lead_source=True if request.overwrite_source is True else None,
            do_not_create_opportunity=not create_opportunity,
            opportunity_name=request.opportunity_name,
            owner_id=request.owner_id,
            send_notification_email=True if request.notify_owner is True else None,
        )

    def mapping_map_outcome(self, result: EngineConvertResult) -> ConversionOutcome:
        """Map one engine-native result into a caller-facing outcome.

        Args:
            result: Engine-native conversion result.

        Returns:
            ConversionOutcome: Caller-facing conversion outcome.
        """

        return ConversionOutcome(
            source_id=result.source_id,
            account_id=_mapping_blank_to_none(result.account_id),
            contact_id=_mapping_blank_to_none(result.contact_id),
            opportunity_id=_mapping_blank_to_none(result.opportunity_id),
        )

    def _mapping_validate_mandatory_text(
        self,
        value: str | None,
        field_name: str,
        request_index: int | None,
    ) -> str:
        """Validate and normalize one mandatory text field.

        Args:
            value: Candidate field value.
            field_name: Field name used in error messages.
            request_index: Optional batch position used in error messages.

        Returns:
            str: Stripped non-empty value.

        Raises:
            ConversionValidationError: Raised when value is missing or blank.
        """

        if not isinstance(value, str) or not value.strip():
            location = f" at index={request_index}" if request_index is not None else ""
            raise ConversionValidationError(
                f"conversion request{location} missing mandatory field {field_name}",
                request_index=request_index,
                field_name=field_name,
            )
        return value.strip()


def _mapping_blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
