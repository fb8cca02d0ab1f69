"""Typed interfaces for the conversion-engine adapter boundary."""

from dataclasses import dataclass
from typing import Protocol, Sequence

from app.domain import HealthStatus


@dataclass(frozen=True)
class EngineConvertRequest:
    """Engine-native request for converting one source record.

    A field left as None is not forwarded to the engine, so the engine applies
    its own default for it.

    Attributes:
        source_id: Identifier of the source record to convert.
        converted_status: Status marker applied to the converted source record.
        account_id: Existing account to convert into.
        contact_id: Existing contact to convert into.
        opportunity_id: Existing opportunity to convert into.
        overwrite_lead_source: Copy source-provenance field onto destination contact.
        do_not_create_opportunity: Suppress creation of a destination opportunity.
        opportunity_name: Name for a newly created opportunity.
        owner_id: Owner of destination records.
        send_notification_email: Notify the destination owner.
    """

    source_id: str
    converted_status: str
    account_id: str | None = None
    contact_id: str | None = None
    opportunity_id: str | None = None
    overwrite_lead_source: bool | None = None
    do_not_create_opportunity: bool | None = None
    opportunity_name: str | None = None
    owner_id: str | None = None
    send_notification_email: bool | None = None


@dataclass(frozen=True)
class EngineConvertResult:
    """Engine-native result for one converted source record.

    Attributes:
        source_id: Identifier of the converted source record.
        account_id: Account created or linked.
        contact_id: Contact created or linked.
        opportunity_id: Opportunity created or linked, None when not produced.
    """

    source_id: str
    account_id: str | None
    contact_id: str | None
    opportunity_id: str | None


@dataclass(frozen=True)
class EngineElementFailure:
    """One element failure reported by the engine for a rejected batch.

    Attributes:
        index: Zero-based position of the failing request, None when unknown.
        source_id: Source record identifier of the failing request, when reported.
        status_code: Engine status code, `UNKNOWN` when not reported.
        message: Human-readable failure reason.
    """

    index: int | None
    source_id: str | None
    status_code: str
    message: str


@dataclass(frozen=True)
class EngineBatchResponse:
    """Result-or-failure payload for one all-or-none engine batch call.

    Attributes:
        results: Ordered per-request results when the batch committed.
        failures: Element failures when the batch was rolled back.
    """

    results: tuple[EngineConvertResult, ...] = ()
    failures: tuple[EngineElementFailure, ...] = ()

    def engine_response_is_success(self) -> bool:
        """Return whether the engine committed the batch.

        Returns:
            bool: True when no element failure was reported.
        """

        return len(self.failures) == 0


class ConversionEnginePort(Protocol):
    """Port definition for the external lead-conversion engine."""

    def engine_source_name(self) -> str:
        """Return engine source identifier for diagnostics.

        Returns:
            str: Human-readable engine identifier.
        """

    def engine_connection_label(self) -> str:
        """Return a redacted engine target label for health payloads.

        Returns:
            str: Engine target label.
        """

    def engine_check_health(self) -> HealthStatus:
        """Check engine reachability.

        Returns:
            HealthStatus: Health payload when the engine is reachable.

        Raises:
            ConnectionError: Raised when the engine cannot be reached.
        """

    def engine_convert_batch(
        self,
        requests: Sequence[EngineConvertRequest],
        all_or_none: bool = True,
    ) -> EngineBatchResponse:
        """Submit one ordered batch of conversion requests in a single call.

        Args:
            requests: Ordered engine-native requests.
            all_or_none: Whether one failing element rolls back the whole batch.

        Returns:
            EngineBatchResponse: Ordered results, or element failures when rolled back.

        Raises:
            ConnectionError: Raised when the engine cannot be reached.
            TimeoutError: Raised when the engine call exceeds its timeout.
            RuntimeError: Raised when the engine response violates the wire contract.
        """
