"""Job-layer batch converter with all-or-none engine submission and stage timeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence
from uuid import uuid4

import structlog

from app.adapters import (
    ConversionEngineContractError,
    ConversionEngineError,
    ConversionEnginePort,
    EngineConvertRequest,
    EngineConvertResult,
    EngineElementFailure,
    engine_status_is_rollback_marker,
)
from app.domain import ConversionRequest, domain_build_stage_event, domain_build_stage_failure_event
from app.mapping import ConversionValidationError, LeadConvertRequestMapper, RequestMapperPort

from .interfaces import (
    BatchConverterPort,
    ConversionBatchRejectedError,
    ConversionBatchResult,
    ConversionCommittedUnverifiedError,
)

logger = structlog.get_logger("jobs.batch_converter")


@dataclass(frozen=True)
class BatchConverterConfig:
    """Configuration values for batch conversion execution.

    Attributes:
        max_batch_size: Maximum number of requests accepted in one batch.
    """

    max_batch_size: int = 200


class LeadConvertBatchConverter(BatchConverterPort):
    """Concrete batch converter submitting each batch to the engine exactly once."""

    def __init__(
        self,
        engine: ConversionEnginePort,
        config: BatchConverterConfig | None = None,
        mapper: RequestMapperPort | None = None,
        batch_id_factory: Callable[[], str] | None = None,
    ):
        """Initialize batch converter dependencies.

        Args:
            engine: Conversion engine port.
            config: Optional batch execution configuration.
            mapper: Optional request mapper override.
            batch_id_factory: Optional batch identifier provider.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        resolved_config = config or BatchConverterConfig()
        if resolved_config.max_batch_size < 1:
            raise ValueError("config.max_batch_size must be >= 1")

        self._engine = engine
        self._config = resolved_config
        self._mapper = mapper or LeadConvertRequestMapper()
        self._batch_id_factory = batch_id_factory or (lambda: str(uuid4()))

    def job_convert_batch(self, requests: Sequence[ConversionRequest]) -> ConversionBatchResult:
        """Convert one ordered batch of requests with all-or-none semantics.

        Args:
            requests: Ordered caller-supplied conversion requests.

        Returns:
            ConversionBatchResult: Outcomes ordered like the requests.

        Raises:
            ConversionValidationError: Raised before any engine call when validation fails.
            ConversionBatchRejectedError: Raised when the engine rejects any element.
            ConversionCommittedUnverifiedError: Raised when the engine committed but results do not line up.
            ConversionEngineContractError: Raised when the engine response is malformed.
            ConnectionError: Raised when the engine cannot be reached.
            TimeoutError: Raised when the engine call times out.
        """

        batch_id = self._batch_id_factory()
        request_list = list(requests)
        timeline: list[dict[str, object]] = []
        log = logger.bind(
            batch_id=batch_id,
            request_count=len(request_list),
            engine=self._engine.engine_source_name(),
        )
        log.info("Conversion batch started")

        timeline.append(domain_build_stage_event(stage="validate", status="started"))
        try:
            engine_requests = self._job_map_requests(request_list)
        except ConversionValidationError as error:
            timeline.append(domain_build_stage_failure_event(stage="validate", error=error))
            log.warning(
                "Conversion batch failed validation",
                request_index=error.request_index,
                field_name=error.field_name,
                error=str(error),
            )
            raise
        timeline.append(domain_build_stage_event(stage="validate", status="completed"))

        if not engine_requests:
            log.info("Conversion batch empty, engine not called")
            return ConversionBatchResult(batch_id=batch_id, outcomes=(), timeline=timeline)

        timeline.append(domain_build_stage_event(stage="submit", status="started"))
        submit_started_at = datetime.now(timezone.utc)
        try:
            engine_response = self._engine.engine_convert_batch(engine_requests, all_or_none=True)
        except (TimeoutError, ConnectionError, RuntimeError) as error:
            timeline.append(domain_build_stage_failure_event(stage="submit", error=error))
            log.error(
                "Conversion engine call failed",
                error_type=type(error).__name__,
                error=str(error),
                timed_out=isinstance(error, TimeoutError),
                http_status=error.status_code if isinstance(error, ConversionEngineError) else None,
                committed=isinstance(error, ConversionEngineContractError) and error.committed,
            )
            raise
        submit_duration_ms = max(0, int((datetime.now(timezone.utc) - submit_started_at).total_seconds() * 1000))

        if not engine_response.engine_response_is_success():
            failures = engine_response.failures
            timeline.append(
                domain_build_stage_event(
                    stage="submit",
                    status="failed",
                    details={
                        "submit_duration_ms": submit_duration_ms,
                        "failures": [job_serialize_element_failure(failure) for failure in failures],
                    },
                )
            )
            log.warning("Conversion batch rejected by engine", failure_count=len(failures))
            raise ConversionBatchRejectedError(
                job_build_rejection_message(failures),
                batch_id=batch_id,
                failures=failures,
                timeline=timeline,
            )
        timeline.append(
            domain_build_stage_event(
                stage="submit",
                status="completed",
                details={"submit_duration_ms": submit_duration_ms},
            )
        )

        timeline.append(domain_build_stage_event(stage="map_results", status="started"))
        try:
            self._job_validate_result_alignment(engine_requests, engine_response.results)
        except ConversionEngineContractError as error:
            timeline.append(domain_build_stage_failure_event(stage="map_results", error=error))
            log.error(
                "Conversion batch committed but results could not be verified",
                committed=True,
                result_count=len(engine_response.results),
                error=str(error),
            )
            raise ConversionCommittedUnverifiedError(
                f"conversion batch committed but results could not be verified: {error}",
                batch_id=batch_id,
                results=engine_response.results,
                timeline=timeline,
            ) from error
        outcomes = tuple(self._mapper.mapping_map_outcome(result) for result in engine_response.results)
        timeline.append(
            domain_build_stage_event(
                stage="map_results",
                status="completed",
                details={"outcome_count": len(outcomes)},
            )
        )

        log.info("Conversion batch succeeded", submit_duration_ms=submit_duration_ms)
        return ConversionBatchResult(batch_id=batch_id, outcomes=outcomes, timeline=timeline)

    def _job_map_requests(self, request_list: list[ConversionRequest]) -> list[EngineConvertRequest]:
        """Validate batch size and map every request in order.

        Args:
            request_list: Ordered caller requests.

        Returns:
            list[EngineConvertRequest]: Ordered engine-native requests.

        Raises:
            ConversionValidationError: Raised when the batch is too large or one request is invalid.
        """

        if len(request_list) > self._config.max_batch_size:
            raise ConversionValidationError(
                f"conversion batch size {len(request_list)} exceeds maximum of {self._config.max_batch_size}"
            )

        return [
            self._mapper.mapping_map_request(request, request_index=request_index)
            for request_index, request in enumerate(request_list)
        ]

    def _job_validate_result_alignment(
        self,
        engine_requests: list[EngineConvertRequest],
        engine_results: tuple[EngineConvertResult, ...],
    ) -> None:
        """Check that result *i* belongs to request *i*.

        Args:
            engine_requests: Submitted engine-native requests.
            engine_results: Results returned by the engine.

        Returns:
            None: Validation only.

        Raises:
            ConversionEngineContractError: Raised when result count or order does not match.
        """

        if len(engine_results) != len(engine_requests):
            raise ConversionEngineContractError(
                f"conversion engine returned {len(engine_results)} results for {len(engine_requests)} requests"
            )

        for result_index, (engine_request, engine_result) in enumerate(zip(engine_requests, engine_results)):
            if engine_result.source_id != engine_request.source_id:
                raise ConversionEngineContractError(
                    "conversion engine result order mismatch "
                    f"at index={result_index}: expected source_id={engine_request.source_id}, "
                    f"got source_id={engine_result.source_id}"
                )


def job_build_rejection_message(failures: Sequence[EngineElementFailure]) -> str:
    """Build one batch-level message from engine element failure reasons.

    Collateral rollback markers are left out when at least one element carries
    a real failure reason.

    Args:
        failures: Element failures reported by the engine.

    Returns:
        str: Batch-level rejection message.
    """

    primary_failures = [failure for failure in failures if not engine_status_is_rollback_marker(failure.status_code)]
    reported_failures = primary_failures or list(failures)
    reasons = []
    for failure in reported_failures:
        location = f"index={failure.index}" if failure.index is not None else "index=unknown"
        if failure.source_id is not None:
            location = f"{location}, source_id={failure.source_id}"
        reasons.append(f"[{location}] {failure.status_code}: {failure.message}")
    return "conversion batch rejected by engine: " + "; ".join(reasons)


def job_serialize_element_failure(failure: EngineElementFailure) -> dict[str, object]:
    """Serialize one engine element failure to a JSON-compatible payload.

    Args:
        failure: Engine element failure.

    Returns:
        dict[str, object]: JSON-compatible failure payload.
    """

    return {
        "index": failure.index,
        "source_id": failure.source_id,
        "status_code": failure.status_code,
        "message": failure.message,
    }


def job_serialize_engine_result(result: EngineConvertResult) -> dict[str, object]:
    """Serialize one raw engine result to a JSON-compatible payload."""

    return {
        "source_id": result.source_id,
        "account_id": result.account_id,
        "contact_id": result.contact_id,
        "opportunity_id": result.opportunity_id,
    }


def job_conversion_error_code(error: Exception) -> str:
    """Map a batch conversion exception to a deterministic error code.

    Args:
        error: Exception raised by a batch conversion.

    Returns:
        str: Deterministic error code.
    """

    if isinstance(error, ConversionValidationError):
        return "CONVERSION_VALIDATION_FAILED"
    if isinstance(error, ConversionBatchRejectedError):
        return "CONVERSION_REJECTED"
    if isinstance(error, ConversionEngineContractError) and error.committed:
        return "CONVERSION_COMMITTED_UNVERIFIED"
    if isinstance(error, ConversionEngineContractError):
        return "CONVERSION_ENGINE_CONTRACT_VIOLATION"
    if isinstance(error, TimeoutError):
        return "CONVERSION_ENGINE_TIMEOUT"
    if isinstance(error, ConnectionError):
        return "CONVERSION_ENGINE_UNAVAILABLE"
    return "CONVERSION_UNEXPECTED_ERROR"
