"""Typed interfaces for batch conversion orchestration responsibilities."""

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from app.adapters.engine_errors import ConversionEngineContractError
from app.adapters.interfaces import EngineConvertResult, EngineElementFailure
from app.domain import ConversionOutcome, ConversionRequest


@dataclass(frozen=True)
class ConversionBatchResult:
    """Result contract for one committed conversion batch.

    Attributes:
        batch_id: Identifier assigned to the batch invocation.
        outcomes: Outcomes ordered like the submitted requests.
        timeline: Structured stage timeline captured during execution.
    """

    batch_id: str
    outcomes: tuple[ConversionOutcome, ...]
    timeline: list[dict[str, object]] = field(default_factory=list)


class ConversionBatchRejectedError(RuntimeError):
    """Raised when the engine rejects a batch; nothing in the batch was committed.

    Attributes:
        batch_id: Identifier of the rejected batch.
        failures: Every element failure reported by the engine.
        timeline: Structured stage timeline captured before rejection.
    """

    def __init__(
        self,
        message: str,
        batch_id: str,
        failures: tuple[EngineElementFailure, ...],
        timeline: list[dict[str, object]] | None = None,
    ):
        super().__init__(message)
        self.batch_id = batch_id
        self.failures = failures
        self.timeline = timeline or []


class ConversionCommittedUnverifiedError(ConversionEngineContractError):
    """Raised when the engine committed a batch but its results do not line up with the requests.

    Destination records exist. The raw engine results are kept so callers can
    reconcile them; they are not mapped to outcomes.

    Attributes:
        batch_id: Identifier of the committed batch.
        results: Raw engine results in the order the engine returned them.
        timeline: Structured stage timeline captured up to the failed check.
    """

    def __init__(
        self,
        message: str,
        batch_id: str,
        results: tuple[EngineConvertResult, ...],
        timeline: list[dict[str, object]] | None = None,
    ):
        super().__init__(message, committed=True)
        self.batch_id = batch_id
        self.results = results
        self.timeline = timeline or []


class BatchConverterPort(Protocol):
    """Port definition for all-or-none batch conversion."""

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
            ConnectionError: Raised when the engine cannot be reached.
            TimeoutError: Raised when the engine call times out.
        """
