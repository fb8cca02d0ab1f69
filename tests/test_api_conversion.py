"""Regression tests for the batch lead conversion API endpoint."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Sequence

from fastapi.testclient import TestClient

from app.adapters import (
    ConversionEngineConnectionError,
    ConversionEngineContractError,
    ConversionEngineTimeoutError,
    EngineBatchResponse,
    EngineConvertRequest,
    EngineConvertResult,
    EngineElementFailure,
)
from app.api.application import create_api_application
from app.config import AppSettings
from app.domain import HealthStatus
from app.jobs import BatchConverterConfig, LeadConvertBatchConverter


class _EngineStub:
    """Conversion engine stub returning configured response or error."""

    def __init__(self, response: EngineBatchResponse | None = None, error: Exception | None = None) -> None:
        """Initialize engine stub.

        Args:
            response: Optional fixed response; mirrors requests when omitted.
            error: Optional exception raised on convert calls.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self._response = response
        self._error = error
        self.submitted_batches: list[list[EngineConvertRequest]] = []

    def engine_source_name(self) -> str:
        return "engine_stub"

    def engine_connection_label(self) -> str:
        return "stub://engine"

    def engine_check_health(self) -> HealthStatus:
        return HealthStatus(status="ok", detail="stub")

    def engine_convert_batch(
        self,
        requests: Sequence[EngineConvertRequest],
        all_or_none: bool = True,
    ) -> EngineBatchResponse:
        """Record submitted requests and return configured response.

        Args:
            requests: Submitted engine-native requests.
            all_or_none: Atomicity flag.

        Returns:
            EngineBatchResponse: Configured or mirrored response.

        Raises:
            Exception: Configured error when present.
        """

        _ = all_or_none
        self.submitted_batches.append(list(requests))
        if self._error is not None:
            raise self._error
        if self._response is not None:
            return self._response
        return EngineBatchResponse(
            results=tuple(
                EngineConvertResult(
                    source_id=request.source_id,
                    account_id="001NEW",
                    contact_id="003NEW",
                    opportunity_id=None if request.do_not_create_opportunity else "006NEW",
                )
                for request in requests
            )
        )


def _build_settings() -> AppSettings:
    """Build deterministic settings for API tests.

    Returns:
        AppSettings: Test settings.

    Raises:
        ValidationError: Raised when settings are invalid.
    """

    return AppSettings(
        environment_name="test",
        conversion_engine_base_url="https://engine.test",
        conversion_engine_token="token",
    )


def _build_client(engine_stub: _EngineStub, max_batch_size: int = 200) -> TestClient:
    """Build API test client wired to the engine stub.

    Args:
        engine_stub: Engine stub used by the batch converter.
        max_batch_size: Maximum accepted batch size.

    Returns:
        TestClient: FastAPI test client.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    application = create_api_application(
        settings=_build_settings(),
        engine=engine_stub,
        batch_converter=LeadConvertBatchConverter(
            engine=engine_stub,
            config=BatchConverterConfig(max_batch_size=max_batch_size),
            batch_id_factory=lambda: "batch-api",
        ),
    )
    return TestClient(application)


def test_api_conversion_returns_ordered_outcomes() -> None:
    """Return ordered camelCase outcomes for a committed batch.

    Returns:
        None: Assertions validate success response contract.

    Raises:
        AssertionError: Raised when outcomes or engine mapping are incorrect.
    """

    engine_stub = _EngineStub()
    client = _build_client(engine_stub)

    response = client.post(
        "/conversion/leads",
        json={
            "requests": [
                {"sourceId": "L1", "convertedStatus": "Qualified", "createOpportunity": False},
                {"sourceId": "L2", "convertedStatus": "Qualified", "opportunityName": "Big Deal"},
            ]
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["batch_id"] == "batch-api"
    assert payload["outcomes"] == [
        {"sourceId": "L1", "accountId": "001NEW", "contactId": "003NEW", "opportunityId": None},
        {"sourceId": "L2", "accountId": "001NEW", "contactId": "003NEW", "opportunityId": "006NEW"},
    ]
    submitted = engine_stub.submitted_batches[0]
    assert submitted[0].do_not_create_opportunity is True
    assert submitted[1].do_not_create_opportunity is False
    assert submitted[1].opportunity_name == "Big Deal"


def test_api_conversion_accepts_snake_case_field_names() -> None:
    """Accept snake_case field names alongside camelCase aliases."""

    engine_stub = _EngineStub()
    client = _build_client(engine_stub)

    response = client.post(
        "/conversion/leads",
        json={"requests": [{"source_id": "L1", "converted_status": "Qualified", "notify_owner": True}]},
    )

    assert response.status_code == 200
    assert engine_stub.submitted_batches[0][0].send_notification_email is True


def test_api_conversion_missing_mandatory_field_is_rejected_by_schema() -> None:
    """Reject request missing `convertedStatus` before engine submission."""

    engine_stub = _EngineStub()
    client = _build_client(engine_stub)

    response = client.post("/conversion/leads", json={"requests": [{"sourceId": "L1"}]})

    assert response.status_code == 422
    assert engine_stub.submitted_batches == []


def test_api_conversion_blank_mandatory_field_returns_validation_error() -> None:
    """Return 400 validation payload for whitespace-only mandatory field."""

    engine_stub = _EngineStub()
    client = _build_client(engine_stub)

    response = client.post(
        "/conversion/leads",
        json={"requests": [{"sourceId": "L1", "convertedStatus": "Qualified"}, {"sourceId": " ", "convertedStatus": "Qualified"}]},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "CONVERSION_VALIDATION_FAILED"
    assert payload["request_index"] == 1
    assert payload["field_name"] == "source_id"
    assert engine_stub.submitted_batches == []


def test_api_conversion_oversized_batch_returns_validation_error() -> None:
    """Return 400 when batch exceeds configured maximum size."""

    client = _build_client(_EngineStub(), max_batch_size=1)

    response = client.post(
        "/conversion/leads",
        json={
            "requests": [
                {"sourceId": "L1", "convertedStatus": "Qualified"},
                {"sourceId": "L2", "convertedStatus": "Qualified"},
            ]
        },
    )

    assert response.status_code == 400
    assert response.json()["request_index"] is None


def test_api_conversion_engine_rejection_returns_batch_failure_without_outcomes() -> None:
    """Return 422 batch failure carrying engine reasons and no outcomes.

    Returns:
        None: Assertions validate all-or-none failure payload.

    Raises:
        AssertionError: Raised when partial outcomes are returned.
    """

    engine_stub = _EngineStub(
        response=EngineBatchResponse(
            failures=(
                EngineElementFailure(index=1, source_id="L2", status_code="INVALID_STATUS", message="bad status"),
            )
        )
    )
    client = _build_client(engine_stub)

    response = client.post(
        "/conversion/leads",
        json={
            "requests": [
                {"sourceId": "L1", "convertedStatus": "Qualified"},
                {"sourceId": "L2", "convertedStatus": "Nope"},
                {"sourceId": "L3", "convertedStatus": "Qualified"},
            ]
        },
    )

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "CONVERSION_REJECTED"
    assert payload["batch_id"] == "batch-api"
    assert "outcomes" not in payload
    assert payload["failures"] == [
        {"index": 1, "source_id": "L2", "status_code": "INVALID_STATUS", "message": "bad status"},
    ]
    assert "bad status" in payload["message"]


def test_api_conversion_engine_timeout_returns_gateway_timeout() -> None:
    """Map engine timeout to 504."""

    client = _build_client(_EngineStub(error=ConversionEngineTimeoutError("conversion engine request timed out")))

    response = client.post("/conversion/leads", json={"requests": [{"sourceId": "L1", "convertedStatus": "Qualified"}]})

    assert response.status_code == 504
    assert response.json()["code"] == "CONVERSION_ENGINE_TIMEOUT"


def test_api_conversion_engine_unavailable_returns_bad_gateway() -> None:
    """Map engine connectivity failure to 502."""

    client = _build_client(_EngineStub(error=ConversionEngineConnectionError("conversion engine request failed")))

    response = client.post("/conversion/leads", json={"requests": [{"sourceId": "L1", "convertedStatus": "Qualified"}]})

    assert response.status_code == 502
    assert response.json()["code"] == "CONVERSION_ENGINE_UNAVAILABLE"


def test_api_conversion_engine_contract_violation_returns_bad_gateway() -> None:
    """Map engine contract violation to 502 with dedicated code."""

    client = _build_client(_EngineStub(error=ConversionEngineContractError("conversion engine response is not valid JSON")))

    response = client.post("/conversion/leads", json={"requests": [{"sourceId": "L1", "convertedStatus": "Qualified"}]})

    assert response.status_code == 502
    assert response.json()["code"] == "CONVERSION_ENGINE_CONTRACT_VIOLATION"
    assert response.json()["committed"] is False


def test_api_conversion_openapi_documents_request_fields() -> None:
    """Expose field descriptions through the generated OpenAPI document."""

    client = _build_client(_EngineStub())

    schema = client.get("/openapi.json").json()
    request_schema = schema["components"]["schemas"]["ConversionRequestSchema"]

    assert set(request_schema["required"]) == {"sourceId", "convertedStatus"}
    assert request_schema["properties"]["createOpportunity"]["default"] is True
    assert "description" in request_schema["properties"]["ownerId"]


def test_api_conversion_committed_unverified_batch_returns_raw_engine_results() -> None:
    """Flag a committed batch whose results do not line up and return the raw engine results.

    Returns:
        None: Assertions validate committed-batch payload.

    Raises:
        AssertionError: Raised when a committed batch reads like a no-op failure.
    """

    engine_stub = _EngineStub(
        response=EngineBatchResponse(
            results=(
                EngineConvertResult(
                    source_id="00Q000000000001AAA",
                    account_id="001000000000001AAA",
                    contact_id="003000000000001AAA",
                    opportunity_id=None,
                ),
            )
        )
    )
    client = _build_client(engine_stub)

    response = client.post(
        "/conversion/leads",
        json={"requests": [{"sourceId": "00Q000000000001", "convertedStatus": "Qualified"}]},
    )

    assert response.status_code == 502
    payload = response.json()
    assert payload["code"] == "CONVERSION_COMMITTED_UNVERIFIED"
    assert payload["committed"] is True
    assert payload["batch_id"] == "batch-api"
    assert payload["results"] == [
        {
            "source_id": "00Q000000000001AAA",
            "account_id": "001000000000001AAA",
            "contact_id": "003000000000001AAA",
            "opportunity_id": None,
        }
    ]
    assert len(engine_stub.submitted_batches) == 1


def test_api_application_runs_shutdown_callbacks_on_lifespan_exit() -> None:
    """Run registered shutdown callbacks once when the application stops."""

    engine_stub = _EngineStub()
    closed_markers: list[str] = []
    application = create_api_application(
        settings=_build_settings(),
        engine=engine_stub,
        batch_converter=LeadConvertBatchConverter(engine=engine_stub),
        shutdown_callbacks=(lambda: closed_markers.append("engine"),),
    )

    with TestClient(application) as client:
        assert client.get("/").status_code == 200
        assert closed_markers == []

    assert closed_markers == ["engine"]
