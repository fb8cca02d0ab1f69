"""HTTP conversion-engine adapter implementation for all-or-none batch conversion."""

from __future__ import annotations

from typing import Any, Final, Sequence

import httpx
import structlog

from app.domain import HealthStatus

from .engine_errors import (
    ConversionEngineConnectionError,
    ConversionEngineContractError,
    ConversionEngineTimeoutError,
)
from .engine_status_codes import ENGINE_UNKNOWN_STATUS_CODE, engine_status_default_message
from .interfaces import (
    ConversionEnginePort,
    EngineBatchResponse,
    EngineConvertRequest,
    EngineConvertResult,
    EngineElementFailure,
)

logger = structlog.get_logger("adapters.conversion_engine_http")

_ENGINE_WIRE_FIELD_NAMES: Final[dict[str, str]] = {
    "source_id": "sourceId",
    "converted_status": "convertedStatus",
    "account_id": "accountId",
    "contact_id": "contactId",
    "opportunity_id": "opportunityId",
    "overwrite_lead_source": "overwriteLeadSource",
    "do_not_create_opportunity": "doNotCreateOpportunity",
    "opportunity_name": "opportunityName",
    "owner_id": "ownerId",
    "send_notification_email": "sendNotificationEmail",
}


class HttpConversionEngineAdapter(ConversionEnginePort):
    """Adapter for the conversion engine `POST /leads/convert` JSON contract."""

    _USER_AGENT: Final[str] = "lead-convert-service/1.0 (Python/httpx)"
    _CONVERT_PATH: Final[str] = "/leads/convert"
    _HEALTH_PATH: Final[str] = "/health"
    _REJECTION_HTTP_STATUSES: Final[frozenset[int]] = frozenset({400, 409, 422})

    def __init__(
        self,
        base_url: str,
        token: str,
        request_timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the HTTP conversion-engine adapter.

        Args:
            base_url: Base endpoint URL of the conversion engine.
            token: Bearer token for engine calls.
            request_timeout_seconds: HTTP request timeout in seconds.
            http_client: Optional preconfigured client, mainly for tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        normalized_token = token.strip()

        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if not normalized_token:
            raise ValueError("token must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._base_url = normalized_base_url.rstrip("/")
        self._http_client = http_client or httpx.Client(
            timeout=request_timeout_seconds,
            headers={
                "User-Agent": self._USER_AGENT,
                "Authorization": f"Bearer {normalized_token}",
                "Accept": "application/json",
            },
        )

    def engine_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier.
        """

        return "conversion_engine_http"

    def engine_connection_label(self) -> str:
        """Return engine base URL without credentials.

        Returns:
            str: Engine target label.
        """

        return self._base_url

    def engine_check_health(self) -> HealthStatus:
        """Check engine reachability through its health endpoint.

        Returns:
            HealthStatus: Healthy status payload.

        Raises:
            ConnectionError: Raised when the engine is unreachable or unhealthy.
        """

        response = self._adapter_http_request(method="GET", path=self._HEALTH_PATH)
        if not response.is_success:
            raise ConversionEngineConnectionError(
                f"conversion engine health check returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return HealthStatus(status="ok", detail="conversion engine reachable")

    def engine_convert_batch(
        self,
        requests: Sequence[EngineConvertRequest],
        all_or_none: bool = True,
    ) -> EngineBatchResponse:
        """Submit one ordered batch to the engine and parse the result-or-failure body.

        Args:
            requests: Ordered engine-native requests.
            all_or_none: Whether one failing element rolls back the whole batch.

        Returns:
            EngineBatchResponse: Ordered results, or element failures when rolled back.

        Raises:
            ConnectionError: Raised for network failures and unexpected HTTP status.
            TimeoutError: Raised when the engine call exceeds its timeout.
            RuntimeError: Raised when the response body violates the wire contract.
        """

        request_payload = {
            "allOrNone": all_or_none,
            "requests": [adapter_serialize_engine_request(request) for request in requests],
        }
        response = self._adapter_http_request(method="POST", path=self._CONVERT_PATH, json_payload=request_payload)

        if not response.is_success and response.status_code not in self._REJECTION_HTTP_STATUSES:
            raise ConversionEngineConnectionError(
                f"conversion engine returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        response_body = self._adapter_parse_json(response)
        success_flag = response_body.get("success")
        if not isinstance(success_flag, bool):
            raise ConversionEngineContractError(
                "conversion engine response missing boolean `success`",
                status_code=response.status_code,
            )

        if success_flag:
            # The engine claims the batch committed; later violations must say so.
            if not response.is_success:
                raise ConversionEngineContractError(
                    f"conversion engine reported success with HTTP {response.status_code}",
                    status_code=response.status_code,
                    committed=True,
                )
            try:
                results = self._adapter_parse_results(response_body)
            except ConversionEngineContractError as error:
                raise ConversionEngineContractError(
                    str(error),
                    status_code=response.status_code,
                    committed=True,
                ) from error
            return EngineBatchResponse(results=results)

        return EngineBatchResponse(failures=self._adapter_parse_failures(response_body))

    def engine_close(self) -> None:
        """Close the pooled HTTP client.

        Returns:
            None: Releases transport resources as side effect.
        """

        self._http_client.close()

    def _adapter_http_request(
        self,
        method: str,
        path: str,
        json_payload: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Execute one HTTP request against the engine.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL.
            json_payload: Optional JSON request body.

        Returns:
            httpx.Response: Raw HTTP response.

        Raises:
            ConversionEngineTimeoutError: Raised when the transport times out.
            ConversionEngineConnectionError: Raised for other transport failures.
        """

        url = f"{self._base_url}{path}"
        try:
            return self._http_client.request(method, url, json=json_payload)
        except httpx.TimeoutException as error:
            logger.warning("Conversion engine request timed out", method=method, url=url)
            raise ConversionEngineTimeoutError("conversion engine request timed out") from error
        except httpx.HTTPError as error:
            logger.warning("Conversion engine request failed", method=method, url=url, error=str(error))
            raise ConversionEngineConnectionError("conversion engine request failed") from error

    def _adapter_parse_json(self, response: httpx.Response) -> dict[str, Any]:
        """Parse response body as a JSON object.

        Args:
            response: Raw HTTP response.

        Returns:
            dict[str, Any]: Parsed JSON object.

        Raises:
            ConversionEngineContractError: Raised when the body is not a JSON object.
        """

        try:
            response_body = response.json()
        except ValueError as error:
            raise ConversionEngineContractError(
                "conversion engine response is not valid JSON",
                status_code=response.status_code,
            ) from error
        if not isinstance(response_body, dict):
            raise ConversionEngineContractError(
                "conversion engine response must be a JSON object",
                status_code=response.status_code,
            )
        return response_body

    def _adapter_parse_results(self, response_body: dict[str, Any]) -> tuple[EngineConvertResult, ...]:
        """Parse ordered success results from one engine response.

        Args:
            response_body: Parsed engine response body.

        Returns:
            tuple[EngineConvertResult, ...]: Ordered engine results.

        Raises:
            ConversionEngineContractError: Raised when one result entry is malformed.
        """

        raw_results = response_body.get("results")
        if not isinstance(raw_results, list):
            raise ConversionEngineContractError("conversion engine success response missing `results` list")

        parsed_results: list[EngineConvertResult] = []
        for position, raw_result in enumerate(raw_results):
            if not isinstance(raw_result, dict):
                raise ConversionEngineContractError(f"conversion engine result at index={position} is not an object")
            source_id = _adapter_optional_text(raw_result.get("sourceId"))
            if source_id is None:
                raise ConversionEngineContractError(f"conversion engine result at index={position} missing sourceId")
            parsed_results.append(
                EngineConvertResult(
                    source_id=source_id,
                    account_id=_adapter_optional_text(raw_result.get("accountId")),
                    contact_id=_adapter_optional_text(raw_result.get("contactId")),
                    opportunity_id=_adapter_optional_text(raw_result.get("opportunityId")),
                )
            )
        return tuple(parsed_results)

    def _adapter_parse_failures(self, response_body: dict[str, Any]) -> tuple[EngineElementFailure, ...]:
        """Parse element failures from one rejected engine response.

        Args:
            response_body: Parsed engine response body.

        Returns:
            tuple[EngineElementFailure, ...]: Reported element failures.

        Raises:
            ConversionEngineContractError: Raised when the failure list is missing or empty.
        """

        raw_errors = response_body.get("errors")
        if not isinstance(raw_errors, list) or not raw_errors:
            raise ConversionEngineContractError("conversion engine rejection response missing `errors` list")

        parsed_failures: list[EngineElementFailure] = []
        for raw_error in raw_errors:
            if not isinstance(raw_error, dict):
                raise ConversionEngineContractError("conversion engine error entry is not an object")
            raw_index = raw_error.get("index")
            index = raw_index if isinstance(raw_index, int) and not isinstance(raw_index, bool) else None
            status_code = _adapter_optional_text(raw_error.get("statusCode")) or ENGINE_UNKNOWN_STATUS_CODE
            message = _adapter_optional_text(raw_error.get("message")) or engine_status_default_message(
                status_code,
                fallback_message="conversion rejected by engine",
            )
            parsed_failures.append(
                EngineElementFailure(
                    index=index,
                    source_id=_adapter_optional_text(raw_error.get("sourceId")),
                    status_code=status_code,
                    message=message,
                )
            )
        return tuple(parsed_failures)


def adapter_serialize_engine_request(request: EngineConvertRequest) -> dict[str, object]:
    """Serialize one engine-native request to its wire payload.

    Fields left as None are omitted so the engine applies its own defaults.

    Args:
        request: Engine-native request.

    Returns:
        dict[str, object]: JSON-compatible request payload.
    """

    payload: dict[str, object] = {}
    for attribute_name, wire_name in _ENGINE_WIRE_FIELD_NAMES.items():
        value = getattr(request, attribute_name)
        if value is not None:
            payload[wire_name] = value
    return payload


def _adapter_optional_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    normalized_value = value.strip()
    return normalized_value or None
