"""Conversion API router exposing the all-or-none batch lead conversion operation."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.adapters import ConversionEngineContractError
from app.jobs import (
    BatchConverterPort,
    ConversionBatchRejectedError,
    ConversionCommittedUnverifiedError,
    job_conversion_error_code,
    job_serialize_element_failure,
    job_serialize_engine_result,
)
from app.mapping import ConversionValidationError
from app.api.schemas import ConversionBatchSchema, api_serialize_conversion_outcome


def api_create_conversion_router(batch_converter: BatchConverterPort) -> APIRouter:
    """Create conversion router with the batch convert endpoint.

    Args:
        batch_converter: Job-layer batch converter.

    Returns:
        APIRouter: Router exposing conversion APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if batch_converter is None:
        raise ValueError("batch_converter must not be None")

    router = APIRouter(prefix="/conversion", tags=["conversion"])

    @router.post("/leads")
    def api_conversion_convert_leads(batch: ConversionBatchSchema) -> JSONResponse:
        """Convert an ordered batch of leads; every element commits or none does.

        Args:
            batch: Validated batch payload.

        Returns:
            JSONResponse: Ordered outcomes, or a batch-level error payload.
        """

        conversion_requests = [request_schema.api_to_conversion_request() for request_schema in batch.requests]
        try:
            batch_result = batch_converter.job_convert_batch(conversion_requests)
        except ConversionValidationError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
                "request_index": error.request_index,
                "field_name": error.field_name,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)
        except ConversionBatchRejectedError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
                "batch_id": error.batch_id,
                "failures": [job_serialize_element_failure(failure) for failure in error.failures],
            }
            return JSONResponse(content=payload, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        except ConversionCommittedUnverifiedError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
                "committed": True,
                "batch_id": error.batch_id,
                "results": [job_serialize_engine_result(result) for result in error.results],
            }
            return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
        except ConversionEngineContractError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
                "committed": error.committed,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
        except TimeoutError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_504_GATEWAY_TIMEOUT)
        except ConnectionError as error:
            payload = {
                "status": "error",
                "code": job_conversion_error_code(error),
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)

        payload = {
            "batch_id": batch_result.batch_id,
            "outcomes": [api_serialize_conversion_outcome(outcome) for outcome in batch_result.outcomes],
            "timeline": batch_result.timeline,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
