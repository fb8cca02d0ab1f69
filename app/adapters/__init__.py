"""Adapter layer package for conversion-engine integration boundaries."""

from .conversion_engine_http import HttpConversionEngineAdapter, adapter_serialize_engine_request
from .engine_errors import (
	ConversionEngineConnectionError,
	ConversionEngineContractError,
	ConversionEngineError,
	ConversionEngineTimeoutError,
)
from .engine_status_codes import EngineStatusCode, engine_status_default_message, engine_status_is_rollback_marker
from .interfaces import (
	ConversionEnginePort,
	EngineBatchResponse,
	EngineConvertRequest,
	EngineConvertResult,
	EngineElementFailure,
)

__all__ = [
	"ConversionEngineConnectionError",
	"ConversionEngineContractError",
	"ConversionEngineError",
	"ConversionEnginePort",
	"ConversionEngineTimeoutError",
	"EngineBatchResponse",
	"EngineConvertRequest",
	"EngineConvertResult",
	"EngineElementFailure",
	"EngineStatusCode",
	"HttpConversionEngineAdapter",
	"adapter_serialize_engine_request",
	"engine_status_default_message",
	"engine_status_is_rollback_marker",
]
