"""Job layer package for batch conversion orchestration boundaries."""

from .batch_converter import (
	BatchConverterConfig,
	LeadConvertBatchConverter,
	job_build_rejection_message,
	job_conversion_error_code,
	job_serialize_element_failure,
	job_serialize_engine_result,
)
from .interfaces import (
	BatchConverterPort,
	ConversionBatchRejectedError,
	ConversionBatchResult,
	ConversionCommittedUnverifiedError,
)

__all__ = [
	"BatchConverterConfig",
	"BatchConverterPort",
	"ConversionBatchRejectedError",
	"ConversionBatchResult",
	"ConversionCommittedUnverifiedError",
	"LeadConvertBatchConverter",
	"job_build_rejection_message",
	"job_conversion_error_code",
	"job_serialize_element_failure",
	"job_serialize_engine_result",
]
