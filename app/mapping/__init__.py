"""Mapping layer package for caller/engine conversion record transformations."""

from .interfaces import ConversionValidationError, RequestMapperPort
from .service import LeadConvertRequestMapper, RequestMapperConfig

__all__ = [
	"ConversionValidationError",
	"LeadConvertRequestMapper",
	"RequestMapperConfig",
	"RequestMapperPort",
]
