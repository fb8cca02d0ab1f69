"""Domain models used across application layer boundaries."""

from .models import ConversionOutcome, ConversionRequest, HealthStatus
from .timeline import domain_build_stage_event, domain_build_stage_failure_event

__all__ = [
	"ConversionOutcome",
	"ConversionRequest",
	"HealthStatus",
	"domain_build_stage_event",
	"domain_build_stage_failure_event",
]
