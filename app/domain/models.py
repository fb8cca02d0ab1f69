"""Typed domain models shared across runtime layers.

This module provides the caller-facing conversion contracts exchanged between
the HTTP/CLI surfaces, the mapping layer, and the batch converter.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class ConversionRequest:
    """Caller-supplied request to convert one source record.

    Attributes:
        source_id: Identifier of the source record to convert.
        converted_status: Status marker applied to the converted source record.
        account_target: Existing account to convert into, or None to create one.
        contact_target: Existing contact to convert into, or None to create one.
        opportunity_target: Existing opportunity to convert into, or None to create one.
        overwrite_source: Whether the source-provenance field is copied onto the destination contact.
        create_opportunity: Whether a destination opportunity is produced at all.
        opportunity_name: Name for a newly created opportunity.
        owner_id: Owner of destination records, or None to keep the source owner.
        notify_owner: Whether the destination owner receives a notification.
    """

    source_id: str
    converted_status: str
    account_target: str | None = None
    contact_target: str | None = None
    opportunity_target: str | None = None
    overwrite_source: bool | None = False
    create_opportunity: bool | None = True
    opportunity_name: str | None = None
    owner_id: str | None = None
    notify_owner: bool | None = False


@dataclass(frozen=True)
class ConversionOutcome:
    """Caller-facing result of one successful conversion.

    Attributes:
        source_id: Identifier of the converted source record.
        account_id: Account created or linked by the engine.
        contact_id: Contact created or linked by the engine.
        opportunity_id: Opportunity created or linked, None when suppressed.
    """

    source_id: str
    account_id: str | None
    contact_id: str | None
    opportunity_id: str | None
