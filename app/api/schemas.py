"""HTTP request schemas for the conversion API.

Field labels, descriptions and required markers live here only; they feed the
generated OpenAPI document and are never read by mapping or job logic.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain import ConversionOutcome, ConversionRequest


class ConversionRequestSchema(BaseModel):
    """One caller-supplied lead conversion request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source_id: str = Field(
        alias="sourceId",
        min_length=1,
        title="Source ID",
        description="Identifier of the source lead record to convert.",
    )
    converted_status: str = Field(
        alias="convertedStatus",
        min_length=1,
        title="Converted Status",
        description="Converted status value applied to the source record.",
    )
    account_target: str | None = Field(
        default=None,
        alias="accountTarget",
        title="Account ID",
        description="Existing account to convert into. Leave empty to create a new account.",
    )
    contact_target: str | None = Field(
        default=None,
        alias="contactTarget",
        title="Contact ID",
        description="Existing contact to convert into. Leave empty to create a new contact.",
    )
    opportunity_target: str | None = Field(
        default=None,
        alias="opportunityTarget",
        title="Opportunity ID",
        description="Existing opportunity to convert into. Leave empty to create a new opportunity.",
    )
    overwrite_source: bool | None = Field(
        default=False,
        alias="overwriteSource",
        title="Overwrite Lead Source",
        description="Copy the source record's lead source onto the destination contact.",
    )
    create_opportunity: bool | None = Field(
        default=True,
        alias="createOpportunity",
        title="Create Opportunity",
        description="Create an opportunity during conversion. Defaults to true.",
    )
    opportunity_name: str | None = Field(
        default=None,
        alias="opportunityName",
        title="Opportunity Name",
        description="Name of the new opportunity when one is created.",
    )
    owner_id: str | None = Field(
        default=None,
        alias="ownerId",
        title="Owner ID",
        description="Owner of the destination records. Defaults to the source record owner.",
    )
    notify_owner: bool | None = Field(
        default=False,
        alias="notifyOwner",
        title="Send Email to Owner",
        description="Send a notification email to the destination owner.",
    )

    def api_to_conversion_request(self) -> ConversionRequest:
        """Convert validated schema payload into the domain request contract.

        Returns:
            ConversionRequest: Domain conversion request.
        """

        return ConversionRequest(
            source_id=self.source_id,
            converted_status=self.converted_status,
            account_target=self.account_target,
            contact_target=self.contact_target,
            opportunity_target=self.opportunity_target,
            overwrite_source=self.overwrite_source,
            create_opportunity=self.create_opportunity,
            opportunity_name=self.opportunity_name,
            owner_id=self.owner_id,
            notify_owner=self.notify_owner,
        )


class ConversionBatchSchema(BaseModel):
    """Ordered batch of lead conversion requests submitted in one call."""

    requests: list[ConversionRequestSchema] = Field(
        description="Ordered conversion requests. Outcomes are returned in the same order.",
    )


def api_serialize_conversion_outcome(outcome: ConversionOutcome) -> dict[str, object]:
    """Serialize one conversion outcome to its caller-facing JSON shape.

    Args:
        outcome: Domain conversion outcome.

    Returns:
        dict[str, object]: JSON-serializable outcome payload.
    """

    return {
        "sourceId": outcome.source_id,
        "accountId": outcome.account_id,
        "contactId": outcome.contact_id,
        "opportunityId": outcome.opportunity_id,
    }
