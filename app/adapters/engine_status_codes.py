"""Canonical conversion-engine status codes and fallback failure messages."""

from __future__ import annotations

from enum import Enum
from typing import Final


class EngineStatusCode(str, Enum):
    """Known engine status codes reported for rejected conversion elements."""

    INVALID_STATUS = "INVALID_STATUS"
    CANNOT_UPDATE_CONVERTED_LEAD = "CANNOT_UPDATE_CONVERTED_LEAD"
    INSUFFICIENT_ACCESS_OR_READONLY = "INSUFFICIENT_ACCESS_OR_READONLY"
    INVALID_CROSS_REFERENCE_KEY = "INVALID_CROSS_REFERENCE_KEY"
    ENTITY_IS_DELETED = "ENTITY_IS_DELETED"
    DUPLICATE_VALUE = "DUPLICATE_VALUE"
    FIELD_CUSTOM_VALIDATION_EXCEPTION = "FIELD_CUSTOM_VALIDATION_EXCEPTION"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    UNABLE_TO_LOCK_ROW = "UNABLE_TO_LOCK_ROW"
    ALL_OR_NONE_OPERATION_ROLLED_BACK = "ALL_OR_NONE_OPERATION_ROLLED_BACK"


ENGINE_UNKNOWN_STATUS_CODE: Final[str] = "UNKNOWN"

ENGINE_STATUS_DEFAULT_MESSAGES: Final[dict[str, str]] = {
    EngineStatusCode.INVALID_STATUS.value: "Converted status is not a valid converted status value.",
    EngineStatusCode.CANNOT_UPDATE_CONVERTED_LEAD.value: "Source record has already been converted.",
    EngineStatusCode.INSUFFICIENT_ACCESS_OR_READONLY.value: "Insufficient access rights to convert the source record.",
    EngineStatusCode.INVALID_CROSS_REFERENCE_KEY.value: "Referenced target record does not exist or is not accessible.",
    EngineStatusCode.ENTITY_IS_DELETED.value: "Source or target record has been deleted.",
    EngineStatusCode.DUPLICATE_VALUE.value: "Conversion would create a duplicate record.",
    EngineStatusCode.FIELD_CUSTOM_VALIDATION_EXCEPTION.value: "A validation rule rejected the converted record.",
    EngineStatusCode.REQUIRED_FIELD_MISSING.value: "A required field is missing on the converted record.",
    EngineStatusCode.UNABLE_TO_LOCK_ROW.value: "Record is locked by another operation. Please try again shortly.",
    EngineStatusCode.ALL_OR_NONE_OPERATION_ROLLED_BACK.value: (
        "Element was rolled back because another element in the batch failed."
    ),
}


def engine_status_default_message(status_code: str, fallback_message: str) -> str:
    """Return canonical default message for an engine status code.

    Args:
        status_code: Upstream engine status code.
        fallback_message: Fallback message when code is unknown.

    Returns:
        str: Canonical message for known code, else provided fallback message.
    """

    return ENGINE_STATUS_DEFAULT_MESSAGES.get(status_code, fallback_message)


def engine_status_is_rollback_marker(status_code: str) -> bool:
    """Return whether a status code only marks collateral all-or-none rollback."""

    return status_code == EngineStatusCode.ALL_OR_NONE_OPERATION_ROLLED_BACK.value
