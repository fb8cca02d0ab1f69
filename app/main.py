"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or converts one batch read from a JSON file.
"""

import argparse
import json
import sys
from pathlib import Path

import uvicorn
from pydantic import TypeAdapter

from app.api.schemas import ConversionRequestSchema, api_serialize_conversion_outcome
from app.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_batch_converter,
    bootstrap_create_engine_adapter,
)
from app.config import config_load_settings
from app.jobs import (
    BatchConverterPort,
    ConversionBatchRejectedError,
    ConversionCommittedUnverifiedError,
    job_conversion_error_code,
    job_serialize_engine_result,
)
from app.logging_config import configure_logging
from app.mapping import ConversionValidationError

_REQUEST_LIST_ADAPTER = TypeAdapter(list[ConversionRequestSchema])


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Lead Convert Service runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "convert"),
        help="Runtime command: `api` starts server, `convert` converts one batch read from a JSON file",
        type=str,
    )
    argument_parser.add_argument(
        "requests_file",
        nargs="?",
        type=Path,
        help="JSON file holding an array of conversion requests (or {\"requests\": [...]}) for `convert`",
    )
    parsed_arguments = argument_parser.parse_args()
    if parsed_arguments.command == "convert" and parsed_arguments.requests_file is None:
        argument_parser.error("`convert` requires a requests_file argument")

    settings = config_load_settings()
    configure_logging(settings.log_level)

    if parsed_arguments.command == "convert":
        engine = bootstrap_create_engine_adapter(settings)
        try:
            exit_code = main_convert_file(
                requests_file=parsed_arguments.requests_file,
                batch_converter=bootstrap_create_batch_converter(settings, engine=engine),
            )
        finally:
            engine.engine_close()
        if exit_code != 0:
            raise SystemExit(exit_code)
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


def main_convert_file(requests_file: Path, batch_converter: BatchConverterPort) -> int:
    """Convert one batch read from a JSON file and print outcomes to stdout.

    Args:
        requests_file: Path to JSON request payload.
        batch_converter: Batch converter used for the conversion.

    Returns:
        int: Process exit code, 0 on success and 1 on any conversion failure.
    """

    # Stdout carries the outcomes JSON; logs must go to stderr.
    configure_logging()

    try:
        raw_payload = json.loads(requests_file.read_text(encoding="utf-8"))
        if isinstance(raw_payload, dict):
            raw_payload = raw_payload.get("requests")
        request_schemas = _REQUEST_LIST_ADAPTER.validate_python(raw_payload)
    except (OSError, ValueError) as error:
        # pydantic ValidationError and json.JSONDecodeError are both ValueError subclasses.
        _main_print_error(code="CONVERSION_INPUT_INVALID", message=str(error))
        return 1

    conversion_requests = [request_schema.api_to_conversion_request() for request_schema in request_schemas]
    try:
        batch_result = batch_converter.job_convert_batch(conversion_requests)
    except ConversionCommittedUnverifiedError as error:
        _main_print_error(
            code=job_conversion_error_code(error),
            message=str(error),
            details={
                "committed": True,
                "batch_id": error.batch_id,
                "results": [job_serialize_engine_result(result) for result in error.results],
            },
        )
        return 1
    except (ConversionValidationError, ConversionBatchRejectedError, TimeoutError, ConnectionError, RuntimeError) as error:
        _main_print_error(code=job_conversion_error_code(error), message=str(error))
        return 1

    print(
        json.dumps(
            {
                "batch_id": batch_result.batch_id,
                "outcomes": [api_serialize_conversion_outcome(outcome) for outcome in batch_result.outcomes],
            },
            indent=2,
        )
    )
    return 0


def _main_print_error(code: str, message: str, details: dict[str, object] | None = None) -> None:
    payload: dict[str, object] = {"status": "error", "code": code, "message": message}
    payload.update(details or {})
    print(json.dumps(payload), file=sys.stderr)


if __name__ == "__main__":
    main()
