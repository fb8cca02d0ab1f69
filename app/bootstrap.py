"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from app.adapters import HttpConversionEngineAdapter
from app.api import create_api_application
from app.config import AppSettings, config_load_settings
from app.jobs import BatchConverterConfig, LeadConvertBatchConverter


def bootstrap_create_engine_adapter(settings: AppSettings) -> HttpConversionEngineAdapter:
    """Build the HTTP conversion-engine adapter from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        HttpConversionEngineAdapter: Configured engine adapter.
    """

    return HttpConversionEngineAdapter(
        base_url=settings.conversion_engine_base_url,
        token=settings.conversion_engine_token,
        request_timeout_seconds=settings.conversion_engine_timeout_seconds,
    )


def bootstrap_create_batch_converter(
    settings: AppSettings | None = None,
    engine: HttpConversionEngineAdapter | None = None,
) -> LeadConvertBatchConverter:
    """Build batch converter wired to the conversion engine.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.
        engine: Optional engine adapter owned by the caller; built from settings when omitted.

    Returns:
        LeadConvertBatchConverter: Fully wired batch converter.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return LeadConvertBatchConverter(
        engine=engine or bootstrap_create_engine_adapter(resolved_settings),
        config=BatchConverterConfig(max_batch_size=resolved_settings.conversion_max_batch_size),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    The engine HTTP client is closed when the application shuts down.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = bootstrap_create_engine_adapter(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        engine=engine,
        batch_converter=bootstrap_create_batch_converter(resolved_settings, engine=engine),
        shutdown_callbacks=(engine.engine_close,),
    )
