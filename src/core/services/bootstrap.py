"""Process-level wiring of settings, storage and pipeline."""

from functools import lru_cache

from core.infrastructure.factory import build_storage
from core.models.settings import ServiceSettings
from core.services.asset_pipeline import AssetPipeline


@lru_cache(maxsize=1)
def get_settings() -> ServiceSettings:
    """Read settings from the environment once per process."""
    return ServiceSettings.from_env()


@lru_cache(maxsize=1)
def get_pipeline() -> AssetPipeline:
    """Build the pipeline once per process (reused across warm invocations)."""
    settings = get_settings()
    return AssetPipeline(settings=settings, storage=build_storage(settings))


def reset() -> None:
    """Drop cached settings and pipeline so the next call re-reads the environment."""
    get_pipeline.cache_clear()
    get_settings.cache_clear()
