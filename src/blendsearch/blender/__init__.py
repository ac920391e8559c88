from blendsearch.backend.adapters import StaticBackend
from blendsearch.backend.types import BackendSource
from blendsearch.blender.backend import (
    BlenderBackend,
    Failed,
    Fetched,
    FetchOutcome,
    NotAttempted,
    combine_outcomes,
    split_params,
)
from blendsearch.blender.collection import BlendedCollection
from blendsearch.blender.config import (
    BackendSourceConfig,
    BlendConfig,
    BlenderConfig,
    load_blender_config,
)
from blendsearch.blender.translator import FieldMappingTranslator, IdentityTranslator, QueryTranslator
from blendsearch.util.logging import LoggingConfig


def create_blender_backend(config: BlenderConfig) -> BlenderBackend:
    """Wire two file-backed static backends into a blender."""
    backends: dict[BackendSource, StaticBackend] = {}
    for source in BackendSource:
        source_config = config.backends.get(source)
        if source_config is None or source_config.path is None:
            raise ValueError(f"Missing 'backends.{source.value}.path' in blender config")
        backends[source] = StaticBackend.from_file(source_config.identifier, source_config.path)

    translator: QueryTranslator = (
        FieldMappingTranslator(config.mappings) if config.mappings else IdentityTranslator()
    )
    return BlenderBackend(
        primary=backends[BackendSource.PRIMARY],
        secondary=backends[BackendSource.SECONDARY],
        config=config.blending,
        translator=translator,
        identifier=config.identifier,
    )


__all__ = [
    "BackendSourceConfig",
    "BlendConfig",
    "BlendedCollection",
    "BlenderBackend",
    "BlenderConfig",
    "FetchOutcome",
    "Failed",
    "Fetched",
    "FieldMappingTranslator",
    "IdentityTranslator",
    "LoggingConfig",
    "NotAttempted",
    "QueryTranslator",
    "combine_outcomes",
    "create_blender_backend",
    "load_blender_config",
    "split_params",
]
