from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from blendsearch.backend.types import BackendSource
from blendsearch.blender.planner import compute_blend_limit
from blendsearch.util import PROJECT_ROOT, load_yaml_config
from blendsearch.util.logging import LoggingConfig

_BLENDER_CONFIG_PATH = PROJECT_ROOT / "config" / "blender.yaml"


@dataclass
class BlendConfig:
    boost_position: int = 0
    boost_count: int = 0
    block_size: int = 10
    parallel: bool = True

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ValueError(f"'blending.block_size' must be positive, got {self.block_size}")
        if self.boost_position < 0 or self.boost_count < 0:
            raise ValueError("'blending.boost_position' and 'blending.boost_count' must not be negative")

    @property
    def blend_limit(self) -> int:
        return compute_blend_limit(self.boost_position, self.boost_count)


@dataclass
class BackendSourceConfig:
    identifier: str
    path: Path | None = None


@dataclass
class BlenderConfig:
    blending: BlendConfig = field(default_factory=BlendConfig)
    mappings: dict[str, str] = field(default_factory=dict)
    backends: dict[BackendSource, BackendSourceConfig] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    identifier: str = "blender"


def load_blender_config(config_path: Path = _BLENDER_CONFIG_PATH) -> BlenderConfig:
    raw = load_yaml_config(config_path)
    return _parse_config(raw, base_dir=config_path.parent)


def _parse_config(raw: dict[str, Any], base_dir: Path = PROJECT_ROOT) -> BlenderConfig:
    blending_raw = raw.get("blending", {}) or {}
    logging_raw = raw.get("logging", {}) or {}

    mappings_raw = raw.get("mappings", {}) or {}
    if not isinstance(mappings_raw, dict):
        raise ValueError("'mappings' must be a mapping of primary field to secondary field")

    return BlenderConfig(
        blending=BlendConfig(
            boost_position=int(blending_raw.get("boost_position", 0)),
            boost_count=int(blending_raw.get("boost_count", 0)),
            block_size=int(blending_raw.get("block_size", 10)),
            parallel=bool(blending_raw.get("parallel", True)),
        ),
        mappings={str(k): str(v) for k, v in mappings_raw.items()},
        backends=_parse_backends(raw.get("backends", {}) or {}, base_dir),
        logging=LoggingConfig(
            json_output=bool(logging_raw.get("json_output", True)),
            log_level=str(logging_raw.get("log_level", "INFO")),
            stream=str(logging_raw.get("stream", "stdout")),
            handler_name=str(logging_raw.get("handler_name", "blendsearch")),
        ),
        identifier=str(raw.get("identifier", "blender")),
    )


def _parse_backends(raw: dict[str, Any], base_dir: Path) -> dict[BackendSource, BackendSourceConfig]:
    backends: dict[BackendSource, BackendSourceConfig] = {}
    for key, entry in raw.items():
        try:
            source = BackendSource(key)
        except ValueError:
            raise ValueError(f"Unknown backend '{key}', expected 'primary' or 'secondary'") from None

        entry = entry or {}
        path_raw = entry.get("path", "")
        path: Path | None = None
        if path_raw:
            path = Path(path_raw)
            if not path.is_absolute():
                path = base_dir / path

        backends[source] = BackendSourceConfig(
            identifier=str(entry.get("identifier", source.value)),
            path=path,
        )
    return backends
