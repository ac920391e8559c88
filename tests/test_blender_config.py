from pathlib import Path

import pytest

from blendsearch.backend.types import BackendSource
from blendsearch.blender.config import BlendConfig, _parse_config, load_blender_config


class TestBlendConfig:
    def test_defaults(self) -> None:
        config = BlendConfig()

        assert config.block_size == 10
        assert config.blend_limit == 20
        assert config.parallel is True

    def test_blend_limit_from_boost(self) -> None:
        assert BlendConfig(boost_position=15, boost_count=10).blend_limit == 25

    def test_non_positive_block_size_raises(self) -> None:
        with pytest.raises(ValueError, match="block_size"):
            BlendConfig(block_size=0)

    def test_negative_boost_raises(self) -> None:
        with pytest.raises(ValueError, match="boost"):
            BlendConfig(boost_position=-1)


class TestParseConfig:
    def test_empty_config_uses_defaults(self) -> None:
        config = _parse_config({})

        assert config.blending == BlendConfig()
        assert config.mappings == {}
        assert config.backends == {}
        assert config.identifier == "blender"
        assert config.logging.json_output is True
        assert config.logging.log_level == "INFO"

    def test_full_config(self, tmp_path: Path) -> None:
        raw = {
            "identifier": "combined",
            "blending": {"boost_position": 15, "boost_count": 10, "block_size": 5, "parallel": False},
            "mappings": {"format": "type"},
            "backends": {
                "primary": {"identifier": "local", "path": "primary.yaml"},
                "secondary": {"identifier": "national", "path": "/srv/data/secondary.yaml"},
            },
            "logging": {"json_output": False, "log_level": "debug", "stream": "stderr", "handler_name": "blend"},
        }

        config = _parse_config(raw, base_dir=tmp_path)

        assert config.identifier == "combined"
        assert config.blending.blend_limit == 25
        assert config.blending.block_size == 5
        assert config.blending.parallel is False
        assert config.mappings == {"format": "type"}
        assert config.backends[BackendSource.PRIMARY].identifier == "local"
        assert config.backends[BackendSource.PRIMARY].path == tmp_path / "primary.yaml"
        assert config.backends[BackendSource.SECONDARY].path == Path("/srv/data/secondary.yaml")
        assert config.logging.json_output is False
        assert config.logging.log_level == "debug"
        assert config.logging.stream == "stderr"
        assert config.logging.handler_name == "blend"

    def test_backend_identifier_defaults_to_role(self) -> None:
        config = _parse_config({"backends": {"secondary": {}}})

        assert config.backends[BackendSource.SECONDARY].identifier == "secondary"
        assert config.backends[BackendSource.SECONDARY].path is None

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ValueError, match="tertiary"):
            _parse_config({"backends": {"tertiary": {}}})

    def test_unknown_log_stream_raises(self) -> None:
        with pytest.raises(ValueError, match="logging.stream"):
            _parse_config({"logging": {"stream": "syslog"}})

    def test_mappings_must_be_mapping(self) -> None:
        with pytest.raises(ValueError, match="mappings"):
            _parse_config({"mappings": ["format"]})


class TestLoadBlenderConfig:
    def test_loads_yaml_with_env_placeholders(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BLEND_BLOCK", "4")
        path = tmp_path / "blender.yaml"
        path.write_text(
            "blending:\n"
            "  block_size: $(BLEND_BLOCK)\n"
            "backends:\n"
            "  primary:\n"
            "    path: data/p.yaml\n"
        )

        config = load_blender_config(path)

        assert config.blending.block_size == 4
        assert config.backends[BackendSource.PRIMARY].path == tmp_path / "data" / "p.yaml"

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_blender_config(tmp_path / "absent.yaml")

        assert config.blending == BlendConfig()
