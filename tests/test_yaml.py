from pathlib import Path

import pytest

from blendsearch.util.yaml import load_yaml_config, load_yaml_data


class TestLoadYamlConfig:
    def test_resolves_env_placeholders(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BLEND_DATA", "/srv/data")
        path = tmp_path / "config.yaml"
        path.write_text("backends:\n  primary:\n    path: $(BLEND_DATA)/p.yaml\n  tags: [$(BLEND_DATA)]\n")

        raw = load_yaml_config(path)

        assert raw["backends"]["primary"]["path"] == "/srv/data/p.yaml"
        assert raw["backends"]["tags"] == ["/srv/data"]

    def test_unset_optional_variable_becomes_empty(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BLEND_UNSET", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("value: x$(BLEND_UNSET)y\n")

        assert load_yaml_config(path) == {"value": "xy"}

    def test_missing_required_variable_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BLEND_REQUIRED", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("value: $(BLEND_REQUIRED)\n")

        with pytest.raises(ValueError, match="BLEND_REQUIRED"):
            load_yaml_config(path, required_vars={"BLEND_REQUIRED"})

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_yaml_config(tmp_path / "nope.yaml", defaults={"a": 1}) == {"a": 1}
        assert load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            load_yaml_config(path)

    def test_empty_file_is_empty_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_yaml_config(path) == {}


class TestLoadYamlData:
    def test_reads_lists(self, tmp_path: Path) -> None:
        path = tmp_path / "data.yaml"
        path.write_text("- 1\n- 2\n")

        assert load_yaml_data(path) == [1, 2]
