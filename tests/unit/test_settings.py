"""Tests for layout settings and the YAML defaults."""

import pytest
import yaml

from erdplace.settings import (
    DEFAULTS_PATH,
    LayoutSettings,
    get_default_settings,
    load_settings,
    reload_defaults,
)


class TestDefaults:
    """Tests for the packaged defaults."""

    def test_yaml_matches_dataclass(self):
        assert get_default_settings() == LayoutSettings()

    def test_yaml_keys_are_camel_case(self):
        with open(DEFAULTS_PATH) as f:
            data = yaml.safe_load(f)
        assert set(data) == set(LayoutSettings().to_dict())

    def test_documented_values(self):
        settings = get_default_settings()
        assert settings.min_table_distance == 60
        assert settings.min_connection_distance == 40
        assert settings.max_iterations == 100
        assert settings.damping_factor == 0.85
        assert settings.repulsion_force == 5000
        assert settings.attraction_force == 0.1
        assert settings.boundary_padding == 50
        assert settings.cluster_separation == 90
        assert settings.orphan_padding == 100
        assert settings.count_crossings is False

    def test_returns_copies(self):
        first = get_default_settings()
        first.max_iterations = 1
        assert get_default_settings().max_iterations == 100

    def test_reload(self):
        reload_defaults()
        assert get_default_settings() == LayoutSettings()


class TestMerge:
    """Tests for shallow override merging."""

    def test_camel_case_keys(self):
        settings = LayoutSettings().merged({"minTableDistance": 80, "dampingFactor": 0.5})
        assert settings.min_table_distance == 80.0
        assert settings.damping_factor == 0.5

    def test_snake_case_keys(self):
        settings = LayoutSettings().merged({"repulsion_force": 100})
        assert settings.repulsion_force == 100.0

    def test_merge_does_not_mutate(self):
        base = LayoutSettings()
        base.merged({"maxIterations": 5})
        assert base.max_iterations == 100

    def test_untouched_keys_kept(self):
        settings = LayoutSettings(orphan_padding=10.0).merged({"gridSize": 5})
        assert settings.orphan_padding == 10.0
        assert settings.grid_size == 5.0

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown layout settings"):
            LayoutSettings().merged({"nodeSpacing": 10})

    @pytest.mark.parametrize("value", ["60", None, [1], True])
    def test_non_numeric(self, value):
        with pytest.raises(ValueError):
            LayoutSettings().merged({"minTableDistance": value})

    def test_integer_settings(self):
        assert LayoutSettings().merged({"maxIterations": 50.0}).max_iterations == 50
        with pytest.raises(ValueError):
            LayoutSettings().merged({"maxIterations": 2.5})
        with pytest.raises(ValueError):
            LayoutSettings().merged({"overlapMaxPasses": -1})

    def test_boolean_settings(self):
        assert LayoutSettings().merged({"countCrossings": True}).count_crossings is True
        with pytest.raises(ValueError):
            LayoutSettings().merged({"countCrossings": 1})

    def test_to_dict(self):
        data = LayoutSettings().to_dict()
        assert data["minTableDistance"] == 60.0
        assert data["maxVelocity"] == 100.0
        assert "min_table_distance" not in data


class TestLoadSettings:
    """Tests for settings files."""

    def test_no_path_gives_defaults(self):
        assert load_settings() == LayoutSettings()

    def test_overrides_file(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text("minTableDistance: 30\nmaxIterations: 10\n")

        settings = load_settings(str(path))
        assert settings.min_table_distance == 30.0
        assert settings.max_iterations == 10
        assert settings.cluster_separation == 90.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(str(path)) == LayoutSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(str(path))
