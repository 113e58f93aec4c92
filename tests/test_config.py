import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from terrain_wfc import WfcConfig, load_config, save_config


def test_defaults():
    config = WfcConfig()
    assert config.floor_weight == 0.4
    assert config.pattern_size == 3
    assert config.enable_backtracking is True
    assert config.max_backtrack_depth is None
    assert config.max_backtracks is None
    assert config.verbose is False


def test_from_dict_coerces_and_ignores_unknown_keys():
    config = WfcConfig.from_dict({
        "floor_weight": "0.25",
        "pattern_size": "2",
        "enable_backtracking": "false",
        "max_backtracks": 10,
        "algorithm": "wfc",
    })
    assert config.floor_weight == 0.25
    assert config.pattern_size == 2
    assert config.enable_backtracking is False
    assert config.max_backtracks == 10
    assert WfcConfig.from_dict(None) == WfcConfig()


@pytest.mark.parametrize("params", [
    {"pattern_size": 0},
    {"floor_weight": 1.5},
    {"max_backtrack_depth": -1},
    {"max_backtracks": -2},
])
def test_invalid_values_raise(params):
    with pytest.raises(ValueError):
        WfcConfig.from_dict(params)


def test_load_config_section(tmp_path):
    path = tmp_path / "wfc.yaml"
    path.write_text(
        "wfc:\n"
        "  pattern_size: 4\n"
        "  enable_backtracking: false\n"
        "  max_backtrack_depth: 32\n"
    )
    config = load_config(str(path))
    assert config.pattern_size == 4
    assert config.enable_backtracking is False
    assert config.max_backtrack_depth == 32


def test_load_config_top_level_and_empty(tmp_path):
    top = tmp_path / "top.yaml"
    top.write_text("floor_weight: 0.1\nverbose: true\n")
    config = load_config(str(top))
    assert config.floor_weight == 0.1
    assert config.verbose is True

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_config(str(empty)) == WfcConfig()


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_save_then_load(tmp_path):
    path = tmp_path / "saved.yaml"
    config = WfcConfig(pattern_size=2, max_backtracks=100)
    save_config(config, str(path))
    assert load_config(str(path)) == config


def test_shipped_config_loads():
    path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs", "wfc.yaml")
    config = load_config(path)
    assert config.pattern_size == 3
    assert config.max_backtracks == 5000
