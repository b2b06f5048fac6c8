import json

import pytest

from spacemichael.core.configio import RunConfig, load_config, load_run_config, save_config
from spacemichael.core.pinmap import PinMap
from spacemichael.drivers.output_driver import ConfigurationError


def test_config_save_load(tmp_path):
    cfg_path = tmp_path / "test_config.json"
    cfg = {"cooldown_ms": 10, "driver": "memory"}

    save_config(cfg, cfg_path)
    assert cfg_path.exists()

    loaded = load_config(cfg_path)
    assert loaded == cfg


def test_load_nonexistent_config(tmp_path):
    assert load_config(tmp_path / "nope.json") is None


def test_load_malformed_config(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) is None


def test_defaults_include_demo_presets():
    cfg = RunConfig()
    assert cfg.pins.outputs == ("out1", "out2", "out3", "out4")
    assert set(cfg.sequences) >= {"nightrider", "allonoff", "one"}
    assert cfg.states["allOff"] == {"out1": 0, "out2": 0, "out3": 0, "out4": 0}


def test_from_dict_resolves_named_and_inline_states():
    cfg = RunConfig.from_dict({
        "pins": {"red": 5, "green": 6},
        "cooldown_ms": 20,
        "states": {"stop": {"red": 1, "green": 0}},
        "sequences": {"traffic": ["stop", {"red": 0, "green": 1}, "allOff"]},
    })
    assert cfg.cooldown_ms == 20
    steps = cfg.sequences["traffic"]
    assert steps[0] == {"red": 1, "green": 0}
    assert steps[1] == {"red": 0, "green": 1}
    assert steps[2] == {"red": 0, "green": 0}


@pytest.mark.parametrize("raw", [
    {"sequences": {"x": ["missing"]}},
    {"states": {"bad": {"out9": 1}}},
    {"sequences": {"x": [{"out1": 5}]}},
    {"driver": "carrier-pigeon"},
    {"cooldown_ms": -1},
    {"pins": {"a": 1, "b": 1}},
    {"pins": {}},
    {"pins": [1, 2]},
    {"pins": "out1"},
    {"states": ["allOn"]},
    {"states": {"s": [1]}},
    {"sequences": {"x": 5}},
    {"sequences": ["nightrider"]},
    {"sequences": {"x": [7]}},
    {"active_high": "yes"},
    {"serial_port": 3},
])
def test_from_dict_rejects_bad_config(raw):
    with pytest.raises(ConfigurationError):
        RunConfig.from_dict(raw)


def test_to_dict_keeps_only_user_presets(tmp_path):
    cfg = RunConfig.from_dict({"states": {"half": {"out1": 1, "out2": 1}}})
    raw = cfg.to_dict()
    assert raw["states"] == {"half": {"out1": 1, "out2": 1}}
    assert raw["sequences"] == {}

    path = tmp_path / "cfg.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    assert load_run_config(path).states["half"] == cfg.states["half"]


def test_load_run_config_falls_back_to_defaults(tmp_path):
    cfg = load_run_config(tmp_path / "absent.json")
    assert cfg.pins == PinMap.default()


def test_save_config_returns_written_path(tmp_path):
    path = tmp_path / "nested" / "cfg.json"
    assert save_config({"driver": "gpio"}, path) == path
    assert load_config(path) == {"driver": "gpio"}


def test_save_config_reports_failure(tmp_path):
    blocker = tmp_path / "cfg.json"
    blocker.mkdir()
    assert save_config({}, blocker) is None
