import json

import pytest

from ewcount.config import ConfigError, DictProvider, EnvProvider, FileProvider, load_config, merge_into, reader_for
from ewcount.ew.core.model import Degree
from ewcount.ew.core.options import DEFAULT_DEGREES, WaveOptions


def test_layers_later_wins(tmp_path, monkeypatch):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"ew": {"bar_seconds": 60, "projection": {"bars_ahead": 3}}, "log": {"level": "debug"}}))
    monkeypatch.setenv("EWCOUNT_EW__PROJECTION__BARS_AHEAD", "8")

    cfg = load_config(
        defaults={"ew": {"bar_seconds": 30}, "log": {"level": "info", "json": False}},
        file_path=str(path),
        overrides={"log": {"json": True}},
    )

    assert cfg["ew"]["bar_seconds"] == 60
    assert cfg["ew"]["projection"]["bars_ahead"] == 8
    assert cfg["log"] == {"level": "debug", "json": True}


def test_toml_file(tmp_path):
    pytest.importorskip("tomllib")
    path = tmp_path / "cfg.toml"
    path.write_text('[ew.degrees]\nminor = 4\n\n[log]\nlevel = "warning"\n')
    cfg = load_config({}, str(path), use_env=False)
    assert cfg == {"ew": {"degrees": {"minor": 4}}, "log": {"level": "warning"}}


def test_env_values_read_with_option_types():
    env = {
        "EWCOUNT_EW__DEGREES__MINOR": "4",
        "EWCOUNT_EW__WEIGHTS__PARTIAL_MIN_WAVES": "2",
        "EWCOUNT_EW__SCORE__W5_EQUALITY": "0.8,1.2",
        "EWCOUNT_EW__PROJECTION__NEW_CYCLE_PCT": "0.2",
        "EWCOUNT_EW__BAR_SECONDS": "3600",
        "EWCOUNT_LOG__JSON": "yes",
        "EWCOUNT_LOG_LEVEL": "debug",
        "EWCOUNT_CONFIG": "ignored.json",
        "OTHER_EW__BAR_SECONDS": "1",
    }
    out = EnvProvider(environ=env).load()

    assert out == {
        "ew": {
            "degrees": {"minor": 4.0},
            "weights": {"partial_min_waves": 2},
            "score": {"w5_equality": (0.8, 1.2)},
            "projection": {"new_cycle_pct": 0.2},
            "bar_seconds": 3600,
        },
        "log": {"json": True},
    }
    assert isinstance(out["ew"]["degrees"]["minor"], float)
    assert isinstance(out["ew"]["weights"]["partial_min_waves"], int)


def test_env_unknown_key_or_bad_value():
    with pytest.raises(ConfigError, match="ew.degrees.grand"):
        EnvProvider(environ={"EWCOUNT_EW__DEGREES__GRAND": "8"}).load()
    with pytest.raises(ConfigError, match="ew.projection.bars_ahead"):
        EnvProvider(environ={"EWCOUNT_EW__PROJECTION__BARS_AHEAD": "soon"}).load()
    with pytest.raises(ConfigError):
        EnvProvider(environ={"EWCOUNT_LOG__UTC": "maybe"}).load()


def test_env_feeds_wave_options():
    cfg = load_config({}, use_env=False, overrides=EnvProvider(environ={"EWCOUNT_EW__DEGREES__MINUTE": "2.5"}).load())
    assert WaveOptions.from_config(cfg).degrees == ((2.5, Degree.MINUTE),)


def test_env_can_be_disabled(monkeypatch):
    monkeypatch.setenv("EWCOUNT_LOG__LEVEL", "error")
    assert load_config({"log": {"level": "info"}}, use_env=False) == {"log": {"level": "info"}}


def test_unknown_keys_rejected_after_merge(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"ew": {"projection": {"bars_ahed": 3}}}))
    with pytest.raises(ConfigError, match="bars_ahed"):
        load_config({}, str(path), use_env=False)
    with pytest.raises(ConfigError, match="positive deviation"):
        load_config({"ew": {"degrees": {"minor": 0}}}, use_env=False)
    # sections outside ew/log are left alone
    assert load_config({"ui": {"theme": "dark"}}, use_env=False) == {"ui": {"theme": "dark"}}


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config({}, str(tmp_path / "nope.json"))


def test_malformed_config_file(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="cfg.json"):
        FileProvider(str(path)).load()

    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="top level"):
        FileProvider(str(path)).load()


def test_unsupported_config_format(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("ew: {}")
    with pytest.raises(ConfigError, match="unsupported"):
        FileProvider(str(path)).load()


def test_merge_into_is_deep_and_copies_layers():
    layer = {"a": {"y": 3}}
    base = merge_into({}, DictProvider({"a": {"x": 1, "y": 2}}).load())
    merge_into(base, layer)
    assert base == {"a": {"x": 1, "y": 3}}
    base["a"]["y"] = 9
    assert layer == {"a": {"y": 3}}


def test_reader_for_known_leaves():
    assert reader_for(("ew", "projection", "bars_ahead"))("8") == 8
    assert reader_for(("ew", "weights", "skip_penalty"))("2.5") == 2.5
    with pytest.raises(ConfigError):
        reader_for(("ew", "weights"))


def test_wave_options_from_config():
    cfg = {
        "ew": {
            "degrees": {"minor": 4, "minute": 2.5},
            "weights": {"skip_penalty": 3, "unknown": 1},
            "score": {"w5_equality": [0.8, 1.2]},
            "projection": {"bars_ahead": 8},
            "bar_seconds": 3600,
        }
    }
    opts = WaveOptions.from_config(cfg)

    assert opts.degrees == ((2.5, Degree.MINUTE), (4.0, Degree.MINOR))
    assert opts.weights.skip_penalty == 3
    assert opts.weights.impulse_base == 10
    assert opts.score.w5_equality == (0.8, 1.2)
    assert opts.projection.bars_ahead == 8
    assert opts.bar_seconds == 3600


def test_wave_options_defaults():
    opts = WaveOptions.from_config({})
    assert opts == WaveOptions()
    assert opts.degrees == DEFAULT_DEGREES
    assert opts.bar_seconds is None
