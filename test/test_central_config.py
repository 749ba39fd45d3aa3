# test/test_central_config.py

import logging
import os
import tomllib

import pytest

from loader.central_config import DEFAULT_CONFIG_PATH, load_fis_config


def test_central_config_loads():
    config = load_fis_config(DEFAULT_CONFIG_PATH)

    assert os.path.isfile(config.definitions_path)
    assert os.path.isfile(config.rules_path)
    assert config.output_marker == "Tip"
    assert config.strict is False
    assert config.crisp_values == {"service": 40.0, "food": 60.0}
    assert config.routing == {
        "service": ["Service", "waiting_time"],
        "food": ["Food", "price"],
    }
    assert config.console_level == logging.INFO


def test_paths_resolve_relative_to_config_file(make_config, tmp_path):
    config = load_fis_config(str(make_config()))
    assert config.definitions_path == str(tmp_path / "variables.txt")
    assert config.rules_path == str(tmp_path / "rules.txt")
    assert config.console_level == logging.WARNING


def test_missing_sections_fall_back_to_defaults(tmp_path):
    cfg = tmp_path / "empty.toml"
    cfg.write_text("", encoding="utf-8")
    config = load_fis_config(str(cfg))
    assert config.definitions_path is None
    assert config.output_marker == "Tip"
    assert config.crisp_values == {}
    assert config.log_level == logging.DEBUG


def test_channel_without_value_only_routes(tmp_path):
    cfg = tmp_path / "c.toml"
    cfg.write_text('[[channels]]\nname = "food"\n', encoding="utf-8")
    config = load_fis_config(str(cfg))
    assert config.routing == {"food": []}
    assert config.crisp_values == {}


@pytest.mark.parametrize(
    "body",
    [
        '[[channels]]\nvalue = 3.0\n',
        '[logging]\nCONSOLE_LEVEL = "LOUD"\n',
        '[[channels]]\nname = "service"\nvalue = nan\n',
        '[[channels]]\nname = "food"\nvalue = -inf\n',
    ],
)
def test_invalid_config_raises_value_error(tmp_path, body):
    cfg = tmp_path / "bad.toml"
    cfg.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_fis_config(str(cfg))


def test_malformed_toml(tmp_path):
    cfg = tmp_path / "broken.toml"
    cfg.write_text("[files\n", encoding="utf-8")
    with pytest.raises(tomllib.TOMLDecodeError):
        load_fis_config(str(cfg))


def test_missing_config_file(tmp_path):
    with pytest.raises(OSError):
        load_fis_config(str(tmp_path / "nope.toml"))
