from pathlib import Path

import pytest

from morse_studio.config import (
    StudioConfig,
    config_from_dict,
    load_config,
    save_config,
)
from morse_studio.errors import ConfigError

REPO_CONFIG = Path(__file__).resolve().parent.parent / 'config.yaml'


def test_defaults():
    config = StudioConfig()
    assert config.translator.wpm == 20
    assert config.translator.tone_frequency == 700
    assert config.translator.export_block_size == 1152
    assert config.decoder.threshold == 0.5
    assert config.decoder.window_ms == 10
    assert config.limits.wpm_min == 5
    assert config.limits.wpm_max == 60


def test_shipped_config_matches_defaults():
    assert load_config(REPO_CONFIG).to_dict() == StudioConfig().to_dict()


def test_partial_yaml_overrides(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("decoder:\n  wpm: 15\n  threshold: 0.3\nlogging:\n  level: DEBUG\n")
    config = load_config(path)
    assert config.decoder.wpm == 15
    assert config.decoder.threshold == 0.3
    assert config.decoder.target_frequency == 700
    assert config.translator.wpm == 20
    assert config.logging.level == 'DEBUG'


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text("")
    assert load_config(path) == StudioConfig()


@pytest.mark.parametrize("data", [
    {'decoder': {'speed': 20}},
    {'playback': {}},
    {'decoder': [1, 2]},
    {'decoder': {'threshold': 1.5}},
    {'decoder': {'window_ms': 0}},
    {'translator': {'wpm': 100}},
    {'translator': {'gain': 2}},
    {'limits': {'wpm_min': 30, 'wpm_max': 10}},
])
def test_invalid_config_rejected(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / 'missing.yaml')

    bad = tmp_path / 'bad.yaml'
    bad.write_text("decoder: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(bad)


def test_save_and_reload(tmp_path):
    config = config_from_dict({'translator': {'wpm': 25, 'tone_frequency': 600}})
    path = tmp_path / 'saved.yaml'
    save_config(config, path)
    assert load_config(path) == config
