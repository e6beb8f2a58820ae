"""
Configuration.

Defaults live in the dataclasses below; a YAML file (see config.yaml at the
repository root) may override any subset of them.

Usage:
    config = load_config('config.yaml')
    config.decoder.threshold      # 0.5
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError


@dataclass
class TranslatorConfig:
    """Text -> audio settings."""
    wpm: float = 20                # Words per minute
    tone_frequency: float = 700    # Tone frequency in Hz
    gain: float = 0.5              # Output amplitude (0-1)
    ramp: float = 0.005            # Attack/decay time in seconds (prevents clicks)
    sample_rate: int = 44100       # Export sample rate
    lead_in: float = 0.05          # Live playback starts this long after "now"
    export_block_size: int = 1152  # Samples per encoder block
    mp3_bitrate: int = 128         # kbps


@dataclass
class DecoderConfig:
    """Audio -> text settings."""
    wpm: float = 20                # Expected sender speed
    target_frequency: float = 700  # Tone to track in Hz
    threshold: float = 0.5         # Fraction of peak magnitude counted as "on"
    window_ms: float = 10          # Analysis window length


@dataclass
class LimitsConfig:
    """Bounds for user-facing controls."""
    wpm_min: float = 5
    wpm_max: float = 60
    frequency_min: float = 300
    frequency_max: float = 1200
    max_text_length: int = 140     # Display guideline only


@dataclass
class LoggingConfig:
    level: str = 'INFO'


@dataclass
class StudioConfig:
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        return asdict(self)


def _build_section(section_cls, name: str, values):
    if values is None:
        return section_cls()
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{name}' must be a mapping, got {type(values).__name__}")

    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(unknown)}")
    return section_cls(**values)


def config_from_dict(data: Optional[dict]) -> StudioConfig:
    """Build a StudioConfig from a (possibly partial) nested dict."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")

    section_classes = {
        'translator': TranslatorConfig,
        'decoder': DecoderConfig,
        'limits': LimitsConfig,
        'logging': LoggingConfig,
    }
    unknown = sorted(set(data) - set(section_classes))
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(unknown)}")

    config = StudioConfig(**{
        name: _build_section(cls, name, data.get(name))
        for name, cls in section_classes.items()
    })
    validate_config(config)
    return config


def validate_config(config: StudioConfig):
    """Check value ranges the engine depends on."""
    limits = config.limits
    if not 0 < limits.wpm_min <= limits.wpm_max:
        raise ConfigError("limits.wpm_min must be positive and not above wpm_max")
    for name, wpm in (('translator', config.translator.wpm), ('decoder', config.decoder.wpm)):
        if not limits.wpm_min <= wpm <= limits.wpm_max:
            raise ConfigError(f"{name}.wpm {wpm} outside {limits.wpm_min}-{limits.wpm_max}")
    if not 0 <= config.decoder.threshold <= 1:
        raise ConfigError("decoder.threshold must be between 0 and 1")
    if config.decoder.window_ms <= 0:
        raise ConfigError("decoder.window_ms must be positive")
    if not 0 <= config.translator.gain <= 1:
        raise ConfigError("translator.gain must be between 0 and 1")
    if config.translator.sample_rate <= 0:
        raise ConfigError("translator.sample_rate must be positive")


def load_config(config_path) -> StudioConfig:
    """Load configuration from a YAML file."""
    path = Path(config_path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return config_from_dict(data)


def save_config(config: StudioConfig, save_path):
    """Save configuration to a YAML file."""
    with open(save_path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
