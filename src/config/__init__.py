"""
Configuration loaders.

App config:      reads config.yaml, resolves env vars for secrets.
Pairing config:  reads pairing.default.json (or override), validates against JSON Schema.
"""

from config.loader import (
    AlertingConfig,
    AppConfig,
    DataConfig,
    JournalConfig,
    PairingSection,
    load_config,
)
from config.pairing_config import (
    PairingConfig,
    PairingConfigError,
    load_pairing_config,
)

__all__ = [
    # App config (YAML)
    "AlertingConfig",
    "AppConfig",
    "DataConfig",
    "JournalConfig",
    "PairingSection",
    "load_config",
    # Pairing config (JSON + schema)
    "PairingConfig",
    "PairingConfigError",
    "load_pairing_config",
]
