"""Configuration module for the OpenCode model sync tool."""

from opencode_model_sync.config.model_config import (
    AGENTS_DIR,
    CONFIG_FILE,
    OPENCODE_CONFIG,
    VALID_MODEL_PREFIXES,
    ModelConfig,
    ModelEntry,
    UpdaterSettings,
    load_model_config,
    validate_model_id,
)

__all__ = [
    # Paths
    "AGENTS_DIR",
    "CONFIG_FILE",
    "OPENCODE_CONFIG",
    # Model config
    "VALID_MODEL_PREFIXES",
    "ModelConfig",
    "ModelEntry",
    "UpdaterSettings",
    "load_model_config",
    "validate_model_id",
]
