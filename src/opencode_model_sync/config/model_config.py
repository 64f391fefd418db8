"""Model family configuration for OpenCode agents.

This module loads `.opencode/model-config.yaml`, which declares named model
families and maps each agent to one of them:

    models:
      sonnet:
        id: "anthropic/claude-sonnet-4-5"
        temperature: 0.2
        description: "Balanced model for most agents"
    agents:
      code-reviewer: sonnet
      planner: opus

Environment Variables:
    OPENCODE_PROJECT_ROOT: Project root the fixed paths are relative to
    OPENCODE_MODEL_SYNC_LOG_LEVEL: Logging level name (default: WARNING)
    OPENCODE_MODEL_SYNC_TIMEOUT: Timeout in seconds for --check-latest
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from opencode_model_sync.errors import (
    ConfigNotFound,
    ConfigShapeError,
    ConfigSyntaxError,
    InvalidModelId,
    UnknownModelFamily,
)

logger = logging.getLogger(__name__)

CONFIG_FILE = ".opencode/model-config.yaml"
AGENTS_DIR = ".opencode/agent"
OPENCODE_CONFIG = "opencode.json"

VALID_MODEL_PREFIXES = ("anthropic/claude-",)

DEFAULT_FETCH_TIMEOUT = 10.0


def validate_model_id(model_id: Any) -> bool:
    """Check that a model ID uses an accepted provider prefix.

    Args:
        model_id: The model ID from the config (e.g. "anthropic/claude-opus-4-1")

    Returns:
        True if the ID starts with one of VALID_MODEL_PREFIXES
    """
    if not isinstance(model_id, str):
        return False
    return model_id.startswith(VALID_MODEL_PREFIXES)


@dataclass(frozen=True)
class ModelEntry:
    """A single model family: its ID, sampling temperature and description."""
    family: str
    id: str
    temperature: Optional[float] = None
    description: str = ""

    @classmethod
    def from_dict(cls, family: str, data: Any) -> "ModelEntry":
        # Malformed entries still load; the validator rejects them per agent.
        if not isinstance(data, dict):
            logger.warning(f"Model family '{family}' is not a mapping: {data!r}")
            return cls(family=family, id="")

        model_id = data.get("id", "")
        return cls(
            family=family,
            id=model_id if isinstance(model_id, str) else str(model_id),
            temperature=data.get("temperature"),
            description=data.get("description", "") or "",
        )


@dataclass(frozen=True)
class ModelConfig:
    """Model families and the agent-to-family mapping.

    Read once at startup and treated as read-only for the rest of the run.
    """
    models: Dict[str, ModelEntry] = field(default_factory=dict)
    agents: Dict[str, str] = field(default_factory=dict)

    def resolve(self, agent_name: str) -> ModelEntry:
        """Get the validated model entry for an agent.

        Raises:
            UnknownModelFamily: If the agent's family is not in `models`
            InvalidModelId: If the family's ID has no accepted provider prefix
        """
        family = self.agents.get(agent_name)
        entry = self.models.get(family) if isinstance(family, str) else None
        if entry is None:
            raise UnknownModelFamily(agent_name, str(family))

        if not validate_model_id(entry.id):
            raise InvalidModelId(agent_name, entry.id)

        return entry


def load_model_config(path: Union[str, Path]) -> ModelConfig:
    """Load and shape-check the model configuration file.

    Only the presence and type of the top-level keys is checked here. Entry
    level problems are left to the callers so a partial config still updates
    its valid agents.

    Raises:
        ConfigNotFound: If the file does not exist
        ConfigSyntaxError: If the file is not valid YAML
        ConfigShapeError: If `models` or `agents` is missing or not a mapping
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigNotFound(f"Model config not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigSyntaxError(f"Invalid YAML in {config_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigSyntaxError(f"Model config is not valid UTF-8: {config_path} ({e})") from e

    if not isinstance(raw, dict):
        raise ConfigShapeError(f"Model config must be a mapping: {config_path}")

    for key in ("models", "agents"):
        if not isinstance(raw.get(key), dict):
            raise ConfigShapeError(
                f"Model config is missing a '{key}' mapping: {config_path}"
            )

    models = {
        str(family): ModelEntry.from_dict(str(family), data)
        for family, data in raw["models"].items()
    }
    agents = {str(name): family for name, family in raw["agents"].items()}

    logger.info(
        f"Loaded {len(models)} model families and {len(agents)} agents from {config_path}"
    )
    return ModelConfig(models=models, agents=agents)


def _timeout_from_env() -> float:
    value = os.getenv("OPENCODE_MODEL_SYNC_TIMEOUT", "")
    try:
        return float(value) if value else DEFAULT_FETCH_TIMEOUT
    except ValueError:
        logger.warning(f"Ignoring invalid OPENCODE_MODEL_SYNC_TIMEOUT: {value!r}")
        return DEFAULT_FETCH_TIMEOUT


@dataclass
class UpdaterSettings:
    """File locations and runtime settings for one updater run.

    Every field can be overridden from the environment; the paths are always
    resolved relative to the project root.
    """

    project_root: Path = field(
        default_factory=lambda: Path(os.getenv("OPENCODE_PROJECT_ROOT", "") or os.getcwd())
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("OPENCODE_MODEL_SYNC_LOG_LEVEL", "WARNING")
    )
    fetch_timeout: float = field(default_factory=_timeout_from_env)

    @property
    def config_file(self) -> Path:
        return self.project_root / CONFIG_FILE

    @property
    def agents_dir(self) -> Path:
        return self.project_root / AGENTS_DIR

    @property
    def opencode_config(self) -> Path:
        return self.project_root / OPENCODE_CONFIG
