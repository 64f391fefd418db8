"""Patch model settings in the project's opencode.json."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from opencode_model_sync.config.model_config import ModelConfig, ModelEntry
from opencode_model_sync.errors import AgentError
from opencode_model_sync.model_updater.report import UpdateReport

logger = logging.getLogger(__name__)

DEFAULT_FAMILY = "sonnet"
JSON_INDENT = 2


def select_default_family(models: Dict[str, ModelEntry]) -> Optional[str]:
    """Pick the family used for the top-level default model.

    Prefers "sonnet", then the first configured family.
    """
    if DEFAULT_FAMILY in models:
        return DEFAULT_FAMILY
    return next(iter(models), None)


def patch_project_config(document: Dict[str, Any], config: ModelConfig) -> List[str]:
    """Apply the model config to a parsed opencode.json document in place.

    The default model is always set. Per-agent entries are only overwritten
    when the document already has them; new agent sections are never added.
    Agents with an unknown family or invalid ID are left alone.

    Returns:
        Names of the agent entries that were patched

    Raises:
        ValueError: If the config has no model families
    """
    default_family = select_default_family(config.models)
    if default_family is None:
        raise ValueError("No model families configured; cannot choose a default model")

    document["model"] = config.models[default_family].id

    agent_section = document.get("agent")
    if not isinstance(agent_section, dict):
        return []

    patched = []
    for agent_name in config.agents:
        agent_entry = agent_section.get(agent_name)
        if not isinstance(agent_entry, dict):
            continue

        try:
            model = config.resolve(agent_name)
        except AgentError as e:
            logger.debug(f"Not patching opencode.json entry: {e}")
            continue

        agent_entry["model"] = model.id
        if model.temperature is not None:
            agent_entry["temperature"] = model.temperature
        patched.append(agent_name)

    return patched


def format_project_config(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=JSON_INDENT, ensure_ascii=False) + "\n"


def update_project_config(
    path: Union[str, Path],
    config: ModelConfig,
    report: UpdateReport,
) -> bool:
    """Read, patch and rewrite opencode.json.

    Every failure is recorded on `report`. Agent files already rewritten are
    not rolled back.

    Returns:
        True if the file was written
    """
    config_path = Path(path)

    try:
        document = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        report.add_error(f"Project config not found: {config_path}")
        return False
    except UnicodeDecodeError as e:
        report.add_error(f"Project config is not valid UTF-8: {config_path} ({e})")
        return False
    except json.JSONDecodeError as e:
        report.add_error(f"Invalid JSON in {config_path}: {e}")
        return False
    except OSError as e:
        report.add_error(f"Failed to read {config_path}: {e}")
        return False

    if not isinstance(document, dict):
        report.add_error(f"Project config must be a JSON object: {config_path}")
        return False

    try:
        patched = patch_project_config(document, config)
    except ValueError as e:
        report.add_error(str(e))
        return False

    try:
        config_path.write_text(format_project_config(document), encoding="utf-8")
    except OSError as e:
        report.add_error(f"Failed to write {config_path}: {e}")
        return False

    logger.info(f"Updated {config_path} ({len(patched)} agent entries)")
    report.project_config_updated = True
    return True
