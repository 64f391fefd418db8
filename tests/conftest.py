import json
import textwrap

import pytest

from opencode_model_sync.config.model_config import UpdaterSettings

MODEL_CONFIG_YAML = """\
models:
  sonnet:
    id: "anthropic/claude-sonnet-4-5"
    temperature: 0.2
    description: "Balanced default"
  opus:
    id: "anthropic/claude-opus-4-1"
    temperature: 0.1
    description: "Planning and review"
agents:
  planner: opus
  coder: sonnet
  reviewer: sonnet
"""


def agent_doc(model: str = "anthropic/claude-sonnet-3-5", temperature: str = "0.5") -> str:
    return textwrap.dedent(
        f"""\
        ---
        description: "Test agent"
        model: {model}
        temperature: {temperature}
        ---

        # Agent Content
        This is the agent body.
        model: not-in-the-header
        """
    )


@pytest.fixture
def project_root(tmp_path):
    """A throwaway OpenCode project with three agents and an opencode.json."""
    opencode_dir = tmp_path / ".opencode"
    agents_dir = opencode_dir / "agent"
    (agents_dir / "subagents").mkdir(parents=True)

    (opencode_dir / "model-config.yaml").write_text(MODEL_CONFIG_YAML, encoding="utf-8")
    (agents_dir / "planner.md").write_text(agent_doc(), encoding="utf-8")
    (agents_dir / "coder.md").write_text(agent_doc(), encoding="utf-8")
    (agents_dir / "subagents" / "reviewer.md").write_text(agent_doc(), encoding="utf-8")

    opencode_json = {
        "$schema": "https://opencode.ai/config.json",
        "model": "anthropic/claude-sonnet-3-5",
        "agent": {
            "planner": {"model": "old", "temperature": 0.9, "mode": "primary"},
            "legacy": {"model": "keep-me", "temperature": 0.7},
        },
    }
    (tmp_path / "opencode.json").write_text(json.dumps(opencode_json, indent=2) + "\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(project_root):
    return UpdaterSettings(project_root=project_root, log_level="WARNING", fetch_timeout=1.0)
