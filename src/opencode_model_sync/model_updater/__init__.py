"""Model Updater - sync OpenCode agent models with .opencode/model-config.yaml.

For every agent in the model config this rewrites the `model:` and
`temperature:` lines in the agent's frontmatter, then patches opencode.json
to match.

Usage:
    python -m opencode_model_sync.model_updater

    # Or with the CLI
    opencode-model-sync

    # Dry run (show what would change)
    opencode-model-sync --dry-run

    # Also compare against the latest models in the Claude docs
    opencode-model-sync --check-latest
"""

from opencode_model_sync.model_updater.frontmatter import (
    find_agent_file,
    rewrite_frontmatter,
    sync_agent,
    update_agent_file,
)
from opencode_model_sync.model_updater.project_config import (
    patch_project_config,
    select_default_family,
    update_project_config,
)
from opencode_model_sync.model_updater.report import RewriteStatus, UpdateReport
from opencode_model_sync.model_updater.version_scraper import (
    CurlFetcher,
    Fetcher,
    RequestsFetcher,
    check_latest_models,
    extract_model_version,
    fetch_documentation,
    scrape_latest_models,
)
from opencode_model_sync.model_updater.cli import AgentModelUpdater, main

__all__ = [
    # Main entry point
    "main",
    "AgentModelUpdater",
    # Report
    "RewriteStatus",
    "UpdateReport",
    # Frontmatter
    "find_agent_file",
    "rewrite_frontmatter",
    "sync_agent",
    "update_agent_file",
    # opencode.json
    "patch_project_config",
    "select_default_family",
    "update_project_config",
    # Latest model check
    "Fetcher",
    "CurlFetcher",
    "RequestsFetcher",
    "check_latest_models",
    "extract_model_version",
    "fetch_documentation",
    "scrape_latest_models",
]
