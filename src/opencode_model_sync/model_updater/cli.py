"""CLI entry point for the OpenCode agent model updater.

Usage:
    opencode-model-sync [OPTIONS]

    python -m opencode_model_sync.model_updater [OPTIONS]

Options:
    --dry-run        Show what would change without writing any files
    --check-latest   Check the Claude docs for newer model aliases first
    --help, -h       Show this help message

Unrecognized options are ignored.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from opencode_model_sync.config.model_config import (
    OPENCODE_CONFIG,
    ModelConfig,
    UpdaterSettings,
    load_model_config,
)
from opencode_model_sync.errors import ConfigError
from opencode_model_sync.model_updater.console import (
    print_dim,
    print_error,
    print_header,
    print_info,
    print_rule,
    print_section,
    print_success,
    print_warning,
)
from opencode_model_sync.model_updater.frontmatter import sync_agent
from opencode_model_sync.model_updater.project_config import update_project_config
from opencode_model_sync.model_updater.report import RewriteStatus, UpdateReport
from opencode_model_sync.model_updater.version_scraper import Fetcher, check_latest_models

logger = logging.getLogger(__name__)


class AgentModelUpdater:
    """Sync agent documents and opencode.json with the model config.

    Args:
        config: The loaded model configuration
        settings: File locations and timeouts
        dry_run: Compute everything but write nothing
        check_latest: Compare the config against the Claude docs first
        fetchers: Override the documentation fetchers (used by tests)
    """

    def __init__(
        self,
        config: ModelConfig,
        settings: UpdaterSettings,
        dry_run: bool = False,
        check_latest: bool = False,
        fetchers: Optional[Sequence[Fetcher]] = None,
    ):
        self.config = config
        self.settings = settings
        self.dry_run = dry_run
        self.check_latest = check_latest
        self.fetchers = fetchers
        self.report = UpdateReport(dry_run=dry_run)

    def run(self) -> UpdateReport:
        title = "OpenCode Agent Model Updater"
        print_header(f"{title} (dry run)" if self.dry_run else title)

        if self.check_latest:
            check_latest_models(
                self.config,
                self.report,
                timeout=self.settings.fetch_timeout,
                fetchers=self.fetchers,
            )

        self.display_config()
        self.update_agents()

        if self.dry_run:
            print_info(f"Dry run - skipping {OPENCODE_CONFIG}")
            print()
        else:
            self.update_opencode_json()

        self.display_summary()
        return self.report

    def display_config(self):
        print_section("Model Configuration Loaded:")
        for family, entry in self.config.models.items():
            print(f"  {family.upper()}: {entry.id}")
            if entry.description:
                print_dim(f"    └─ {entry.description}")
        print()
        print(f"Agent Mappings: {len(self.config.agents)} agents")
        print()

    def update_agents(self):
        print_section("Updating Agent Files...")

        for agent_name in self.config.agents:
            status = sync_agent(
                self.settings.agents_dir,
                agent_name,
                self.config,
                self.report,
                dry_run=self.dry_run,
            )
            if status is None:
                continue

            model_id = self.config.models[self.config.agents[agent_name]].id
            if status is RewriteStatus.UPDATED:
                print_success(f"{agent_name}: {model_id}")
            elif status is RewriteStatus.WOULD_UPDATE:
                print_info(f"{agent_name}: would update to {model_id}")
            else:
                print_dim(f"  {agent_name}: unchanged ({model_id})")
        print()

    def update_opencode_json(self):
        print_section(f"Updating {OPENCODE_CONFIG}...")
        if update_project_config(self.settings.opencode_config, self.config, self.report):
            print_success(f"{OPENCODE_CONFIG} updated")
        print()

    def display_summary(self):
        report = self.report
        print_rule()
        print_section("Update Summary")

        if self.dry_run:
            print(f"  Agents that would be updated: {report.would_update}")
        else:
            print(f"  Agents updated: {report.updated}")
        print(f"  Agents unchanged: {report.unchanged}")
        print(f"  Errors: {len(report.errors)}")
        if not self.dry_run:
            state = "updated" if report.project_config_updated else "not updated"
            print(f"  Config file: {OPENCODE_CONFIG} ({state})")
        print()

        if report.warnings:
            for warning in report.warnings:
                print_warning(warning)
            print()

        if report.errors:
            print_warning("Errors encountered:")
            for error in report.errors:
                print_error(error)
            print()

        print("Model versions used:")
        for family, entry in self.config.models.items():
            print(f"  • {family}: {entry.id}")
        print()

        if self.dry_run:
            print_success("Dry run complete. No files written.")
        else:
            print_success("Done!")
            print_info("Run this again when new Claude models are released to keep agents current.")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="opencode-model-sync",
        description="Update OpenCode agent models from .opencode/model-config.yaml.",
        epilog="Example: opencode-model-sync --dry-run --check-latest",
        allow_abbrev=False,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without writing any files",
    )

    parser.add_argument(
        "--check-latest",
        action="store_true",
        help="Check the Claude documentation for newer model versions",
    )

    return parser


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code: 1 if the model config cannot be loaded, otherwise 0
        (per-agent errors are reported but do not change the exit code)
    """
    parser = create_parser()
    parsed, unknown = parser.parse_known_args(args)

    settings = UpdaterSettings()
    configure_logging(settings.log_level)
    if unknown:
        logger.debug(f"Ignoring unrecognized arguments: {unknown}")

    try:
        config = load_model_config(settings.config_file)
    except ConfigError as e:
        print_error(str(e))
        return 1

    updater = AgentModelUpdater(
        config,
        settings,
        dry_run=parsed.dry_run,
        check_latest=parsed.check_latest,
    )
    updater.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
