"""Best-effort check for newer Claude model aliases.

Fetches the public models overview page and pulls out the shortest
`claude-<family>-<major>-<minor>` identifier for each family. The result is
only displayed next to the configured IDs; nothing is written back.

Fetching tries the `curl` binary first and falls back to `requests`. Both
attempts share one timeout budget, and any failure degrades to a warning.
"""

import logging
import re
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import requests

from opencode_model_sync import __version__
from opencode_model_sync.config.model_config import DEFAULT_FETCH_TIMEOUT, ModelConfig
from opencode_model_sync.errors import FetchError
from opencode_model_sync.model_updater.console import (
    Colors,
    colorize,
    print_info,
    print_section,
    print_warning,
)
from opencode_model_sync.model_updater.report import UpdateReport

logger = logging.getLogger(__name__)

DOCS_URL = "https://docs.anthropic.com/en/docs/about-claude/models/overview"
USER_AGENT = f"opencode-model-sync/{__version__}"

MODEL_FAMILIES = ("sonnet", "opus", "haiku")
MODEL_ID_PREFIX = "anthropic/claude-"

# `4-5` but not the `4-2` prefix of `4-20250514`
MODEL_VERSION_PATTERN = r"(\d+-\d+)(?!\d)"


class Fetcher:
    """One way of retrieving a page as text."""

    name = "fetcher"

    def is_available(self) -> bool:
        return True

    def fetch(self, url: str, timeout: float) -> str:
        """Fetch `url` within `timeout` seconds.

        Raises:
            FetchError: On any failure, timeout or non-success status
        """
        raise NotImplementedError


class CurlFetcher(Fetcher):
    """Fetch with the external `curl` command."""

    name = "curl"

    def __init__(self, executable: str = "curl"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def fetch(self, url: str, timeout: float) -> str:
        cmd = [
            self.executable,
            "--silent",
            "--show-error",
            "--fail",
            "--location",
            "--max-time", f"{timeout:.1f}",
            url,
        ]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise FetchError(f"curl timed out after {timeout:.1f}s") from e
        except OSError as e:
            raise FetchError(f"curl could not be run: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise FetchError(f"curl exited with status {result.returncode}: {stderr}")
        return result.stdout.decode("utf-8", errors="replace")


class RequestsFetcher(Fetcher):
    """Fetch in-process with `requests`."""

    name = "requests"

    def fetch(self, url: str, timeout: float) -> str:
        try:
            response = requests.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"HTTP request failed: {e}") from e
        return response.text


def default_fetchers() -> List[Fetcher]:
    return [CurlFetcher(), RequestsFetcher()]


def fetch_documentation(
    url: str = DOCS_URL,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    fetchers: Optional[Sequence[Fetcher]] = None,
) -> Optional[str]:
    """Fetch the documentation page, trying each fetcher in turn.

    Never raises. Empty output counts as a failure.

    Returns:
        The page text, or None if every fetcher failed
    """
    if fetchers is None:
        fetchers = default_fetchers()

    deadline = time.monotonic() + timeout
    for fetcher in fetchers:
        if not fetcher.is_available():
            logger.debug(f"Fetcher '{fetcher.name}' is not available, skipping")
            continue

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.warning(f"Timed out after {timeout:.1f}s fetching {url}")
            break

        try:
            text = fetcher.fetch(url, remaining)
        except FetchError as e:
            logger.info(f"Fetcher '{fetcher.name}' failed: {e}")
            continue
        except Exception as e:
            logger.warning(f"Fetcher '{fetcher.name}' raised unexpectedly: {e}")
            continue

        if text and text.strip():
            logger.debug(f"Fetched {len(text)} characters from {url} with {fetcher.name}")
            return text

        logger.info(f"Fetcher '{fetcher.name}' returned no content")

    return None


def extract_model_version(text: str, family: str) -> Optional[str]:
    """Find the alias version for a model family in fetched text.

    All `claude-<family>-<digits>-<digits>` matches are collected and the
    shortest wins, so `4-5` is preferred over a dated variant. On equal
    length the first match in the text wins.

    Returns:
        The version string (e.g. "4-5"), or None if the family is not mentioned
    """
    pattern = re.compile(rf"claude-{re.escape(family)}-{MODEL_VERSION_PATTERN}")
    matches = list(dict.fromkeys(pattern.findall(text)))
    if not matches:
        return None
    return min(matches, key=len)


def scrape_latest_models(
    text: str,
    families: Sequence[str] = MODEL_FAMILIES,
) -> Dict[str, str]:
    """Map each family mentioned in `text` to a fully qualified model ID."""
    latest = {}
    for family in families:
        version = extract_model_version(text, family)
        if version:
            latest[family] = f"{MODEL_ID_PREFIX}{family}-{version}"
    return latest


@dataclass(frozen=True)
class VersionComparison:
    family: str
    latest_id: str
    configured_id: Optional[str]

    @property
    def status(self) -> str:
        if self.configured_id is None:
            return "not-configured"
        if self.configured_id == self.latest_id:
            return "equal"
        return "different"


def compare_with_config(latest: Dict[str, str], config: ModelConfig) -> List[VersionComparison]:
    comparisons = []
    for family, latest_id in latest.items():
        entry = config.models.get(family)
        comparisons.append(
            VersionComparison(
                family=family,
                latest_id=latest_id,
                configured_id=entry.id if entry else None,
            )
        )
    return comparisons


def check_latest_models(
    config: ModelConfig,
    report: UpdateReport,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    fetchers: Optional[Sequence[Fetcher]] = None,
    url: str = DOCS_URL,
) -> List[VersionComparison]:
    """Fetch the docs page and print how it compares with the config.

    Problems are recorded as warnings on `report`, never as errors.
    """
    print_section("Checking for latest Claude models...")

    text = fetch_documentation(url, timeout=timeout, fetchers=fetchers)
    if text is None:
        message = f"Could not fetch {url}; skipping latest model check"
        print_warning(message)
        report.add_warning(message)
        return []

    latest = scrape_latest_models(text)
    if not latest:
        message = "No Claude model identifiers found in the documentation page"
        print_warning(message)
        report.add_warning(message)
        return []

    comparisons = compare_with_config(latest, config)
    for comparison in comparisons:
        label = comparison.family.upper()
        if comparison.status == "equal":
            print(f"  {label}: {colorize(comparison.latest_id, Colors.GREEN)} (up to date)")
        elif comparison.status == "different":
            print(
                f"  {label}: {colorize(comparison.latest_id, Colors.YELLOW)} "
                f"(configured: {comparison.configured_id})"
            )
        else:
            print(f"  {label}: {comparison.latest_id} (not configured)")

    if any(c.status == "different" for c in comparisons):
        print()
        print_info(f"Newer models may be available. Update {MODEL_ID_PREFIX}* IDs in the model config.")
    print()
    return comparisons
