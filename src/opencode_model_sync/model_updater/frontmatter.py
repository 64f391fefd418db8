"""Rewrite the model settings in agent frontmatter.

Agent documents look like:

    ---
    description: "Reviews pull requests"
    model: anthropic/claude-sonnet-4-5
    temperature: 0.2
    ---

    # Code Reviewer
    ...

Only the `model:` and `temperature:` lines inside the leading `---` block are
ever touched. Everything else, header or body, is left byte-for-byte as is.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from opencode_model_sync.config.model_config import ModelConfig
from opencode_model_sync.errors import AgentError, AgentFileNotFound, MissingFrontmatter
from opencode_model_sync.model_updater.report import RewriteStatus, UpdateReport

logger = logging.getLogger(__name__)

AGENT_FILE_EXTENSION = "md"
SUBAGENTS_DIR = "subagents"

# Non-greedy: the first whole `---` line closes the block.
FRONTMATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---(?=\r?\n|\Z)", re.DOTALL)
MODEL_LINE_PATTERN = re.compile(r"^model:[^\r\n]*", re.MULTILINE)
TEMPERATURE_LINE_PATTERN = re.compile(r"^temperature:[^\r\n]*", re.MULTILINE)


def find_agent_file(
    agents_dir: Union[str, Path],
    agent_name: str,
    extension: str = AGENT_FILE_EXTENSION,
) -> Path:
    """Locate an agent's document, checking primary agents before subagents.

    Args:
        agents_dir: The agents directory (e.g. ".opencode/agent")
        agent_name: Agent name as used in the model config
        extension: File extension of agent documents

    Returns:
        Path to the first candidate that exists

    Raises:
        AgentFileNotFound: If neither candidate exists
    """
    agents_dir = Path(agents_dir)
    candidates = [
        agents_dir / f"{agent_name}.{extension}",
        agents_dir / SUBAGENTS_DIR / f"{agent_name}.{extension}",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    raise AgentFileNotFound(agent_name)


def format_temperature(temperature) -> str:
    return str(temperature)


def rewrite_frontmatter(content: str, model_id: str, temperature=None) -> str:
    """Return `content` with the header's model and temperature lines replaced.

    Lines that are missing from the header stay missing. A `None` temperature
    leaves the temperature line alone.

    Raises:
        MissingFrontmatter: If the content does not start with a `---` block
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        raise MissingFrontmatter()

    header = match.group(1)
    header = MODEL_LINE_PATTERN.sub(lambda _: f"model: {model_id}", header)
    if temperature is not None:
        header = TEMPERATURE_LINE_PATTERN.sub(
            lambda _: f"temperature: {format_temperature(temperature)}", header
        )

    return content[:match.start(1)] + header + content[match.end(1):]


# newline="" keeps CRLF files CRLF on both read and write.
def read_document(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_document(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def update_agent_file(
    file_path: Union[str, Path],
    model_id: str,
    temperature=None,
    dry_run: bool = False,
) -> RewriteStatus:
    """Rewrite one agent document in place.

    In dry-run mode everything happens except the final write, so the returned
    status is what a live run would report.

    Raises:
        MissingFrontmatter: If the document has no header block
        OSError: If the file cannot be read or written
    """
    path = Path(file_path)
    content = read_document(path)

    try:
        updated_content = rewrite_frontmatter(content, model_id, temperature)
    except MissingFrontmatter:
        raise MissingFrontmatter(str(path)) from None

    if updated_content == content:
        return RewriteStatus.UNCHANGED

    if dry_run:
        logger.debug(f"Dry run: would rewrite {path}")
        return RewriteStatus.WOULD_UPDATE

    write_document(path, updated_content)
    logger.debug(f"Rewrote {path}")
    return RewriteStatus.UPDATED


def sync_agent(
    agents_dir: Union[str, Path],
    agent_name: str,
    config: ModelConfig,
    report: UpdateReport,
    dry_run: bool = False,
) -> Optional[RewriteStatus]:
    """Bring one agent's document in line with its model family.

    Failures are recorded on `report` and never raised, so one bad agent does
    not stop the rest of the run.

    Returns:
        The rewrite status, or None if the agent was skipped with an error
    """
    try:
        entry = config.resolve(agent_name)
        agent_file = find_agent_file(agents_dir, agent_name)
    except AgentError as e:
        report.add_error(str(e))
        return None

    try:
        status = update_agent_file(agent_file, entry.id, entry.temperature, dry_run=dry_run)
    except MissingFrontmatter as e:
        report.add_error(f"{e} (agent '{agent_name}')")
        return None
    except FileNotFoundError as e:
        report.add_error(f"File disappeared while updating '{agent_name}': {e.filename or agent_file}")
        return None
    except PermissionError as e:
        report.add_error(f"Permission denied for '{agent_name}': {e.filename or agent_file}")
        return None
    except Exception as e:
        report.add_error(f"Failed to update {agent_file}: {e}")
        return None

    report.record(status)
    return status
