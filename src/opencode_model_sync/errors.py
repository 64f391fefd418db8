"""Exception hierarchy for the model sync tool.

Config errors are fatal for a run. Agent errors are recorded per agent and the
run moves on to the next one. Fetch errors only ever turn into warnings.
"""


class ModelSyncError(Exception):
    """Base class for all model sync errors."""


class ConfigError(ModelSyncError):
    """The model configuration could not be loaded."""


class ConfigNotFound(ConfigError):
    """The model configuration file does not exist."""


class ConfigSyntaxError(ConfigError):
    """The model configuration file is not valid YAML."""


class ConfigShapeError(ConfigError):
    """The model configuration is missing `models` or `agents` mappings."""


class AgentError(ModelSyncError):
    """A single agent could not be processed."""

    def __init__(self, agent_name: str, message: str):
        super().__init__(message)
        self.agent_name = agent_name


class AgentFileNotFound(AgentError):
    def __init__(self, agent_name: str):
        super().__init__(agent_name, f"Agent file not found for '{agent_name}'")


class MissingFrontmatter(ModelSyncError):
    """An agent document has no `---` delimited header block."""

    def __init__(self, path: str = ""):
        message = f"No frontmatter found in {path}" if path else "No frontmatter found"
        super().__init__(message)
        self.path = path


class UnknownModelFamily(AgentError):
    def __init__(self, agent_name: str, family: str):
        super().__init__(
            agent_name,
            f"Agent '{agent_name}' references unknown model family '{family}'",
        )
        self.family = family


class InvalidModelId(AgentError):
    def __init__(self, agent_name: str, model_id: str):
        super().__init__(
            agent_name,
            f"Invalid model ID for '{agent_name}': {model_id!r}",
        )
        self.model_id = model_id


class FetchError(ModelSyncError):
    """A documentation fetch attempt failed."""
