"""Keep OpenCode agent definitions in sync with a declarative model config."""

__version__ = "0.1.0"
