"""Build a single, size-bounded LLM prompt from a project's source files."""

__version__ = "0.1.0"
