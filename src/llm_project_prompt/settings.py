from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from llm_project_prompt.config import DEFAULT_INCLUDES, SelectionRules

ENV_FILE = find_dotenv(usecwd=True)

MAX_SIZE_ENV = "LLM_PROMPT_MAX_SIZE"
LOG_FILE_ENV = "LLM_PROMPT_LOG_FILE"


def load_environment(env_file: str = ENV_FILE) -> bool:
    """Load variables from the nearest `.env` file without overriding the environment.

    Args:
        env_file (str): path of the `.env` file; nothing is loaded when empty

    Returns:
        bool: True if at least one variable was set from the file
    """
    if not env_file:
        return False
    return load_dotenv(env_file, override=False)


class Settings(BaseModel):
    """Configuration settings for a prompt generation run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path = Field(default_factory=Path.cwd, description="Project root.")
    include: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDES),
        description="Include glob (repeatable).",
    )
    exclude: list[str] = Field(default_factory=list, description="Exclude glob (repeatable).")
    output: Path | None = Field(default=None, description="Output file, stdout when unset.")
    no_gitignore: bool = Field(default=False, description="Do not honor the .gitignore file.")
    max_size: str = Field(
        default_factory=lambda: os.environ.get(MAX_SIZE_ENV, "1mb"),
        description="Maximum size of the output, e.g. 1mb or 500kb.",
    )
    dot: bool = Field(default=False, description="Expand hidden files and directories.")
    log_file: str = Field(
        default_factory=lambda: os.environ.get(LOG_FILE_ENV, ""),
        description="Log file path.",
    )

    def selection_rules(self) -> SelectionRules:
        """Build the immutable selection rules for this run."""
        return SelectionRules(
            include=tuple(self.include),
            exclude=tuple(self.exclude),
            use_ignore_file=not self.no_gitignore,
            dot=self.dot,
        )
