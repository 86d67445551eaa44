from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LlmProjectPromptError(Exception):
    """Base exception for errors in the llm_project_prompt package."""


@dataclass(frozen=True)
class InvalidSizeFormatError(LlmProjectPromptError):
    """Raised when a size string cannot be turned into a positive byte budget."""

    value: str

    def __str__(self) -> str:
        return f'Invalid size format: {self.value}. Use format like "1mb" or "500kb".'


@dataclass(frozen=True)
class InvalidPatternError(LlmProjectPromptError):
    """Raised when an include pattern cannot be expanded under the root."""

    pattern: str
    reason: str = "Only patterns relative to the project root are supported."

    def __str__(self) -> str:
        return f"Invalid include pattern {self.pattern!r}: {self.reason}"


@dataclass(frozen=True)
class FileReadError(LlmProjectPromptError):
    """Raised when a selected file cannot be read as UTF-8 text."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Error reading file {self.path}: {self.reason}"


@dataclass(frozen=True)
class FileStatError(LlmProjectPromptError):
    """Raised when the metadata of a selected file cannot be retrieved."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Error reading metadata of {self.path}: {self.reason}"
