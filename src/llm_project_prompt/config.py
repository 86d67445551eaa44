from __future__ import annotations

from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, computed_field

_ = Path()

BINARY_EXTENSIONS: frozenset[str] = frozenset({
    # images
    ".bmp",
    ".gif",
    ".ico",
    ".jpeg",
    ".jpg",
    ".png",
    ".svg",
    ".tiff",
    # documents
    ".doc",
    ".docx",
    ".pdf",
    ".ppt",
    ".pptx",
    ".xls",
    ".xlsx",
    # archives
    ".7z",
    ".gz",
    ".rar",
    ".tar",
    ".zip",
    # media
    ".avi",
    ".mov",
    ".mp3",
    ".mp4",
    ".wmv",
    # fonts
    ".eot",
    ".ttf",
    ".woff",
    ".woff2",
    # executables and compiled objects
    ".class",
    ".dll",
    ".dylib",
    ".exe",
    ".o",
    ".obj",
    ".pyc",
    ".so",
    # databases
    ".db",
    ".mdb",
    ".sqlite",
})

DEFAULT_INCLUDES: tuple[str, ...] = ("**/*",)

IGNORE_FILE_NAME = ".gitignore"

DOCUMENT_TITLE = "# My Project code"
DOCUMENT_DESCRIPTION = "This prompt contains code files from the project."
STRUCTURE_HEADER = "## Project Structure"
CONTENTS_HEADER = "## File Contents"
DIRECTORY_GLYPH = "\U0001f4c1"
FILE_GLYPH = "\U0001f4c4"


class CandidateFile(BaseModel):
    """A file that passed every selection filter and waits for the size budget.

    Attributes:
        path: Absolute path to the file on disk.
        rel: Path relative to the project root, with POSIX separators.
        size: File size in bytes at selection time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    path: Path = Field(..., description="Absolute file path")
    rel: str = Field(..., description="File path relative to the project root")
    size: int = Field(..., ge=0, description="File size in bytes")

    @computed_field
    @property
    def extension(self) -> str:
        """File extension without its leading dot, used to tag the code fence."""
        return PurePosixPath(self.rel).suffix.removeprefix(".")

    @computed_field
    @property
    def is_binary(self) -> bool:
        return is_binary_path(self.rel)


class SelectionRules(BaseModel):
    """Immutable rules deciding which files of the project end up as candidates."""

    model_config = ConfigDict(frozen=True)

    include: tuple[str, ...] = Field(default=DEFAULT_INCLUDES, description="Include globs, in order.")
    exclude: tuple[str, ...] = Field(default=(), description="Exclude globs.")
    use_ignore_file: bool = Field(default=True, description="Honor the root .gitignore.")
    binary_extensions: frozenset[str] = Field(
        default=BINARY_EXTENSIONS,
        description="Lower-cased extensions that are never selected.",
    )
    dot: bool = Field(
        default=False,
        description="Expand hidden files and directories not named by a pattern.",
    )


def is_binary_path(rel: str, binary_extensions: frozenset[str] = BINARY_EXTENSIONS) -> bool:
    """Check whether a path has a known binary extension (case-insensitive).

    Args:
        rel (str): the path to check
        binary_extensions (frozenset[str]): lower-cased extensions, dot included

    Returns:
        bool: True if the extension is a binary one, False otherwise
    """
    return PurePosixPath(rel).suffix.lower() in binary_extensions
