from __future__ import annotations

import io
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from llm_project_prompt.config import (
    CONTENTS_HEADER,
    DIRECTORY_GLYPH,
    DOCUMENT_TITLE,
    FILE_GLYPH,
    STRUCTURE_HEADER,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_project_prompt.assembly import AssemblyState


def ancestor_directories(paths: Sequence[str]) -> list[str]:
    """List every ancestor directory of the given files once, in discovery order.

    Args:
        paths (Sequence[str]): relative file paths with POSIX separators

    Returns:
        list[str]: directory paths such as "src" then "src/pkg"
    """
    dirs: dict[str, None] = {}
    for rel in paths:
        parts = PurePosixPath(rel).parent.parts
        for depth in range(1, len(parts) + 1):
            dirs.setdefault("/".join(parts[:depth]), None)
    return list(dirs)


def build_structure_lines(paths: Sequence[str]) -> list[str]:
    """Build the project structure listing: directories first, then files.

    Each entry is indented by two spaces per level of nesting.

    Args:
        paths (Sequence[str]): the included file paths, in inclusion order

    Returns:
        list[str]: one line per directory and per file
    """
    lines: list[str] = []
    for directory in ancestor_directories(paths):
        indent = "  " * directory.count("/")
        lines.append(f"{indent}{DIRECTORY_GLYPH} {directory}")
    for rel in paths:
        indent = "  " * len(PurePosixPath(rel).parent.parts)
        lines.append(f"{indent}{FILE_GLYPH} {rel}")
    return lines


def build_summary_lines(included: int, skipped: int) -> list[str]:
    lines = [f"This prompt contains {included} files from the project."]
    if skipped:
        lines.append(f"Note: {skipped} files were skipped due to size constraints.")
    return lines


def build_document(state: AssemblyState) -> str:
    """Compose the final prompt out of an assembly pass.

    The document is made of four sections, in this order: the title, a summary
    with the included count and an optional note about skipped files, the
    project structure, and the file contents.

    Args:
        state (AssemblyState): the result of the assembly pass

    Returns:
        str: the complete prompt
    """
    out = io.StringIO()
    out.write(f"{DOCUMENT_TITLE}\n\n")

    for line in build_summary_lines(len(state.included), len(state.skipped)):
        out.write(f"{line}\n")
    out.write("\n")

    out.write(f"{STRUCTURE_HEADER}\n\n")
    for line in build_structure_lines(state.included):
        out.write(f"{line}\n")
    out.write("\n")

    out.write(f"{CONTENTS_HEADER}\n\n")
    out.write(state.contents)
    return out.getvalue()
