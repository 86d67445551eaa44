from __future__ import annotations

import pytest

from llm_project_prompt.assembly import AssemblyState
from llm_project_prompt.config import DIRECTORY_GLYPH, FILE_GLYPH
from llm_project_prompt.output_construction import (
    ancestor_directories,
    build_document,
    build_structure_lines,
    build_summary_lines,
)


@pytest.mark.unit
def test_ancestor_directories_lists_each_directory_once_in_discovery_order() -> None:
    paths = ["src/pkg/a.py", "docs/index.md", "src/b.py", "README.md", "src/pkg/sub/c.py"]

    assert ancestor_directories(paths) == ["src", "src/pkg", "docs", "src/pkg/sub"]


@pytest.mark.unit
def test_build_structure_lines_indents_by_depth() -> None:
    lines = build_structure_lines(["src/pkg/a.py", "src/b.py", "README.md"])

    assert lines == [
        f"{DIRECTORY_GLYPH} src",
        f"  {DIRECTORY_GLYPH} src/pkg",
        f"    {FILE_GLYPH} src/pkg/a.py",
        f"  {FILE_GLYPH} src/b.py",
        f"{FILE_GLYPH} README.md",
    ]


@pytest.mark.unit
def test_build_summary_lines_adds_note_only_when_files_were_skipped() -> None:
    assert build_summary_lines(2, 0) == ["This prompt contains 2 files from the project."]
    assert build_summary_lines(2, 3) == [
        "This prompt contains 2 files from the project.",
        "Note: 3 files were skipped due to size constraints.",
    ]


@pytest.mark.unit
def test_build_document_orders_sections() -> None:
    state = AssemblyState(
        blocks=["### File: src/a.py\n```py\nx = 1\n```\n\n"],
        included=["src/a.py"],
        skipped=["big.txt"],
    )

    document = build_document(state)

    positions = [
        document.index("# My Project code"),
        document.index("This prompt contains 1 files from the project."),
        document.index("Note: 1 files were skipped due to size constraints."),
        document.index("## Project Structure"),
        document.index(f"{DIRECTORY_GLYPH} src"),
        document.index(f"  {FILE_GLYPH} src/a.py"),
        document.index("## File Contents"),
        document.index("### File: src/a.py"),
    ]
    assert positions == sorted(positions)
    assert document.startswith("# My Project code\n\n")
    assert document.endswith("```\n\n")
    assert "big.txt" not in document


@pytest.mark.unit
def test_build_document_without_skips_has_no_note() -> None:
    document = build_document(AssemblyState())

    assert "Note:" not in document
    assert "This prompt contains 0 files from the project." in document
    assert document.endswith("## File Contents\n\n")
