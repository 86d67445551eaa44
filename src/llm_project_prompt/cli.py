"""
llm_project_prompt: generate an LLM prompt from your project's code.

Overview
--------
This utility walks the current project directory, keeps the text files that
match the include globs and none of the exclude globs or `.gitignore` rules,
and concatenates them into one Markdown document:

- a header with the number of included (and skipped) files,
- a project structure listing of the included files,
- one fenced code block per file.

The document never exceeds `--max-size`. Files are taken in order and a file
that does not fit is skipped whole; nothing is ever truncated.

Usage
-----
Run `python -m llm_project_prompt --help` for full options. Common examples:
    - Whole project to stdout:
        uv run llm-project-prompt

    - JavaScript sources without tests, into a file:
        uv run llm-project-prompt --include "src/**/*.js" --exclude "**/*.test.js" --output prompt.txt

    - Bigger budget, log to a file:
        uv run llm-project-prompt --max-size 2mb --log-file prompt.log
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from llm_project_prompt import __version__
from llm_project_prompt.assembly import assemble
from llm_project_prompt.file_manipulation import select_files
from llm_project_prompt.logging import logger, setup_logging
from llm_project_prompt.output_construction import build_document
from llm_project_prompt.settings import Settings, load_environment
from llm_project_prompt.sizes import byte_length, estimate_tokens, format_kilobytes, parse_size

if TYPE_CHECKING:
    from collections.abc import Sequence

EXAMPLES = """\
examples:
  llm-project-prompt
  llm-project-prompt --include "src/**/*.js" --exclude "**/*.test.js"
  llm-project-prompt --output prompt.txt
  llm-project-prompt --max-size "2mb"
"""


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    p = argparse.ArgumentParser(
        prog="llm-project-prompt",
        description="Generate an LLM prompt for your project's code.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-i",
        "--include",
        action="append",
        default=None,
        help='Files or directories to include (glob, repeatable). Defaults to "**/*".',
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=None,
        help="Files or directories to exclude (glob, repeatable).",
    )
    p.add_argument("-o", "--output", type=Path, default=None, help="Output file (defaults to stdout).")
    p.add_argument("-n", "--no-gitignore", action="store_true", help="Ignore the .gitignore file.")
    p.add_argument(
        "-m",
        "--max-size",
        type=str,
        default=None,
        help='Maximum size of the output (e.g. "1mb", "500kb"). Defaults to "1mb".',
    )
    p.add_argument("-r", "--root", type=Path, default=None, help="Project root (defaults to cwd).")
    p.add_argument("--dot", action="store_true", help="Also expand hidden files and directories.")
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    args = p.parse_args(argv)
    return Settings(**{k: v for k, v in vars(args).items() if v is not None})


def generate_prompt(settings: Settings) -> str:
    """Select, assemble and format the prompt described by `settings`.

    Args:
        settings (Settings): the run configuration

    Raises:
        InvalidSizeFormatError: if `settings.max_size` is not a valid size, before touching the filesystem
        InvalidPatternError: if an include pattern cannot be expanded

    Returns:
        str: the complete prompt
    """
    budget = parse_size(settings.max_size)
    root = settings.root.resolve()
    candidates = select_files(root, settings.selection_rules())
    state = assemble(candidates, budget)
    return build_document(state)


def emit_document(document: str, output: Path | None = None) -> None:
    """Write the prompt to `output` or stdout, with size diagnostics on stderr.

    Args:
        document (str): the prompt to write
        output (Path | None): destination file, overwritten; stdout when None
    """
    size_kb = format_kilobytes(byte_length(document))
    print(f"Prompt size: {size_kb} KB, Est. tokens: {estimate_tokens(document)}", file=sys.stderr)
    if output is not None:
        output.write_text(document, encoding="utf-8", newline="")
        print(f"Prompt written to {output}", file=sys.stderr)
    else:
        sys.stdout.write(document)
        sys.stdout.flush()


def main(argv: Sequence[str] | None = None) -> int:
    load_environment()
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    try:
        document = generate_prompt(settings)
        emit_document(document, settings.output)
    except Exception as e:  # noqa: BLE001
        logger.exception("prompt_generation_failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
