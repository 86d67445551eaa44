from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from llm_project_prompt.config import CONTENTS_HEADER, DOCUMENT_DESCRIPTION, DOCUMENT_TITLE
from llm_project_prompt.exceptions import FileReadError
from llm_project_prompt.logging import logger
from llm_project_prompt.sizes import byte_length

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_project_prompt.config import CandidateFile

PREAMBLE = f"{DOCUMENT_TITLE}\n\n{DOCUMENT_DESCRIPTION}\n\n{CONTENTS_HEADER}\n\n"
PREAMBLE_SIZE = byte_length(PREAMBLE)


class AssemblyState(BaseModel):
    """Accumulator threaded through a single assembly pass.

    Attributes:
        blocks: Formatted file blocks, in inclusion order.
        size: Bytes consumed so far, preamble included.
        included: Relative paths of the files whose block was appended.
        skipped: Relative paths of the files left out (too big or unreadable).
    """

    blocks: list[str] = Field(default_factory=list)
    size: int = Field(default=PREAMBLE_SIZE, ge=0)
    included: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def contents(self) -> str:
        return "".join(self.blocks)

    def include(self, rel: str, block: str, block_size: int) -> None:
        self.blocks.append(block)
        self.size += block_size
        self.included.append(rel)

    def skip(self, rel: str) -> None:
        self.skipped.append(rel)


def format_block(rel: str, extension: str, content: str) -> str:
    """Render one file as a header line plus a fenced code block.

    Args:
        rel (str): the path shown in the header
        extension (str): the extension used as the fence tag, without dot
        content (str): the raw file content

    Returns:
        str: the formatted block
    """
    return f"### File: {rel}\n```{extension}\n{content}\n```\n\n"


def read_candidate(candidate: CandidateFile) -> str:
    """Read the whole content of a candidate as UTF-8 text, newlines untouched.

    Raises:
        FileReadError: if the file cannot be opened or is not valid UTF-8
    """
    try:
        return candidate.path.read_text(encoding="utf-8", newline="")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path=candidate.path, reason=str(e)) from e


def assemble(candidates: Sequence[CandidateFile], budget: int) -> AssemblyState:
    """Append candidates to the document in order while they fit in the budget.

    The policy is greedy and single pass: a file whose block would push the
    document over `budget` is skipped entirely and never reconsidered, even if
    later skips leave enough room for it.

    Args:
        candidates (Sequence[CandidateFile]): the selected files, in order
        budget (int): the maximum document size in bytes

    Returns:
        AssemblyState: the blocks plus included and skipped paths
    """
    state = AssemblyState()
    for candidate in candidates:
        try:
            content = read_candidate(candidate)
        except FileReadError as e:
            logger.warning("file_read_failed", path=candidate.rel, error=e.reason)
            state.skip(candidate.rel)
            continue

        block = format_block(candidate.rel, candidate.extension, content)
        block_size = byte_length(block)
        if state.size + block_size > budget:
            logger.info("file_skipped_for_size", path=candidate.rel, block_size=block_size, used=state.size)
            state.skip(candidate.rel)
            continue

        state.include(candidate.rel, block, block_size)

    logger.info(
        "assembly_complete",
        included=len(state.included),
        skipped=len(state.skipped),
        size=state.size,
        budget=budget,
    )
    return state
