from __future__ import annotations

from pathlib import Path

import pytest

from llm_project_prompt.assembly import (
    PREAMBLE,
    PREAMBLE_SIZE,
    AssemblyState,
    assemble,
    format_block,
    read_candidate,
)
from llm_project_prompt.config import CandidateFile
from llm_project_prompt.exceptions import FileReadError
from llm_project_prompt.sizes import byte_length


def make_candidate(root: Path, rel: str, content: str | bytes) -> CandidateFile:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8", newline="")
    return CandidateFile(path=path, rel=rel, size=path.stat().st_size)


def block_size(candidate: CandidateFile) -> int:
    content = candidate.path.read_text(encoding="utf-8", newline="")
    return byte_length(format_block(candidate.rel, candidate.extension, content))


@pytest.mark.unit
def test_preamble_size_is_counted_from_the_start() -> None:
    assert PREAMBLE.startswith("# My Project code\n\n")
    assert PREAMBLE.endswith("## File Contents\n\n")
    assert AssemblyState().size == PREAMBLE_SIZE == byte_length(PREAMBLE)


@pytest.mark.unit
def test_format_block_fences_content_with_extension() -> None:
    block = format_block("src/app.py", "py", "print('hi')")

    assert block == "### File: src/app.py\n```py\nprint('hi')\n```\n\n"


@pytest.mark.unit
def test_read_candidate_preserves_newlines(tmp_path: Path) -> None:
    candidate = make_candidate(tmp_path, "crlf.txt", "a\r\nb\r\n")

    assert read_candidate(candidate) == "a\r\nb\r\n"


@pytest.mark.unit
def test_assemble_includes_everything_within_budget(tmp_path: Path) -> None:
    first = make_candidate(tmp_path, "a.txt", "hi")
    second = make_candidate(tmp_path, "src/b.py", "print('b')\n")

    state = assemble([first, second], budget=1024**2)

    assert state.included == ["a.txt", "src/b.py"]
    assert state.skipped == []
    assert state.size == PREAMBLE_SIZE + block_size(first) + block_size(second)
    assert state.contents == (
        "### File: a.txt\n```txt\nhi\n```\n\n### File: src/b.py\n```py\nprint('b')\n\n```\n\n"
    )


@pytest.mark.unit
def test_assemble_never_includes_partial_files(tmp_path: Path) -> None:
    candidate = make_candidate(tmp_path, "big.txt", "x" * 1000)

    state = assemble([candidate], budget=PREAMBLE_SIZE + block_size(candidate) - 1)

    assert state.included == []
    assert state.skipped == ["big.txt"]
    assert state.contents == ""
    assert state.size == PREAMBLE_SIZE


@pytest.mark.unit
def test_assemble_budget_is_inclusive(tmp_path: Path) -> None:
    candidate = make_candidate(tmp_path, "exact.txt", "x" * 100)

    state = assemble([candidate], budget=PREAMBLE_SIZE + block_size(candidate))

    assert state.included == ["exact.txt"]


@pytest.mark.unit
def test_assemble_is_greedy_and_order_dependent(tmp_path: Path) -> None:
    big = make_candidate(tmp_path, "big.txt", "b" * 600)
    small = make_candidate(tmp_path, "small.txt", "s" * 100)
    candidates = [big, small]

    large_budget = PREAMBLE_SIZE + block_size(big) + block_size(small) - 1
    small_budget = PREAMBLE_SIZE + block_size(small)

    with_large = assemble(candidates, budget=large_budget)
    with_small = assemble(candidates, budget=small_budget)

    assert with_large.included == ["big.txt"]
    assert with_large.skipped == ["small.txt"]
    assert with_small.included == ["small.txt"]
    assert with_small.skipped == ["big.txt"]
    assert not set(with_large.included) >= set(with_small.included)


@pytest.mark.unit
def test_assemble_never_revisits_skipped_files(tmp_path: Path) -> None:
    first = make_candidate(tmp_path, "1.txt", "a" * 300)
    second = make_candidate(tmp_path, "2.txt", "b" * 200)
    third = make_candidate(tmp_path, "3.txt", "c" * 50)

    budget = PREAMBLE_SIZE + block_size(second) + block_size(third)
    state = assemble([first, second, third], budget=budget)

    assert state.included == ["2.txt", "3.txt"]
    assert state.skipped == ["1.txt"]


@pytest.mark.unit
def test_assemble_decreasing_budget_never_adds_files_of_equal_size(tmp_path: Path) -> None:
    candidates = [make_candidate(tmp_path, f"f{i}.txt", "x" * 100) for i in range(5)]
    step = block_size(candidates[0])

    counts = [
        len(assemble(candidates, budget=PREAMBLE_SIZE + step * n + 7).included) for n in range(6, -1, -1)
    ]

    assert counts == sorted(counts, reverse=True)
    assert counts[0] == len(candidates)
    assert counts[-1] == 0


@pytest.mark.unit
def test_assemble_skips_unreadable_files_without_counting_them(tmp_path: Path) -> None:
    bad = make_candidate(tmp_path, "bad.txt", b"\xff\xfe\x00oops")
    gone = make_candidate(tmp_path, "gone.txt", "soon deleted")
    gone.path.unlink()
    good = make_candidate(tmp_path, "good.txt", "ok")

    state = assemble([bad, gone, good], budget=1024)

    assert state.included == ["good.txt"]
    assert state.skipped == ["bad.txt", "gone.txt"]
    assert state.size == PREAMBLE_SIZE + block_size(good)


@pytest.mark.unit
def test_read_candidate_wraps_decoding_errors(tmp_path: Path) -> None:
    bad = make_candidate(tmp_path, "bad.txt", b"\xff\xfe")

    with pytest.raises(FileReadError) as exc_info:
        read_candidate(bad)

    assert exc_info.value.path == bad.path
    assert "Error reading file" in str(exc_info.value)
