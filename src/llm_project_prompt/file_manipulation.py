from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import pathspec

from llm_project_prompt.config import IGNORE_FILE_NAME, CandidateFile, is_binary_path
from llm_project_prompt.exceptions import FileStatError, InvalidPatternError
from llm_project_prompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from llm_project_prompt.config import SelectionRules


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return str(path.relative_to(root)).replace("\\", "/")
    except ValueError:
        return str(path)


def normalize_globs(globs: Sequence[str]) -> list[str]:
    """Normalize a sequence of path glob patterns.

    Normalize a sequence of glob patterns by stripping whitespace and
    replacing backslashes with forward slashes. Empty patterns are dropped.

    Args:
        globs (Sequence[str]): the glob patterns to normalize

    Returns:
        list[str]: the normalized glob patterns
    """
    out: list[str] = []
    for g in globs:
        g2 = (g or "").strip()
        if not g2:
            continue
        out.append(g2.replace("\\", "/"))
    return out


def has_unrequested_hidden_part(rel: str, pattern: str) -> bool:
    """Check if a path crosses a hidden segment that the pattern does not name.

    A hidden segment (leading dot) is only accepted when some segment of the
    pattern itself starts with a dot and matches it, e.g. `.github/**`.

    Args:
        rel (str): the relative path produced by expanding `pattern`
        pattern (str): the include pattern

    Returns:
        bool: True if `rel` should be dropped from the expansion
    """
    dot_segments = [seg for seg in pattern.split("/") if seg.startswith(".")]
    for part in rel.split("/"):
        if part.startswith(".") and not any(fnmatch.fnmatchcase(part, seg) for seg in dot_segments):
            return True
    return False


def expand_include(root: Path, pattern: str, *, dot: bool = False) -> list[str]:
    """Expand one include pattern into the sorted relative paths of matching files.

    Args:
        root (Path): the project root the pattern is relative to
        pattern (str): a glob pattern, `*` within a segment and `**` across segments
        dot (bool): keep hidden files and directories the pattern does not name

    Raises:
        InvalidPatternError: if the pattern is absolute or otherwise rejected by the glob engine

    Returns:
        list[str]: the matching regular files, relative to `root`, sorted
    """
    if PurePosixPath(pattern).is_absolute() or Path(pattern).is_absolute():
        raise InvalidPatternError(pattern=pattern)
    try:
        matches = [p for p in root.glob(pattern) if p.is_file()]
    except (NotImplementedError, ValueError) as e:
        raise InvalidPatternError(pattern=pattern, reason=str(e)) from e
    rels = sorted(relpath(p, root) for p in matches)
    if dot:
        return rels
    return [r for r in rels if not has_unrequested_hidden_part(r, pattern)]


def expand_includes(root: Path, patterns: Sequence[str], *, dot: bool = False) -> list[str]:
    """Union the expansions of every include pattern, keeping the first occurrence of each path.

    Args:
        root (Path): the project root
        patterns (Sequence[str]): include patterns, in the order they were given
        dot (bool): keep hidden files and directories the patterns do not name

    Returns:
        list[str]: de-duplicated relative paths, pattern order first, path order second
    """
    found: list[str] = []
    for pattern in normalize_globs(patterns):
        found.extend(expand_include(root, pattern, dot=dot))
    return list(dict.fromkeys(found))


def match_any_glob(rel: str, globs: Sequence[str]) -> bool:
    """Check if a relative path matches any of the provided glob patterns.

    The whole path must match; `**` spans any number of segments.

    Args:
        rel (str): the relative path to check
        globs (Sequence[str]): the glob patterns to match against

    Returns:
        bool: True if `rel` matches any pattern in `globs`, False otherwise
    """
    path = PurePosixPath(rel)
    return any(path.full_match(g) for g in globs)


def load_ignore_rules(root: Path, *, enabled: bool = True) -> pathspec.GitIgnoreSpec | None:
    """Compile the `.gitignore` found at the root of the project.

    Args:
        root (Path): the project root
        enabled (bool): when False, ignore-file processing is disabled

    Returns:
        pathspec.GitIgnoreSpec | None: the compiled rules, or None if disabled or absent
    """
    if not enabled:
        return None
    ignore_file = root / IGNORE_FILE_NAME
    if not ignore_file.is_file():
        return None
    lines = ignore_file.read_text(encoding="utf-8").splitlines()
    return pathspec.GitIgnoreSpec.from_lines(lines)


def exclusion_reason(
    rel: str,
    rules: SelectionRules,
    ignore_rules: pathspec.GitIgnoreSpec | None,
) -> str | None:
    """Tell why a path is filtered out, checking binary, exclude then ignore rules.

    Args:
        rel (str): the relative path to check
        rules (SelectionRules): the selection rules of the run
        ignore_rules (pathspec.GitIgnoreSpec | None): compiled ignore rules, if any

    Returns:
        str | None: "binary", "excluded" or "ignored", or None if the path is kept
    """
    if is_binary_path(rel, rules.binary_extensions):
        return "binary"
    if match_any_glob(rel, normalize_globs(rules.exclude)):
        return "excluded"
    if ignore_rules is not None and ignore_rules.match_file(rel):
        return "ignored"
    return None


def apply_filters(
    rels: Sequence[str],
    rules: SelectionRules,
    ignore_rules: pathspec.GitIgnoreSpec | None,
) -> list[str]:
    """Drop binary, excluded and ignored paths, preserving order."""
    out: list[str] = []
    for rel in rels:
        reason = exclusion_reason(rel, rules, ignore_rules)
        if reason is not None:
            logger.debug("file_filtered", path=rel, reason=reason)
            continue
        out.append(rel)
    return out


def stat_candidate(root: Path, rel: str) -> CandidateFile:
    """Pair a relative path with its on-disk size.

    Args:
        root (Path): the project root
        rel (str): the path relative to `root`

    Raises:
        FileStatError: if the metadata lookup fails

    Returns:
        CandidateFile: the candidate with its current size
    """
    path = root / rel
    try:
        st = path.stat()
    except OSError as e:
        raise FileStatError(path=path, reason=str(e)) from e
    return CandidateFile(path=path, rel=rel, size=st.st_size)


def make_candidates(root: Path, rels: Sequence[str]) -> list[CandidateFile]:
    """Create candidates for the given paths, dropping those whose metadata is unavailable."""
    candidates: list[CandidateFile] = []
    for rel in rels:
        try:
            candidates.append(stat_candidate(root, rel))
        except FileStatError as e:
            logger.warning("file_stat_failed", path=rel, error=e.reason)
    return candidates


def select_files(root: Path, rules: SelectionRules) -> list[CandidateFile]:
    """Select the candidate files of a project.

    Include patterns are expanded in order and de-duplicated, then binary,
    excluded and ignored files are removed and every survivor is paired with
    its size.

    Args:
        root (Path): the project root
        rules (SelectionRules): the selection rules of the run

    Returns:
        list[CandidateFile]: the ordered candidates
    """
    ignore_rules = load_ignore_rules(root, enabled=rules.use_ignore_file)
    found = expand_includes(root, rules.include, dot=rules.dot)
    kept = apply_filters(found, rules, ignore_rules)
    candidates = make_candidates(root, kept)
    logger.info(
        "files_selected",
        matched=len(found),
        filtered=len(found) - len(kept),
        candidates=len(candidates),
    )
    return candidates
