"""Metadata extraction from crash test paths and commit messages.

Crash tests are named after the issue they reproduce, either ``<issue>.rs`` or
``<issue>-<slug>.rs``. Merge-bot commits start with ``Auto merge of #<pr>``.
"""

from fnmatch import fnmatchcase
from pathlib import PurePosixPath

PR_MARKER = "Auto merge of #"

# Largest value an unsigned 64-bit issue number can hold
MAX_ISSUE_NUMBER = 2**64 - 1

_GLOB_CHARS = frozenset("*?[")


def _parse_unsigned(text: str) -> int | None:
    """Parse a run of ASCII digits, rejecting signs, spaces and overflow."""
    if not text or not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    if value > MAX_ISSUE_NUMBER:
        return None
    return value


def extract_issue_number(path: str) -> int | None:
    """Extract the issue number from a crash test filename.

    Examples:
        - "tests/crashes/12345.rs" -> 12345
        - "tests/crashes/12345-foo.rs" -> 12345
        - "tests/crashes/foo.rs" -> None
        - "tests/crashes/foo-12345.rs" -> None

    Args:
        path: Repository-relative path using forward slashes

    Returns:
        Issue number, or None if the filename does not follow the convention
    """
    stem = PurePosixPath(path).stem

    number = _parse_unsigned(stem)
    if number is not None:
        return number

    if "-" in stem:
        return _parse_unsigned(stem.split("-", 1)[0])

    return None


def extract_pr_number(message: str) -> int | None:
    """Extract the PR number from a merge-bot commit message.

    Examples:
        - "Auto merge of #147900 - Zalathar:rollup-ril6jsi, r=Zalathar" -> 147900
        - "Mention #12345 but not auto merge" -> None

    Args:
        message: Full commit message

    Returns:
        PR number, or None if the marker is missing or no digits follow it
    """
    start = message.find(PR_MARKER)
    if start == -1:
        return None

    digits = []
    for char in message[start + len(PR_MARKER) :]:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)

    return _parse_unsigned("".join(digits))


def normalize_path_glob(pattern: str) -> str:
    """Rewrite a pathspec relative to the repository root.

    Drops ``.`` and empty segments so git and the HEAD tree listing read the
    pattern the same way. "./tests//crashes/*.rs" -> "tests/crashes/*.rs"
    """
    parts = [part for part in pattern.strip().split("/") if part not in ("", ".")]
    return "/".join(parts) or "*"


def has_glob_chars(pattern: str) -> bool:
    """Check whether a pathspec contains wildcard characters."""
    return any(char in _GLOB_CHARS for char in pattern)


def glob_base_dir(pattern: str) -> str:
    """Return the longest leading directory of a pathspec without wildcards.

    "tests/crashes/*.rs" -> "tests/crashes", "tests/crashes" -> "tests/crashes"
    """
    if not has_glob_chars(pattern):
        return pattern.rstrip("/")

    static_parts = []
    for part in pattern.split("/")[:-1]:
        if has_glob_chars(part):
            break
        static_parts.append(part)
    return "/".join(static_parts)


def matches_path_glob(path: str, pattern: str) -> bool:
    """Match a repository path the way a default git pathspec would.

    Wildcards follow fnmatch rules where ``*`` also crosses ``/``. A pattern
    without wildcards matches the path itself or anything beneath it.
    """
    if has_glob_chars(pattern):
        return fnmatchcase(path, pattern)

    prefix = pattern.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")
