"""
Core logic for llmcat package.
"""

from __future__ import annotations

import glob
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import pyperclip
from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()

# Exceptions
class LlmCatError(Exception): ...
class UsageError(LlmCatError): ...
class ClipboardError(LlmCatError): ...


class PatternError(LlmCatError):
    """Raised for a glob pattern that cannot be compiled."""

    def __init__(self, pos: int, msg: str) -> None:
        super().__init__(f"Pattern syntax error near position {pos}: {msg}")
        self.pos = pos
        self.msg = msg


# Defaults & helpers
TRUNCATION_MARKER = "....."
BLOCK_SEPARATOR = "\n\n\n"

_UINT_RE = re.compile(r"\+?[0-9]+")
_SEPARATORS = frozenset({"/", os.sep})


def _paint(colour: str, msg: str) -> str:
    # colour only when stderr is a terminal; stdout is left untouched
    if sys.stderr.isatty():
        return colour + msg + Style.RESET_ALL
    return msg


def warn(msg: str) -> None:
    print(_paint(Fore.YELLOW, msg), file=sys.stderr)


def error(msg: str) -> None:
    print(_paint(Fore.RED, msg), file=sys.stderr)


@dataclass
class LlmCatArgs:
    clipboard: bool = False
    limit: Optional[int] = None
    filenames: List[str] = field(default_factory=list)


# Argument parsing
def _parse_limit(value: str, flag: str) -> int:
    if not _UINT_RE.fullmatch(value):
        raise UsageError(
            f"Invalid value passed to `{flag}`. It must be an unsigned integer."
        )
    return int(value)


def parse_args(tokens: List[str]) -> LlmCatArgs:
    """
    Build an :class:`LlmCatArgs` from the tokens following the subcommand.

    Unrecognised tokens, including ones that start with ``-``, are kept as
    file arguments in the order they appear. A repeated limit overwrites the
    previous one.
    """
    args = LlmCatArgs()
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok in ("-cb", "--clipboard"):
            args.clipboard = True
        elif tok in ("-l", "--limit"):
            if i + 1 >= len(tokens):
                raise UsageError("No argument passed to `--limit`.")
            args.limit = _parse_limit(tokens[i + 1], "--limit")
            i += 1
        elif tok.startswith("-l="):
            args.limit = _parse_limit(tok[len("-l="):], "-l")
        elif tok.startswith("--limit="):
            args.limit = _parse_limit(tok[len("--limit="):], "--limit")
        else:
            args.filenames.append(tok)
        i += 1
    return args


# Filesystem access
class FileSystem:
    """Thin wrapper over the local filesystem used by :func:`expand_files`."""

    def is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def list_dir(self, path: str) -> List[str]:
        with os.scandir(path) as entries:
            return [entry.path for entry in entries]

    def match_glob(self, pattern: str) -> List[str]:
        matches = glob.glob(pattern, recursive=True, include_hidden=True)
        # per-directory order: "a/b" before "a-c/x"
        return sorted(matches, key=lambda p: Path(p).parts)


def check_pattern(pattern: str) -> None:
    """Raise :class:`PatternError` if *pattern* is not a well-formed glob."""
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            start = i
            while i < n and pattern[i] == "*":
                i += 1
            stars = i - start
            if stars > 2:
                raise PatternError(
                    start, "wildcards are either regular `*` or recursive `**`"
                )
            if stars == 2:
                own_component = (start == 0 or pattern[start - 1] in _SEPARATORS) and (
                    i == n or pattern[i] in _SEPARATORS
                )
                if not own_component:
                    raise PatternError(
                        start, "recursive wildcards must form a single path component"
                    )
            continue
        if ch == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            # a leading ']' is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise PatternError(i, "invalid range pattern")
            i = close + 1
            continue
        i += 1


# Path expansion
def expand_files(patterns: List[str], fs: Optional[FileSystem] = None) -> List[str]:
    """
    Turn file, directory and glob arguments into a flat list of file paths.

    Directories are listed one level deep. Problems with a single pattern are
    reported as warnings and never stop the remaining patterns.
    """
    fs = fs or FileSystem()
    result: List[str] = []
    for pattern in patterns:
        if fs.is_file(pattern):
            result.append(pattern)
        elif fs.is_dir(pattern):
            try:
                children = fs.list_dir(pattern)
            except OSError:
                # unreadable directories contribute nothing, without a warning
                continue
            result.extend(child for child in children if fs.is_file(child))
        else:
            try:
                check_pattern(pattern)
            except PatternError as e:
                warn(f"Invalid glob pattern '{pattern}': {e}")
                continue
            matches = [m for m in fs.match_glob(pattern) if fs.is_file(m)]
            if not matches:
                warn(f"No files matched '{pattern}'")
            result.extend(matches)
    return result


# Payload generation
def truncate_lines(text: str, limit: int) -> str:
    kept = "\n".join(text.split("\n")[:limit])
    if len(kept) < len(text):
        kept += "\n" + TRUNCATION_MARKER
    return kept


def wrap_block(filename: str, text: str) -> str:
    return f"\\\\ {filename}\n{text}\n\\\\End of file {filename}{BLOCK_SEPARATOR}"


def gen_payload(args: LlmCatArgs) -> str:
    blocks: List[str] = []
    for f in args.filenames:
        try:
            with Path(f).open("r", encoding="utf-8", newline="") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as e:
            warn(f"Warning: unable to open file {f} => {e}")
            continue
        if args.limit is not None:
            text = truncate_lines(text, args.limit)
        blocks.append(wrap_block(f, text))
    return "".join(blocks)


# Output
class Clipboard:
    """System clipboard backed by :mod:`pyperclip`."""

    def set_contents(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Could not set clipboard contents: {e}")


def dispatch(payload: str, clipboard: bool, board: Optional[Clipboard] = None) -> None:
    if clipboard:
        (board or Clipboard()).set_contents(payload)
        print("set contents")
    else:
        print(payload)
