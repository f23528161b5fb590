"""
The two ways a generated script runs its query commands in parallel.

Core counting writes every command backgrounded with '&' and drops a
'wait' barrier whenever the written-command counter reaches
``barriers * core_number``. The worker queue writes the commands to a
side file and lets ``xargs -P`` drain it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, TextIO, Tuple

from gridcrawler.plan.types import MergeCommand, QueryCommand

FIRST_COMMAND = "bcftools"
ESCAPE_CHARACTERS = ("'", '"')


def _tokens_line(tokens: Iterable[str]) -> str:
    return "".join(f"{t} " for t in tokens)


# ---------------------------
# Core counting
# ---------------------------

def write_core_counting(fh: TextIO, queries: Sequence[QueryCommand], core_number: int) -> None:
    # The threshold is barriers * core_number and barriers only grows when a
    # barrier is written, so the recurrence must stay as is.
    barriers = 1
    written = 0
    for query in queries:
        if written == barriers * core_number:
            fh.write("wait\n\n")
            barriers += 1
        fh.write(_tokens_line(query.tokens))
        fh.write("& \n\n")
        written += 1
    fh.write("wait\n\n")


# ---------------------------
# Worker queue (xargs)
# ---------------------------

def escape_tokens(tokens: Sequence[str]) -> Tuple[str, ...]:
    """Backslash quote characters so they survive xargs and the nested 'sh -c'."""
    out = []
    for token in tokens:
        for ch in ESCAPE_CHARACTERS:
            token = token.replace(ch, "\\" + ch)
        out.append(token)
    return tuple(out)


def strip_first(tokens: Sequence[str]) -> Tuple[str, ...]:
    return tuple(tokens[1:])


def xargs_line(tokens: Sequence[str]) -> str:
    return _tokens_line(strip_first(escape_tokens(tokens))) + "\n"


def side_file_path(script_path: Path, counter: int = 0) -> Path:
    return Path(f"{script_path}.{counter}.xargs")


def xargs_instruction(
    side_file: Path,
    core_number: int,
    *,
    first_command: str = FIRST_COMMAND,
    verbose: bool = False,
) -> str:
    parts = [
        f"cat {side_file} ",
        "| ",
        "xargs ",
        "-i ",  # tells xargs where to put each line: {}
    ]
    if verbose:
        parts.append("--verbose ")
    parts += [
        "-n1 ",
        f"-P{core_number} ",
        'sh -c "',
        f"{first_command} ",
        ' {} "\n\n',
    ]
    return "".join(parts)


def write_worker_queue(
    fh: TextIO,
    side_file: Path,
    queries: Sequence[QueryCommand],
    core_number: int,
    *,
    verbose: bool = False,
) -> None:
    fh.write(xargs_instruction(side_file, core_number, verbose=verbose))
    with side_file.open("w", encoding="utf-8") as xfh:
        for query in queries:
            xfh.write(xargs_line(query.tokens))


# ---------------------------
# Merge
# ---------------------------

def write_merge(fh: TextIO, merge: MergeCommand) -> None:
    fh.write(_tokens_line(merge.tokens))
