from __future__ import annotations

from typing import Sequence


class GridCrawlerError(Exception):
    """Base class for every condition the CLI turns into exit status 1."""


class UnknownIdentifier(GridCrawlerError):
    def __init__(self, sample_id: str) -> None:
        super().__init__(f"Could not detect sample_id: {sample_id} in grid")
        self.sample_id = sample_id


class MissingRequiredOption(GridCrawlerError):
    pass


class InvalidOption(GridCrawlerError):
    pass


class ExternalToolUnavailable(GridCrawlerError):
    def __init__(self, program: str) -> None:
        super().__init__(f"Could not detect {program} in your PATH")
        self.program = program


class IOFailure(GridCrawlerError):
    pass


class CommandExecutionFailure(GridCrawlerError):
    """A single bcftools invocation exited non-zero. Never fatal on its own."""

    def __init__(self, tokens: Sequence[str], returncode: int) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(tokens)}")
        self.tokens = tuple(tokens)
        self.returncode = returncode
