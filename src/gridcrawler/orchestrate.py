from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from gridcrawler.errors import CommandExecutionFailure, IOFailure
from gridcrawler.plan.types import SubmissionPlan
from gridcrawler.sbatch.dispatch import side_file_path, write_core_counting, write_merge, write_worker_queue
from gridcrawler.sbatch.header import emit_header, script_locations
from gridcrawler.utils.logger import get_logger
from gridcrawler.utils.runner import run_command
from gridcrawler.utils.stamps import RunStamp

LOG = get_logger("orchestrate")


@dataclass
class ExecutionReport:
    executed: int = 0
    failures: List[CommandExecutionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class SubmissionResult:
    script: Path
    side_file: Optional[Path]
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


# ---------------------------
# Direct (shell) mode
# ---------------------------

def _run_one(tokens: Sequence[str], *, dry_run: bool, logger: logging.Logger) -> None:
    try:
        run_command(tokens, shell=True, dry_run=dry_run, logger=logger)
    except subprocess.CalledProcessError as e:
        raise CommandExecutionFailure(tokens, e.returncode) from e


def run_direct(
    plan: SubmissionPlan,
    *,
    dry_run: bool = False,
    logger: Optional[logging.Logger] = None,
) -> ExecutionReport:
    """Run every query one after another, then the merge; a failing command does not stop the rest."""
    log = logger or LOG
    prefix: Tuple[str, ...] = tuple(plan.scheduling.source_environment_commands)
    report = ExecutionReport()

    log.info("Executing grid search")
    commands = [prefix + q.tokens for q in plan.queries]
    if plan.merge is not None:
        commands.append(prefix + plan.merge.tokens)

    for i, tokens in enumerate(commands):
        if plan.merge is not None and i == len(plan.queries):
            log.info("Merging grid search results")
        try:
            _run_one(tokens, dry_run=dry_run, logger=log)
        except CommandExecutionFailure as e:
            log.error("%s", e)
            report.failures.append(e)
        report.executed += 1
    return report


# ---------------------------
# Scheduled (sbatch) mode
# ---------------------------

def write_batch_script(
    plan: SubmissionPlan,
    stamp: RunStamp,
    *,
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Path, Optional[Path]]:
    """Write header + parallel section + merge. Returns (script, side file or None)."""
    log = logger or LOG
    params = plan.scheduling
    locations = script_locations(params.analysis_dir, stamp)
    script = emit_header(locations, params, logger=log)

    side_file: Optional[Path] = None
    try:
        with script.open("a", encoding="utf-8") as fh:
            if params.xargs:
                side_file = side_file_path(script)
                write_worker_queue(fh, side_file, plan.queries, params.core_processor_number, verbose=verbose)
            else:
                write_core_counting(fh, plan.queries, params.core_processor_number)
            if plan.merge is not None:
                write_merge(fh, plan.merge)
    except OSError as e:
        raise IOFailure(f"Can't write to '{script}': {e}") from e
    return script, side_file


def submit_scheduled(
    plan: SubmissionPlan,
    stamp: RunStamp,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
) -> SubmissionResult:
    log = logger or LOG
    script, side_file = write_batch_script(plan, stamp, verbose=verbose, logger=log)

    try:
        result = run_command(["sbatch", str(script)], capture=True, dry_run=dry_run, logger=log)
    except subprocess.CalledProcessError as e:
        return SubmissionResult(script=script, side_file=side_file, returncode=e.returncode, stdout=e.stdout or "")
    except OSError as e:
        log.error("Could not submit %s: %s", script, e)
        return SubmissionResult(script=script, side_file=side_file, returncode=127)

    if result.stdout:
        log.info("%s", result.stdout.strip())
    return SubmissionResult(script=script, side_file=side_file, returncode=0, stdout=result.stdout or "")


def execute(
    plan: SubmissionPlan,
    stamp: RunStamp,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
):
    if plan.scheduled:
        return submit_scheduled(plan, stamp, dry_run=dry_run, verbose=verbose, logger=logger)
    return run_direct(plan, dry_run=dry_run, logger=logger)
