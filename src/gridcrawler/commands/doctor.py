from __future__ import annotations

from gridcrawler.commands.common import check_programs
from gridcrawler.utils.logger import get_logger, log_success
from gridcrawler.utils.runner import can_run

LOG = get_logger("doctor")

OPTIONAL_PROGRAMS = ("xargs", "sbatch")


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "doctor", parents=[parent],
        help="Preflight checks for bcftools and the sbatch/xargs helpers.",
    )
    p.set_defaults(func=run)


def _ok(x: bool) -> str:
    return "OK" if x else "MISSING"


def run(_args) -> int:
    # bcftools is required for every search
    check_programs(["bcftools"], logger=LOG)

    missing = []
    for program in OPTIONAL_PROGRAMS:
        present = can_run(program)
        print(f"[check] {program} on PATH: {_ok(present)}")
        if present:
            check_programs([program], logger=LOG)
        else:
            missing.append(program)

    if missing:
        LOG.warning("Optional program(s) missing: %s", ", ".join(missing))
    else:
        log_success("[ok] environment looks good.", LOG)
    return 0
