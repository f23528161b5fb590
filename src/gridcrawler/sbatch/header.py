from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from gridcrawler.config.schema import SchedulingParams
from gridcrawler.errors import IOFailure
from gridcrawler.utils.logger import get_logger
from gridcrawler.utils.stamps import RunStamp

LOG = get_logger("sbatch")

PROGRAM_NAME = "grid-crawler"

_MAIL_TYPES = (("B", "BEGIN"), ("E", "END"), ("F", "FAIL"))


@dataclass(frozen=True)
class ScriptLocations:
    script: Path  # <analysis>/scripts/grid-crawler_<stamp>.sh
    info: Path    # <analysis>/info/grid-crawler_<stamp>  (+ .stdout.txt / .stderr.txt)


def script_locations(analysis_dir: Path, stamp: RunStamp) -> ScriptLocations:
    stub = f"{PROGRAM_NAME}_{stamp.date_time}"
    return ScriptLocations(
        script=analysis_dir / "scripts" / f"{stub}.sh",
        info=analysis_dir / "info" / stub,
    )


def header_text(params: SchedulingParams, info_path: Path) -> str:
    """
    The fixed-order preamble of every generated script.

    Log scrapers read these lines verbatim, so the order and the blank
    lines are part of the format.
    """
    lines: List[str] = ["#! /bin/bash -l"]
    if params.pipefail:
        lines.append("set -o pipefail")  # Detect errors within pipes
    lines += [
        f"#SBATCH -A {params.project_id}",
        f"#SBATCH -n {params.core_processor_number}",
        f"#SBATCH -t {params.process_time}:00:00",
        f"#SBATCH --qos={params.slurm_quality_of_service}",
        f"#SBATCH -J {PROGRAM_NAME}",
        f"#SBATCH -e {info_path}.stderr.txt",
        f"#SBATCH -o {info_path}.stdout.txt",
    ]
    if params.email:
        for letter, mail_type in _MAIL_TYPES:
            if letter in params.email_type:
                lines.append(f"#SBATCH --mail-type={mail_type}")
        lines += [f"#SBATCH --mail-user={params.email}", ""]

    lines += [
        'echo "Running on: $(hostname)"',
        "PROGNAME=$(basename $0)",
        "",
    ]
    if params.source_environment_commands:
        lines += [
            "##Activate environment",
            " ".join(params.source_environment_commands),
            "",
        ]
    if params.error_trap:
        lines += [
            "error() {",
            "",
            "\t## Display error message and exit",
            '\tret="$?"',
            '\techo "${PROGNAME}: ${1:-"Unknown Error - ExitCode="$ret}" 1>&2',
            "",
            "\texit 1",
            "}",
            "trap error ERR",
            "",
        ]
    return "\n".join(lines) + "\n"


def emit_header(
    locations: ScriptLocations,
    params: SchedulingParams,
    *,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Create the script and info directories, write the header, return the script path."""
    log = logger or LOG
    try:
        locations.script.parent.mkdir(parents=True, exist_ok=True)
        locations.info.parent.mkdir(parents=True, exist_ok=True)
        locations.script.write_text(header_text(params, locations.info), encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Can't write to '{locations.script}': {e}") from e

    log.info("Creating sbatch script for %s and writing script file(s) to: %s", PROGRAM_NAME, locations.script)
    log.info("Sbatch script %s data files will be written to: %s", PROGRAM_NAME, locations.info.parent.parent)
    return locations.script
