from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from gridcrawler.commands.common import check_programs, validated
from gridcrawler.config.load import apply_params_defaults, load_grid, load_params_file
from gridcrawler.config.schema import OUTPUT_TYPE_ENDINGS, QOS_CHOICES, SchedulingParams, SearchOptions
from gridcrawler.errors import InvalidOption, IOFailure, MissingRequiredOption
from gridcrawler.grid.resolve import resolve
from gridcrawler.orchestrate import ExecutionReport, execute
from gridcrawler.plan.build import ENVIRONMENTS, build_plan
from gridcrawler.utils.logger import get_logger, log_success
from gridcrawler.utils.stamps import RunStamp, default_analysis_dir, default_outdata_dir

LOG = get_logger("search")

_DEFAULTS: Dict[str, Any] = {
    "sample_ids": None, "positions": None,
    "exclude": None, "include": None, "genotype": None,
    "environment": "shell", "project_id": None, "email": None, "email_type": "F",
    "core_processor_number": 16, "slurm_quality_of_service": "low", "process_time": 1,
    "source_environment_commands": None, "xargs": True, "pipefail": True, "error_trap": True,
    "outdata_dir": None, "analysis_dir": None, "output_type": "b",
    "dry_run": False, "verbose": False,
}


def setup_parser(subparsers, parent) -> None:
    p = subparsers.add_parser(
        "search", parents=[parent],
        help="Extract samples from the grid with bcftools view (and merge).",
        description=(
            "Look up each sample ID in the grid file, run one 'bcftools view' per "
            "distinct variant file and merge the results when more than one file "
            "was hit. Runs in this shell or as an sbatch script."
        ),
    )
    p.add_argument("grid_file", type=Path, help="YAML mapping of sample ID -> variant file.")
    p.add_argument("--params", type=Path, default=None, help="YAML with defaults for any option below.")

    # Filters
    p.add_argument("-s", "--sample-ids", dest="sample_ids", nargs="+", action="extend", default=None,
                   help="SampleIDs to analyze.")
    p.add_argument("-p", "--positions", nargs="+", action="extend", default=None,
                   help="Search at region(s): chrom or chrom:start-end.")
    p.add_argument("-e", "--exclude", type=str, default=None,
                   help="Exclude sites for which the expression is true (wins over --include).")
    p.add_argument("-i", "--include", type=str, default=None,
                   help="Include sites for which the expression is true.")
    p.add_argument("-g", "--genotype", type=str, default=None,
                   help='Require hom/het/miss genotype or, if prefixed with "^", exclude them.')

    # Execution
    p.add_argument("--environment", type=str.lower, choices=ENVIRONMENTS, default="shell",
                   help="Execute search via shell or sbatch (default: shell).")
    p.add_argument("--project-id", type=str, default=None, help="Project ID (mandatory with sbatch).")
    p.add_argument("--email", type=str, default=None, help="E-mail for sbatch notifications.")
    p.add_argument("--email-type", type=str, default="F",
                   help="Any of B(egin), E(nd), F(ail) (default: F).")
    p.add_argument("--core-processor-number", type=int, default=16,
                   help="Maximum number of cores per node (default: 16).")
    p.add_argument("--qos", dest="slurm_quality_of_service", choices=QOS_CHOICES, default="low",
                   help="SLURM quality of service (default: low).")
    p.add_argument("--process-time", type=int, default=1, help="Wall-clock limit in hours (default: 1).")
    p.add_argument("--source-environment-commands", nargs="+", default=None,
                   help="Environment activation tokens, e.g. source activate bcftools")
    p.add_argument("--xargs", dest="xargs", action="store_true", help="Parallelize with xargs (default).")
    p.add_argument("--no-xargs", dest="xargs", action="store_false",
                   help="Parallelize with backgrounded commands and wait barriers.")
    p.add_argument("--no-pipefail", dest="pipefail", action="store_false", help="Omit 'set -o pipefail'.")
    p.add_argument("--no-error-trap", dest="error_trap", action="store_false", help="Omit the ERR trap.")
    p.set_defaults(xargs=True, pipefail=True, error_trap=True)

    # Output
    p.add_argument("--outdata-dir", type=Path, default=None,
                   help="Output directory (default: gc_analysis/<timestamp>).")
    p.add_argument("--analysis-dir", type=Path, default=None,
                   help="Where sbatch scripts and info files go (default: ./gc_analysis).")
    p.add_argument("--output-type", choices=tuple(OUTPUT_TYPE_ENDINGS), default="b",
                   help="b: compressed BCF, z: compressed VCF (default: b).")
    p.set_defaults(func=run)


def _required_programs(environment: str, xargs: bool) -> List[str]:
    programs = ["bcftools"]
    if environment == "sbatch" and xargs:
        programs.append("xargs")
    return programs


def run(args) -> int:
    stamp: RunStamp = getattr(args, "stamp", None) or RunStamp.now()
    apply_params_defaults(args, load_params_file(args.params), _DEFAULTS)

    sample_ids = [str(s) for s in (args.sample_ids or [])]
    if not sample_ids:
        raise MissingRequiredOption("Please provide sample_ids")
    LOG.info("Including sample_id(s): %s", ", ".join(sample_ids))

    environment = str(args.environment).lower()
    if environment not in ENVIRONMENTS:
        raise InvalidOption(f"environment must be one of: {', '.join(ENVIRONMENTS)}")
    if environment == "sbatch" and not args.project_id:
        raise MissingRequiredOption("Please provide project_id when submitting via sbatch")

    scheduling = validated(
        SchedulingParams,
        project_id=args.project_id,
        email=args.email if environment == "sbatch" else None,
        email_type=args.email_type,
        core_processor_number=args.core_processor_number,
        slurm_quality_of_service=args.slurm_quality_of_service,
        process_time=args.process_time,
        pipefail=args.pipefail,
        error_trap=args.error_trap,
        xargs=args.xargs,
        source_environment_commands=list(args.source_environment_commands or []),
        analysis_dir=args.analysis_dir or default_analysis_dir(),
    )

    check_programs(_required_programs(environment, scheduling.xargs), logger=LOG)

    outdata_dir = Path(args.outdata_dir) if args.outdata_dir else default_outdata_dir(stamp)
    options = validated(
        SearchOptions,
        positions=[str(p) for p in (args.positions or [])],
        include=args.include,
        exclude=args.exclude,
        genotype=args.genotype,
        output_type=args.output_type,
        outdata_dir=outdata_dir,
    )
    try:
        outdata_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"Could not create outdata_dir {outdata_dir}: {e}") from e

    grid = load_grid(Path(args.grid_file))
    groups = resolve(grid, sample_ids, logger=LOG)
    plan = build_plan(groups, options, environment=environment, scheduling=scheduling, logger=LOG)

    outcome = execute(plan, stamp, dry_run=args.dry_run, verbose=args.verbose)

    if isinstance(outcome, ExecutionReport):
        if outcome.failures:
            LOG.error("%d of %d command(s) failed", len(outcome.failures), outcome.executed)
        else:
            log_success(f"[ok] grid search → {outdata_dir}", LOG)
        return 0

    if not outcome.ok:
        LOG.error("sbatch submission of %s failed (exit %s)", outcome.script, outcome.returncode)
        return 1
    log_success(f"[ok] submitted {outcome.script}", LOG)
    return 0
