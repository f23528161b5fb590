from __future__ import annotations

import logging
from typing import Optional, Sequence

from gridcrawler.bcftools.commands import build_merge, build_query
from gridcrawler.config.schema import SchedulingParams, SearchOptions
from gridcrawler.plan.types import PathGroup, SubmissionPlan
from gridcrawler.utils.logger import get_logger

LOG = get_logger("plan")

ENVIRONMENTS = ("shell", "sbatch")


def build_plan(
    groups: Sequence[PathGroup],
    options: SearchOptions,
    *,
    environment: str = "shell",
    scheduling: Optional[SchedulingParams] = None,
    logger: Optional[logging.Logger] = None,
) -> SubmissionPlan:
    log = logger or LOG
    environment = environment.lower()
    if environment not in ENVIRONMENTS:
        raise ValueError(f"environment must be one of: {', '.join(ENVIRONMENTS)}")
    if options.include and options.exclude:
        log.warning("Both include and exclude expressions given; using exclude only")

    queries = tuple(build_query(g, options) for g in groups)
    merge = build_merge(groups, options)
    log.debug("Built %d query command(s)%s", len(queries), " and a merge" if merge else "")
    return SubmissionPlan(
        queries=queries,
        merge=merge,
        environment=environment,
        scheduling=scheduling or SchedulingParams(),
    )
