from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from gridcrawler.config.schema import SearchOptions
from gridcrawler.plan.types import MergeCommand, PathGroup, QueryCommand

MERGED_STEM = "gc_merged"


# ---------------------------
# Artifact naming
# ---------------------------

def output_artifact(outdata_dir: Path, sample_ids: Sequence[str], ending: str) -> Path:
    """<outdata_dir>/<id1_id2_...><ending>; merge and index steps match on this exact name."""
    return outdata_dir / ("_".join(sample_ids) + ending)


def merged_artifact(outdata_dir: Path, ending: str) -> Path:
    return outdata_dir / (MERGED_STEM + ending)


# ---------------------------
# bcftools view
# ---------------------------

def _quoted_expression(flag: str, expression: str) -> List[str]:
    # One token per word between lone quote tokens; the shell that runs the
    # line glues them back into a single argument.
    return [flag, "'", *expression.split(), "'"]


def build_query(group: PathGroup, options: SearchOptions) -> QueryCommand:
    artifact = output_artifact(options.outdata_dir, group.sample_ids, options.outfile_ending)

    cmd: list[str] = [
        "bcftools", "view",
        "--samples", ",".join(group.sample_ids),
    ]
    if options.genotype:
        cmd += ["--genotype", options.genotype]
    # exclude wins when both are given
    if options.exclude:
        cmd += _quoted_expression("-e", options.exclude)
    elif options.include:
        cmd += _quoted_expression("-i", options.include)
    if options.positions:
        cmd += ["--regions", ",".join(options.positions)]
    cmd += ["--output-type", options.output_type]
    cmd.append(group.path)
    cmd += [">", str(artifact)]
    cmd += [";", "bcftools", "index", str(artifact)]
    return QueryCommand(tokens=tuple(cmd), path=group.path, artifact=artifact)


# ---------------------------
# bcftools merge
# ---------------------------

def build_merge(groups: Sequence[PathGroup], options: SearchOptions) -> Optional[MergeCommand]:
    """None for a single group; merging one file is skipped, not run as an identity merge."""
    if len(groups) <= 1:
        return None
    ending = options.outfile_ending
    artifact = merged_artifact(options.outdata_dir, ending)

    cmd: list[str] = [
        "bcftools", "merge",
        "--output-type", options.output_type,
    ]
    for group in groups:
        cmd.append(str(output_artifact(options.outdata_dir, group.sample_ids, ending)))
    cmd += [">", str(artifact)]
    return MergeCommand(tokens=tuple(cmd), artifact=artifact)
