from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from gridcrawler.config.schema import SchedulingParams


@dataclass(frozen=True)
class PathGroup:
    path: str                    # variant file shared by every sample below
    sample_ids: Tuple[str, ...]  # request order


@dataclass(frozen=True)
class QueryCommand:
    tokens: Tuple[str, ...]  # bcftools view ... ; bcftools index ...
    path: str
    artifact: Path


@dataclass(frozen=True)
class MergeCommand:
    tokens: Tuple[str, ...]
    artifact: Path


@dataclass(frozen=True)
class SubmissionPlan:
    queries: Tuple[QueryCommand, ...]
    merge: Optional[MergeCommand]
    environment: str  # "shell" | "sbatch"
    scheduling: SchedulingParams = field(default_factory=SchedulingParams)

    @property
    def scheduled(self) -> bool:
        return self.environment == "sbatch"
