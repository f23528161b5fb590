from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcftools --output-type -> file ending of the written artifact
OUTPUT_TYPE_ENDINGS: Dict[str, str] = {
    "b": ".bcf.gz",
    "z": ".vcf.gz",
}

QOS_CHOICES = ("low", "normal", "high")
EMAIL_TYPES = "BEF"  # begin, end, fail

# Syntax only; says nothing about whether the mailbox exists
_EMAIL_RE = re.compile(r"[ |\t|\r|\n]*\"?([^\"]+\"?@[^ <>\t]+\.[^ <>\t][^ <>\t]+)[ |\t|\r|\n]*")


class SearchOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    positions: List[str] = Field(default_factory=list)
    include: Optional[str] = None
    exclude: Optional[str] = None
    genotype: Optional[str] = None
    output_type: str = "b"
    outdata_dir: Path

    @field_validator("output_type")
    @classmethod
    def _check_output_type(cls, v: str) -> str:
        if v not in OUTPUT_TYPE_ENDINGS:
            raise ValueError("output_type must be one of: " + ", ".join(OUTPUT_TYPE_ENDINGS))
        return v

    @field_validator("include", "exclude", "genotype")
    @classmethod
    def _blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def outfile_ending(self) -> str:
        return OUTPUT_TYPE_ENDINGS[self.output_type]


class SchedulingParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_id: Optional[str] = None
    email: Optional[str] = None
    email_type: str = "F"
    core_processor_number: int = Field(default=16, ge=1)
    slurm_quality_of_service: str = "low"
    process_time: int = Field(default=1, ge=1)  # hours
    pipefail: bool = True
    error_trap: bool = True
    xargs: bool = True
    source_environment_commands: List[str] = Field(default_factory=list)
    analysis_dir: Path = Path("gc_analysis")

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not _EMAIL_RE.search(v):
            raise ValueError(f"The supplied email: {v} seem to be malformed.")
        return v

    @field_validator("email_type")
    @classmethod
    def _check_email_type(cls, v: str) -> str:
        v = v.upper()
        if not v or any(c not in EMAIL_TYPES for c in v):
            raise ValueError("email_type must be made of the letters B, E and F")
        return v

    @field_validator("slurm_quality_of_service")
    @classmethod
    def _check_qos(cls, v: str) -> str:
        if v not in QOS_CHOICES:
            raise ValueError("slurm_quality_of_service must be one of: " + ", ".join(QOS_CHOICES))
        return v

    @field_validator("source_environment_commands")
    @classmethod
    def _terminate_env_commands(cls, v: List[str]) -> List[str]:
        if v and not v[-1].endswith(";"):
            return [*v, ";"]
        return v
