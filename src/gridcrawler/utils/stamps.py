from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

ANALYSIS_DIRNAME = "gc_analysis"


@dataclass(frozen=True)
class RunStamp:
    """Date and date-time strings captured once per invocation."""
    date: str        # 2016-05-04
    date_time: str   # 2016-05-04T13:37:00

    @classmethod
    def now(cls, when: Optional[datetime] = None) -> "RunStamp":
        when = when or datetime.now()
        return cls(date=when.strftime("%Y-%m-%d"), date_time=when.strftime("%Y-%m-%dT%H:%M:%S"))


def default_analysis_dir(cwd: Optional[Path] = None) -> Path:
    return (cwd or Path.cwd()) / ANALYSIS_DIRNAME


def default_outdata_dir(stamp: RunStamp, cwd: Optional[Path] = None) -> Path:
    return default_analysis_dir(cwd) / stamp.date_time


def default_log_file(stamp: RunStamp, prog: str = "gridcrawler", cwd: Optional[Path] = None) -> Path:
    return default_analysis_dir(cwd) / "gc_log" / stamp.date / f"{prog}_{stamp.date_time}.log"
