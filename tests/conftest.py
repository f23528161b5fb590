from pathlib import Path

import pytest

from gridcrawler.config.schema import SchedulingParams, SearchOptions
from gridcrawler.plan.types import PathGroup
from gridcrawler.utils.logger import reset_logger
from gridcrawler.utils.stamps import RunStamp


@pytest.fixture(autouse=True)
def _fresh_logger():
    # cli.main configures the package logger; undo it between tests
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def grid():
    return {"s1": "a.vcf", "s2": "a.vcf", "s3": "b.vcf"}


@pytest.fixture
def stamp() -> RunStamp:
    return RunStamp(date="2016-05-04", date_time="2016-05-04T13:37:00")


@pytest.fixture
def outdir(tmp_path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def options(outdir) -> SearchOptions:
    return SearchOptions(outdata_dir=outdir)


@pytest.fixture
def groups():
    return [
        PathGroup(path="a.vcf", sample_ids=("s1", "s2")),
        PathGroup(path="b.vcf", sample_ids=("s3",)),
    ]


@pytest.fixture
def scheduling(tmp_path) -> SchedulingParams:
    return SchedulingParams(project_id="prj001", analysis_dir=tmp_path / "gc_analysis")
