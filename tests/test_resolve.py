import logging

import pytest

from gridcrawler.errors import UnknownIdentifier
from gridcrawler.grid.resolve import resolve
from gridcrawler.plan.types import PathGroup


def test_groups_samples_by_shared_path(grid):
    groups = resolve(grid, ["s1", "s2", "s3"])
    assert groups == [
        PathGroup(path="a.vcf", sample_ids=("s1", "s2")),
        PathGroup(path="b.vcf", sample_ids=("s3",)),
    ]


def test_same_path_lands_in_one_group_regardless_of_position(grid):
    groups = resolve(grid, ["s1", "s3", "s2"])
    assert [g.path for g in groups] == ["a.vcf", "b.vcf"]
    assert groups[0].sample_ids == ("s1", "s2")


def test_group_order_follows_first_seen_path(grid):
    groups = resolve(grid, ["s3", "s2", "s1"])
    assert [g.path for g in groups] == ["b.vcf", "a.vcf"]
    assert groups[1].sample_ids == ("s2", "s1")


def test_union_of_groups_equals_request():
    grid = {f"id{i}": f"f{i % 4}.bcf" for i in range(20)}
    request = [f"id{i}" for i in (7, 3, 11, 0, 19, 4, 8)]
    groups = resolve(grid, request)
    flat = [sid for g in groups for sid in g.sample_ids]
    assert sorted(flat) == sorted(request)
    assert len(flat) == len(set(flat))
    assert len({g.path for g in groups}) == len(groups)


def test_unknown_identifier_is_fatal(grid):
    with pytest.raises(UnknownIdentifier) as exc:
        resolve(grid, ["s1", "nope", "s3"])
    assert exc.value.sample_id == "nope"
    assert "nope" in str(exc.value)


def test_empty_path_counts_as_unknown():
    with pytest.raises(UnknownIdentifier):
        resolve({"s1": ""}, ["s1"])


def test_repeated_identifier_is_used_once(grid, caplog):
    with caplog.at_level(logging.WARNING):
        groups = resolve(grid, ["s1", "s1", "s2"])
    assert groups == [PathGroup(path="a.vcf", sample_ids=("s1", "s2"))]
    assert "more than once" in caplog.text


def test_reports_found_ids_to_injected_logger(grid, caplog):
    log = logging.getLogger("test.resolve")
    with caplog.at_level(logging.INFO, logger="test.resolve"):
        resolve(grid, ["s3", "s1"], logger=log)
    assert "Found sample_id(s): s3, s1 in grid" in caplog.text
