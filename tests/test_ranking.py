"""Tests for the aggregator/ranker."""

import pytest

from pymemmap.models import (
    ANONYMOUS,
    HEAP,
    DetailedMemoryRegion,
    MemoryRegion,
    PathType,
    Permissions,
)
from pymemmap.parsing import parse_regions
from pymemmap.ranking import Ranking, group_label, rank_regions

PERMS = Permissions(read=True, write=True, execute=False, shared=False)


def region(path, **counters) -> DetailedMemoryRegion:
    base = MemoryRegion(
        start=0x1000,
        end=0x2000,
        permissions=PERMS,
        offset=0,
        device=(0, 0),
        inode=0,
        path=path,
    )
    return DetailedMemoryRegion(base, dict(counters))


def test_group_label_merges_deleted_with_file():
    """Test deleted and live mappings of one path share a label."""
    assert group_label(PathType.deleted("/tmp/a.so")) == group_label(PathType.file("/tmp/a.so"))
    assert group_label(ANONYMOUS) == "[anonymous]"
    assert group_label(HEAP) == "[heap]"


def test_rank_sample_by_rss(smaps_text):
    """Test the sample ranks by summed Rss."""
    ranking = rank_regions(parse_regions(smaps_text))

    assert ranking.counter == "Rss"
    assert ranking.total == 1924
    assert [group.label for group in ranking.groups] == [
        "/usr/lib/libc.so.6",
        "[anonymous]",
        "/usr/bin/cat",
        "[heap]",
        "[stack]",
        "/dev/shm/my buffer",
    ]
    libc = ranking.groups[0]
    assert libc.value == 1516
    assert libc.regions == 2
    assert libc.ratio == pytest.approx(1516 / 1924)


def test_rank_by_other_counter(smaps_text):
    """Test any counter name can be summed; absent ones count as zero."""
    ranking = rank_regions(parse_regions(smaps_text), counter="Pss")
    assert ranking.total == 720
    assert ranking.groups[0].label == "/usr/lib/libc.so.6"
    assert ranking.groups[0].value == 316
    assert ranking.groups[-1].value == 0


def test_top_n_keeps_grand_total(smaps_text):
    """Test truncation keeps the total over all groups."""
    ranking = rank_regions(parse_regions(smaps_text), top_n=2)
    assert len(ranking.groups) == 2
    assert ranking.group_count == 6
    assert ranking.truncated
    assert ranking.total == 1924
    assert ranking.remainder == 1924 - 1516 - 200


def test_groups_sum_to_total(smaps_text):
    """Test the untruncated groups add up to the grand total exactly."""
    for counter in ("Rss", "Pss", "Swap", "Size", "Nope"):
        ranking = rank_regions(parse_regions(smaps_text), counter=counter)
        assert sum(group.value for group in ranking.groups) == ranking.total
        assert ranking.remainder == 0
        assert all(0.0 <= group.ratio <= 1.0 for group in ranking.groups)


def test_zero_total_gives_zero_ratios():
    """Test a counter absent everywhere yields ratio 0, not an error."""
    ranking = rank_regions([region(HEAP), region(ANONYMOUS)], counter="Swap")
    assert ranking.total == 0
    assert [group.ratio for group in ranking.groups] == [0.0, 0.0]


def test_ties_break_by_label():
    """Test equal values are ordered by ascending label."""
    regions = [
        region(PathType.file("/b"), Rss=10),
        region(PathType.file("/a"), Rss=10),
        region(PathType.file("/c"), Rss=20),
    ]
    ranking = rank_regions(regions)
    assert [group.label for group in ranking.groups] == ["/c", "/a", "/b"]


def test_sorted_descending():
    """Test values never increase along the result."""
    regions = [region(PathType.file(f"/lib{i}"), Rss=(i * 37) % 11) for i in range(20)]
    values = [group.value for group in rank_regions(regions).groups]
    assert values == sorted(values, reverse=True)


def test_missing_path_groups_as_anonymous():
    """Test regions without a pathname join the anonymous group."""
    ranking = rank_regions([region(None, Rss=3), region(ANONYMOUS, Rss=4)])
    assert len(ranking.groups) == 1
    assert ranking.groups[0].label == "[anonymous]"
    assert ranking.groups[0].value == 7


def test_empty_input():
    """Test no regions yields an empty ranking."""
    ranking = rank_regions([])
    assert ranking == Ranking(counter="Rss", groups=[], total=0, group_count=0)


def test_top_zero_and_negative():
    """Test top_n=0 returns no groups and a negative value is rejected."""
    regions = [region(HEAP, Rss=1)]
    assert rank_regions(regions, top_n=0).groups == []
    with pytest.raises(ValueError):
        rank_regions(regions, top_n=-1)
