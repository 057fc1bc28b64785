"""Aggregation of regions into ranked per-mapping totals."""

from collections.abc import Iterable
from dataclasses import dataclass

from pymemmap.models import DetailedMemoryRegion, PathType

DEFAULT_COUNTER = "Rss"


def group_label(path: PathType) -> str:
    """
    Label a region is grouped under.

    Deleted files share the label of the live path, since both are the
    same backing object.
    """
    return path.label


@dataclass(slots=True, frozen=True)
class RankedGroup:
    """One mapping category and its share of the total."""

    label: str
    value: int  # KiB
    ratio: float  # 0.0 - 1.0 of the grand total
    regions: int


@dataclass(slots=True, frozen=True)
class Ranking:
    """Result of rank_regions."""

    counter: str
    groups: list[RankedGroup]
    total: int  # over all groups, not only the returned ones
    group_count: int

    @property
    def remainder(self) -> int:
        """Part of the total not covered by the returned groups."""
        return self.total - sum(group.value for group in self.groups)

    @property
    def truncated(self) -> bool:
        return len(self.groups) < self.group_count


def rank_regions(
    regions: Iterable[DetailedMemoryRegion],
    counter: str = DEFAULT_COUNTER,
    top_n: int | None = None,
) -> Ranking:
    """
    Sum a counter per mapping label and rank the labels.

    Args:
        regions: Regions of one snapshot.
        counter: smaps key to sum, e.g. "Rss" or "Pss".
        top_n: Keep only the N largest groups. None keeps all.

    Returns:
        Groups sorted by value descending, ties by label ascending.
        Ratios are 0.0 when the total is 0.
    """
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must not be negative: {top_n}")

    values: dict[str, int] = {}
    counts: dict[str, int] = {}
    for region in regions:
        label = group_label(region.path_type)
        values[label] = values.get(label, 0) + region.counter(counter)
        counts[label] = counts.get(label, 0) + 1

    total = sum(values.values())
    ordered = sorted(values.items(), key=lambda item: (-item[1], item[0]))
    if top_n is not None:
        ordered = ordered[:top_n]

    groups = [
        RankedGroup(
            label=label,
            value=value,
            ratio=value / total if total else 0.0,
            regions=counts[label],
        )
        for label, value in ordered
    ]
    return Ranking(counter=counter, groups=groups, total=total, group_count=len(values))
