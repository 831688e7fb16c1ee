from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from dex_browser.core.dataset import RecordSet
from dex_browser.core.exceptions import CategoryNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryGroup:
    """
    Records sharing one primary category.

    Fields:

    - key: the primary category value
    - members: record identities in dataset encounter order
    - counts: (secondary value, count) pairs over the full secondary domain
    - total: number of member records
    """
    key: str
    members: Tuple[str, ...]
    counts: Tuple[Tuple[str, int], ...]
    total: int

    def count_for(self, secondary: str) -> int:
        return dict(self.counts).get(secondary, 0)


@dataclass(frozen=True)
class StackSegment:
    """One cumulative segment of a stacked bar: [start, end) along the count axis."""
    primary: str
    secondary: str
    start: int
    end: int

    @property
    def count(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class AggregateResult:
    groups: Tuple[CategoryGroup, ...]
    segments: Tuple[StackSegment, ...]
    secondary_domain: Tuple[str, ...]
    excluded: int = 0

    @property
    def keys(self) -> List[str]:
        return [g.key for g in self.groups]

    @property
    def max_total(self) -> int:
        return max((g.total for g in self.groups), default=0)

    @property
    def n_records(self) -> int:
        return sum(g.total for g in self.groups)


def secondary_domain(values: Iterable[str], none_value: str = "None") -> Tuple[str, ...]:
    """
    Every distinct secondary value, with `none_value` sorted first and the rest
    in lexical order. Computed once from the whole dataset so colours and
    legend entries stay stable across drill levels.
    """
    distinct = {str(v) for v in values if not pd.isna(v)}
    rest = sorted(v for v in distinct if v != none_value)
    return ((none_value,) if none_value in distinct else ()) + tuple(rest)


def aggregate(
    frame: pd.DataFrame,
    primary_col: str,
    secondary_col: str,
    domain: Sequence[str],
    *,
    name_col: Optional[str] = None,
    only: Optional[str] = None,
) -> List[CategoryGroup]:
    """
    Group `frame` rows by primary key and count them per secondary value.

    Output is ordered by total (descending) with ties kept in encounter order.
    When `only` is given the result is the single matching group, still counted
    over the full `domain`.

    :raises CategoryNotFound: if `only` is not among the aggregated keys
    """
    domain = tuple(domain)
    domain_set = set(domain)

    # dict preserves first-seen order which is the stable tie-break
    buckets: Dict[str, List[int]] = {}
    primaries = frame[primary_col].astype(str).tolist()
    for pos, key in enumerate(primaries):
        buckets.setdefault(key, []).append(pos)

    secondaries = frame[secondary_col].astype(str).tolist()
    names = frame[name_col].astype(str).tolist() if name_col else [str(i) for i in frame.index]

    groups: List[CategoryGroup] = []
    for key, positions in buckets.items():
        counts = {sec: 0 for sec in domain}
        for pos in positions:
            sec = secondaries[pos]
            if sec in domain_set:
                counts[sec] += 1
            else:
                logger.warning("Unexpected secondary category: %s", sec, extra={"primary": key})
        groups.append(
            CategoryGroup(
                key=key,
                members=tuple(names[pos] for pos in positions),
                counts=tuple((sec, counts[sec]) for sec in domain),
                total=len(positions),
            )
        )

    # sorted() is stable
    groups = sorted(groups, key=lambda g: -g.total)

    if only is not None:
        return [find_group(groups, only)]
    return groups


def find_group(groups: Sequence[CategoryGroup], key: str) -> CategoryGroup:
    for group in groups:
        if group.key == key:
            return group
    raise CategoryNotFound(key)


def stack_layout(groups: Sequence[CategoryGroup], domain: Sequence[str]) -> List[StackSegment]:
    """
    Arrange each group's per-secondary counts into cumulative segments, layered
    in domain order. Zero-count segments are omitted.
    """
    segments: List[StackSegment] = []
    for group in groups:
        lookup = dict(group.counts)
        offset = 0
        for sec in domain:
            n = lookup.get(sec, 0)
            if n > 0:
                segments.append(StackSegment(primary=group.key, secondary=sec, start=offset, end=offset + n))
            offset += n
    return segments


class CategoryAggregator:
    """
    Aggregates a RecordSet by primary/secondary category.

    Stateless apart from the secondary domain, which is computed once from the
    full dataset when the aggregator is built.
    """

    def __init__(self, records: RecordSet):
        self.records = records
        cols = records.columns
        self.primary_col = cols.primary
        self.secondary_col = cols.secondary
        self.name_col = cols.name
        self.domain = secondary_domain(records.frame[cols.secondary].dropna(), records.none_value)

    def valid_frame(self):
        return self.records.valid_for(categorical=(self.name_col, self.primary_col, self.secondary_col))

    def primary_keys(self) -> frozenset:
        """Primary keys present among the valid records."""
        return frozenset(self.valid_frame().frame[self.primary_col].astype(str))

    def aggregate(self, only: Optional[str] = None) -> AggregateResult:
        """
        Recompute groups and the stacking layout.

        :raises CategoryNotFound: if `only` is absent from the data
        """
        valid = self.valid_frame()
        groups = aggregate(
            valid.frame,
            self.primary_col,
            self.secondary_col,
            self.domain,
            name_col=self.name_col,
            only=only,
        )
        return AggregateResult(
            groups=tuple(groups),
            segments=tuple(stack_layout(groups, self.domain)),
            secondary_domain=self.domain,
            excluded=valid.excluded,
        )

    def members(self, primary: str, secondary: str) -> List[str]:
        """Identities matching both keys, sorted by name."""
        df = self.valid_frame().frame
        match = df[(df[self.primary_col].astype(str) == primary) & (df[self.secondary_col].astype(str) == secondary)]
        return sorted(match[self.name_col].astype(str).tolist())
