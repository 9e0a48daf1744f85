"""
LRID — Dimension aggregation.

Dimension score = mean of the scorable items tagged with that dimension.
Aggregate index = mean of its available dimension means.  Absence of data is
``None``, never 0.
"""

from __future__ import annotations

import statistics
from typing import Iterable, Mapping, Sequence

from lrid.schemas.scoring import ScoredItem
from lrid.utils.coercion import round_score


class DimensionAggregator:
    """Groups item scores by dimension and derives the configured indices.

    Parameters
    ----------
    dimension_codes:
        Every dimension of the instrument; each appears in the output even
        when none of its items could be scored.
    aggregate_indices:
        Index name -> dimension codes averaged into it.
    min_index_coverage:
        Minimum number of non-null input dimensions an index needs before it
        is reported.  1 means "average whatever is available".
    """

    PRECISION: int = 2

    def __init__(
        self,
        dimension_codes: Sequence[str],
        aggregate_indices: Mapping[str, Sequence[str]],
        min_index_coverage: int = 1,
    ) -> None:
        if min_index_coverage < 1:
            raise ValueError(f"min_index_coverage must be >= 1, got {min_index_coverage}")
        self.dimension_codes = list(dimension_codes)
        self.aggregate_indices = {name: tuple(codes) for name, codes in aggregate_indices.items()}
        self.min_index_coverage = min_index_coverage

    def aggregate(self, scored_items: Iterable[ScoredItem]) -> dict:
        """Return ``{"dimension_scores": {...}, "aggregate_indices": {...}}``.

        Means are taken at full precision; only the reported values are
        rounded to ``PRECISION`` decimals.
        """
        buckets: dict[str, list[float]] = {code: [] for code in self.dimension_codes}
        for item in scored_items:
            if item.score is None:
                continue
            buckets.setdefault(item.dimension, []).append(item.score)

        dimension_means: dict[str, float | None] = {
            code: (statistics.mean(scores) if scores else None)
            for code, scores in buckets.items()
        }

        index_means: dict[str, float | None] = {}
        for name, codes in self.aggregate_indices.items():
            available = [dimension_means[c] for c in codes if dimension_means.get(c) is not None]
            if len(available) < self.min_index_coverage or not available:
                index_means[name] = None
            else:
                index_means[name] = statistics.mean(available)

        return {
            "dimension_scores": {
                code: round_score(value, self.PRECISION) for code, value in dimension_means.items()
            },
            "aggregate_indices": {
                name: round_score(value, self.PRECISION) for name, value in index_means.items()
            },
        }
