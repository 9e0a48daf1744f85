"""LRID — Band / verdict classification."""

from __future__ import annotations

from typing import Mapping

from lrid.schemas.instrument import Bands


class BandClassifier:
    """Maps a score to the label of the first band whose upper bound covers it.

    Scores above every threshold get ``top_label``.  A None score gets
    ``insufficient_label`` whatever the thresholds are; it is never read as 0.
    """

    def band(self, score: float | None, bands: Bands) -> str:
        if score is None:
            return bands.insufficient_label
        for threshold in bands.thresholds:
            if score <= threshold.upper:
                return threshold.label
        return bands.top_label

    def band_all(self, scores: Mapping[str, float | None], bands: Bands) -> dict[str, str]:
        return {key: self.band(value, bands) for key, value in scores.items()}
