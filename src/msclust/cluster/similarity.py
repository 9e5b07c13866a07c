__all__ = ["CosineSimilarity", "cosine_score", "DEFAULT_CONFIG_FILE"]

import math
import os
from typing import Sequence, Union

import numpy as np

from ..specio.spec import MassSpectrum
from ..util.config import Configurable

DEFAULT_CONFIG_FILE = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "clustering.yaml"
)


def _normalize_by_max(intensity: Sequence[float]) -> Sequence[float]:
    intensity_max = max(intensity, default=0.0)
    if intensity_max == 0.0:
        return intensity
    return [x / intensity_max for x in intensity]


def cosine_score(
    mz_a: Sequence[float],
    intensity_a: Sequence[float],
    mz_b: Sequence[float],
    intensity_b: Sequence[float],
    tolerance: float,
) -> float:
    """Cosine similarity of two m/z-sorted peak lists.

    Peaks are matched by a single merge over both lists: two peaks match when
    their m/z differ by less than ``tolerance``. The merge stops as soon as
    either list is exhausted, so the remaining tail of the other list adds
    nothing to its norm.

    Returns NaN when either norm is zero: no peaks, all-zero intensities, or
    a list that runs out before any peak of the other one was consumed.
    """
    # avoid overflow and underflow of the squared intensities
    intensity_a = _normalize_by_max(intensity_a)
    intensity_b = _normalize_by_max(intensity_b)

    i = j = 0
    n_a, n_b = len(mz_a), len(mz_b)
    score = a_den = b_den = 0.0
    while i < n_a and j < n_b:
        if abs(mz_a[i] - mz_b[j]) < tolerance:
            score += intensity_a[i] * intensity_b[j]
            a_den += intensity_a[i] * intensity_a[i]
            b_den += intensity_b[j] * intensity_b[j]
            i += 1
            j += 1
        elif mz_a[i] < mz_b[j]:
            a_den += intensity_a[i] * intensity_a[i]
            i += 1
        else:
            b_den += intensity_b[j] * intensity_b[j]
            j += 1

    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(score) / np.sqrt(np.float64(a_den) * b_den))


class CosineSimilarity(Configurable):
    """Merge criterion of the greedy clustering.

    Two spectra are merged when their precursor m/z differ by less than
    ``precursor_mass_window`` and their cosine score is strictly greater
    than ``similarity_threshold``. A NaN score never passes.
    """

    def __init__(self, configs: Union[str, dict, None] = None):
        super().__init__(configs, defaults=DEFAULT_CONFIG_FILE)

        self.precursor_mass_window = self.get_config(
            "precursor_mass_window", typed=float, allow_convert=True
        )
        self.peak_tolerance = self.get_config(
            "peak_tolerance", typed=float, allow_convert=True
        )
        self.similarity_threshold = self.get_config(
            "similarity_threshold", typed=float, allow_convert=True
        )

        if not self.precursor_mass_window > 0:
            raise ValueError(
                f"invalid precursor_mass_window {self.precursor_mass_window}"
            )
        if not self.peak_tolerance > 0:
            raise ValueError(f"invalid peak_tolerance {self.peak_tolerance}")
        if not math.isfinite(self.similarity_threshold):
            raise ValueError(
                f"invalid similarity_threshold {self.similarity_threshold}"
            )

    def precursor_compatible(self, a: MassSpectrum, b: MassSpectrum) -> bool:
        return abs(a.precursor_mz - b.precursor_mz) < self.precursor_mass_window

    def similarity(self, a: MassSpectrum, b: MassSpectrum) -> float:
        return cosine_score(
            a.mz.tolist(),
            a.intensity.tolist(),
            b.mz.tolist(),
            b.intensity.tolist(),
            self.peak_tolerance,
        )

    def passes_similarity(self, a: MassSpectrum, b: MassSpectrum) -> bool:
        return self.similarity(a, b) > self.similarity_threshold

    def is_match(self, a: MassSpectrum, b: MassSpectrum) -> bool:
        return self.precursor_compatible(a, b) and self.passes_similarity(a, b)
