__all__ = ["PeakBucketIndex", "bucket_key"]

import math
from typing import Dict, List

from ..specio.spec import MassSpectrum


def bucket_key(mz: float, bucket_width: float) -> int:
    """Bucket of an m/z value: ``floor(mz / bucket_width)``.

    Values closer than ``bucket_width`` can still fall on both sides of a
    bucket boundary and get different keys.
    """
    return math.floor(mz / bucket_width)


class PeakBucketIndex:
    """Maps m/z buckets to the cluster leaders with a low-m/z peak in them.

    Only the first ``num_peaks`` peaks of a spectrum, i.e. its lowest-m/z
    peaks rather than its most intense ones, are looked up and registered.
    Leaders are registered in increasing spectrum index order, and the index
    only ever grows.
    """

    def __init__(self, bucket_width: float, num_peaks: int = 5):
        if not bucket_width > 0:
            raise ValueError(f"invalid bucket width {bucket_width}")
        if num_peaks < 1:
            raise ValueError(f"invalid number of indexed peaks {num_peaks}")
        self.bucket_width = bucket_width
        self.num_peaks = num_peaks
        self.buckets: Dict[int, List[int]] = {}
        self.num_registered = 0

    def __len__(self):
        return len(self.buckets)

    def _keys(self, spectrum: MassSpectrum) -> List[int]:
        return [
            bucket_key(mz, self.bucket_width)
            for mz in spectrum.mz[: self.num_peaks].tolist()
        ]

    def candidates(self, spectrum: MassSpectrum) -> List[int]:
        """Leaders sharing a bucket with one of the spectrum's indexed peaks.

        Deduplicated and returned in registration order.
        """
        candidates = set()
        for key in self._keys(spectrum):
            leaders = self.buckets.get(key, None)
            if leaders is not None:
                candidates.update(leaders)
        # leader ids are registered in increasing order
        return sorted(candidates)

    def register(self, spectrum: MassSpectrum, leader: int):
        for key in self._keys(spectrum):
            self.buckets.setdefault(key, []).append(leader)
        self.num_registered += 1
