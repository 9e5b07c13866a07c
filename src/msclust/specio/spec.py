__all__ = ["MassSpectrum", "format_spectrum"]

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np
import numpy.typing as npt

MassArray = npt.NDArray[np.float64]
IntensityArray = npt.NDArray[np.float64]


@dataclass(frozen=True, eq=False)
class MassSpectrum:
    """A centroided MS2 spectrum.

    ``mz`` must be non-decreasing: the cosine score walks both peak lists
    with a linear merge and gives wrong results on unsorted input.
    """

    mz: MassArray
    intensity: IntensityArray
    precursor_mz: float
    retention_time: float = float("nan")
    title: str = ""

    @property
    def num_peaks(self):
        return self.mz.shape[0]

    def __post_init__(self):
        for f in [self.mz, self.intensity]:
            if len(f.shape) != 1:
                raise ValueError("invalid array shape")
        if self.mz.shape[0] != self.intensity.shape[0]:
            raise ValueError("array length not match")
        if not (np.all(np.isfinite(self.mz)) and np.all(np.isfinite(self.intensity))):
            raise ValueError(f"non-finite peak value: {self.title}")
        if self.num_peaks > 1 and np.any(np.diff(self.mz) < 0):
            raise ValueError(f"peaks not sorted by m/z: {self.title}")
        if np.any(self.intensity < 0):
            raise ValueError(f"negative peak intensity: {self.title}")
        self.mz.flags.writeable = False
        self.intensity.flags.writeable = False

    @classmethod
    def from_peaks(
        cls,
        peaks: Iterable[Tuple[float, float]],
        precursor_mz: float,
        retention_time: float = float("nan"),
        title: str = "",
    ) -> "MassSpectrum":
        peak_array = np.array(list(peaks), dtype=np.float64).reshape(-1, 2)
        order = np.argsort(peak_array[:, 0], kind="stable")
        return cls(
            mz=np.ascontiguousarray(peak_array[order, 0]),
            intensity=np.ascontiguousarray(peak_array[order, 1]),
            precursor_mz=float(precursor_mz),
            retention_time=float(retention_time),
            title=title,
        )


def format_spectrum(spectrum: MassSpectrum, verbose: bool = False) -> str:
    lines = [
        f"Title: {spectrum.title}",
        f"Precursor m/z: {spectrum.precursor_mz:f}",
        f"Retention time: {spectrum.retention_time:f}",
        f"Number of peaks: {spectrum.num_peaks}",
    ]
    if verbose:
        lines.extend(
            f"{mz:f}: {intensity:g}"
            for mz, intensity in zip(spectrum.mz.tolist(), spectrum.intensity.tolist())
        )
    return "\n".join(lines)
