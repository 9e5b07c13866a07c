__all__ = ["SpectrumStore"]

from typing import Iterable, Iterator, Sequence, Union, overload

import numpy as np
import pandas as pd

from .mgf import MgfReader
from .spec import MassSpectrum


class SpectrumStore(Sequence[MassSpectrum]):
    """Immutable, ordered collection of the spectra of one clustering run.

    Positions are the spectrum indices used by cluster assignments.
    """

    def __init__(self, spectra: Iterable[MassSpectrum]):
        self._spectra = tuple(spectra)

    @classmethod
    def from_mgf(cls, file: str) -> "SpectrumStore":
        with MgfReader(file) as reader:
            return cls(reader)

    @overload
    def __getitem__(self, index: int) -> MassSpectrum:
        ...

    @overload
    def __getitem__(self, index: slice) -> "SpectrumStore":
        ...

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return SpectrumStore(self._spectra[index])
        return self._spectra[index]

    def __len__(self) -> int:
        return len(self._spectra)

    def __iter__(self) -> Iterator[MassSpectrum]:
        return iter(self._spectra)

    def reversed(self) -> "SpectrumStore":
        return SpectrumStore(self._spectra[::-1])

    @property
    def precursor_mz(self) -> np.ndarray:
        return np.array([s.precursor_mz for s in self._spectra], dtype=np.float64)

    @property
    def num_peaks(self) -> np.ndarray:
        return np.array([s.num_peaks for s in self._spectra], dtype=np.int64)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "title": [s.title for s in self._spectra],
                "precursor_mz": self.precursor_mz,
                "retention_time": [s.retention_time for s in self._spectra],
                "num_peaks": self.num_peaks,
            }
        )
