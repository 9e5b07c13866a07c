__all__ = ["MassSpectrumReaderBase"]

import abc
from typing import IO, List, Optional, Union

from .spec import MassSpectrum


class MassSpectrumReaderBase(abc.ABC):
    """Iterates the spectra of a text file, in file order.

    Accepts a path or an open text stream; the stream is closed with the
    reader.
    """

    def __init__(self, file: Union[str, IO[str]]):
        if isinstance(file, str):
            file = open(file, "r")
        self.reader = file

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __next__(self) -> MassSpectrum:
        spec = self.read_spectrum()
        if spec is None:
            raise StopIteration()
        return spec

    def __iter__(self):
        return self

    def close(self):
        self.reader.close()

    def read_spectra(self) -> List[MassSpectrum]:
        return list(self)

    @abc.abstractmethod
    def read_spectrum(self) -> Optional[MassSpectrum]:
        pass
