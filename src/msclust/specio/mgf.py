__all__ = ["MgfReader", "MgfFormatError", "MgfParseState", "read_mgf"]

import math
from enum import IntEnum
from typing import IO, List, Optional, Union

import numpy as np

from .abs import MassSpectrumReaderBase
from .spec import MassSpectrum


class MgfParseState(IntEnum):
    NO_RECORD = 0
    PROPERTIES = 1
    PEAKS = 2


class MgfFormatError(ValueError):
    def __init__(self, message: str, ordinal: int, line_number: int, line: str):
        super().__init__(
            f"[Spectrum {ordinal}, line {line_number}] {message}: {line!r}"
        )
        self.ordinal = ordinal
        self.line_number = line_number
        self.line = line


class MgfReader(MassSpectrumReaderBase):
    """Reads spectra from an MGF file one record at a time.

    A record starts with ``BEGIN IONS`` and holds ``TITLE``, ``PEPMASS`` and
    ``RTINSECONDS`` properties. The ``RTINSECONDS`` line switches the record
    to its peak list, one ``<m/z> <intensity>`` pair per line, until
    ``END IONS``. Peaks are sorted by m/z before the record is returned.
    """

    COMMENT_PREFIXES = ("#", ";", "!", "/")

    def __init__(self, file: Union[str, IO[str]]):
        super().__init__(file)
        self.state = MgfParseState.NO_RECORD
        self.line_number = 0
        self.num_records = 0

    def _error(self, message: str, line: str):
        self.state = MgfParseState.NO_RECORD
        return MgfFormatError(message, self.num_records, self.line_number, line)

    def read_spectrum(self) -> Optional[MassSpectrum]:
        record: dict = {}
        mz: List[float] = []
        intensity: List[float] = []

        while True:
            line = self.reader.readline()
            if not line:
                if self.state != MgfParseState.NO_RECORD:
                    raise self._error("unexpected EOF", "")
                return None
            self.line_number += 1

            line = line.strip()
            if len(line) == 0 or line.startswith(self.COMMENT_PREFIXES):
                continue

            if self.state == MgfParseState.NO_RECORD:
                if line == "BEGIN IONS":
                    self.num_records += 1
                    self.state = MgfParseState.PROPERTIES
                    record = {}
                    mz.clear()
                    intensity.clear()
                elif line == "END IONS":
                    self.num_records += 1
                    raise self._error("END IONS without BEGIN IONS", line)
                continue

            if line == "BEGIN IONS":
                raise self._error("invalid format", line)

            if line == "END IONS":
                spectrum = self._build_spectrum(record, mz, intensity, line)
                self.state = MgfParseState.NO_RECORD
                return spectrum

            if self.state == MgfParseState.PROPERTIES:
                self._read_property(record, line)
            else:
                self._read_peak(mz, intensity, line)

    def _read_property(self, record: dict, line: str):
        s = line.split("=", 1)
        if len(s) != 2:
            raise self._error("property expected", line)
        key, value = s[0].strip(), s[1].strip()

        if key == "TITLE":
            record["title"] = value
        elif key == "PEPMASS":
            # PEPMASS may carry the precursor intensity as a second field
            fields = value.split()
            if not fields:
                raise self._error("missing PEPMASS value", line)
            record["precursor_mz"] = self._parse_float(fields[0], line)
        elif key == "RTINSECONDS":
            record["retention_time"] = self._parse_float(value, line)
            self.state = MgfParseState.PEAKS
        else:
            raise self._error(f"unrecognized property {key}", line)

    def _read_peak(self, mz: List[float], intensity: List[float], line: str):
        if "=" in line:
            raise self._error("property inside peak list", line)
        s = line.split()
        if len(s) < 2:
            raise self._error("invalid peak", line)
        peak_intensity = self._parse_float(s[1], line)
        if peak_intensity < 0:
            raise self._error("negative peak intensity", line)
        mz.append(self._parse_float(s[0], line))
        intensity.append(peak_intensity)

    def _parse_float(self, value: str, line: str) -> float:
        try:
            result = float(value)
        except ValueError:
            raise self._error(f"invalid number {value!r}", line) from None
        if not math.isfinite(result):
            raise self._error(f"invalid number {value!r}", line)
        return result

    def _build_spectrum(
        self, record: dict, mz: List[float], intensity: List[float], line: str
    ) -> MassSpectrum:
        if "precursor_mz" not in record:
            raise self._error("missing PEPMASS", line)

        mz_array = np.array(mz, dtype=np.float64)
        intensity_array = np.array(intensity, dtype=np.float64)
        order = np.argsort(mz_array, kind="stable")
        return MassSpectrum(
            mz=mz_array[order],
            intensity=intensity_array[order],
            precursor_mz=record["precursor_mz"],
            retention_time=record.get("retention_time", float("nan")),
            title=record.get("title", ""),
        )


def read_mgf(file: Union[str, IO[str]]) -> List[MassSpectrum]:
    with MgfReader(file) as reader:
        return reader.read_spectra()
