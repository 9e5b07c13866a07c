import textwrap

import pytest

from msclust.specio.spec import MassSpectrum


def make_spectrum(peaks, precursor_mz=500.0, title=""):
    return MassSpectrum.from_peaks(peaks, precursor_mz=precursor_mz, title=title)


@pytest.fixture
def mgf_file(tmp_path):
    def write(content, name="spectra.mgf"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content).lstrip())
        return str(path)

    return write
