import math

import numpy as np
import pytest

from msclust.cluster.similarity import CosineSimilarity, cosine_score

from conftest import make_spectrum


@pytest.fixture
def similarity():
    return CosineSimilarity()


def random_spectrum(rng, num_peaks, precursor_mz=500.0):
    mz = np.sort(rng.uniform(100, 1000, num_peaks))
    intensity = rng.integers(1, 10000, num_peaks)
    return make_spectrum(zip(mz, intensity), precursor_mz=precursor_mz)


def test_default_parameters(similarity):
    assert similarity.precursor_mass_window == 2.0
    assert similarity.peak_tolerance == 0.02
    assert similarity.similarity_threshold == 0.7


def test_self_similarity_is_one(similarity):
    rng = np.random.default_rng(7)
    for num_peaks in [1, 5, 50]:
        a = random_spectrum(rng, num_peaks)
        assert similarity.similarity(a, a) == 1.0


def test_symmetry(similarity):
    rng = np.random.default_rng(11)
    for _ in range(50):
        a = random_spectrum(rng, rng.integers(0, 30))
        b = random_spectrum(rng, rng.integers(1, 30))
        ab = similarity.similarity(a, b)
        ba = similarity.similarity(b, a)
        assert ab == ba or (math.isnan(ab) and math.isnan(ba))


def test_shared_peaks_within_tolerance(similarity):
    a = make_spectrum([(100.0, 3), (200.0, 4)])
    b = make_spectrum([(100.015, 3), (199.99, 4)])
    assert similarity.similarity(a, b) == pytest.approx(1.0)


def test_tolerance_is_strict():
    assert cosine_score([100.0, 300.0], [1.0, 1.0], [100.5], [1.0], 0.5) == 0.0
    assert cosine_score([100.0], [1.0], [100.25], [1.0], 0.5) == 1.0


def test_non_overlapping_ranges_score_nan(similarity):
    # a runs out before any peak of b is consumed
    a = make_spectrum([(100.0, 1), (150.0, 2)])
    b = make_spectrum([(200.0, 1), (250.0, 2)])
    assert math.isnan(similarity.similarity(a, b))
    assert math.isnan(similarity.similarity(b, a))
    assert not similarity.is_match(a, b)


def test_disjoint_peaks_score_zero(similarity):
    a = make_spectrum([(100.0, 5), (300.0, 2)])
    b = make_spectrum([(200.0, 5), (400.0, 2)])
    assert similarity.similarity(a, b) == 0.0
    assert not similarity.passes_similarity(a, b)


def test_merge_value():
    # 100 and 300 match; 200 of a is unmatched; 400 of b is past the end of a
    score = cosine_score(
        [100.0, 200.0, 300.0], [1.0, 2.0, 3.0], [100.0, 300.0, 400.0], [2.0, 1.0, 9.0], 0.1
    )
    assert score == pytest.approx((1 * 2 + 3 * 1) / math.sqrt((1 + 4 + 9) * (4 + 1)))


def test_unmatched_tail_is_ignored():
    with_tail = cosine_score([100.0], [1.0], [100.0, 500.0], [1.0, 100.0], 0.02)
    assert with_tail == 1.0


def test_empty_or_zero_spectrum_is_nan(similarity):
    empty = make_spectrum([])
    zero = make_spectrum([(100.0, 0), (200.0, 0)])
    other = make_spectrum([(100.0, 5), (200.0, 3)])

    assert math.isnan(similarity.similarity(empty, other))
    assert math.isnan(similarity.similarity(zero, other))
    assert math.isnan(similarity.similarity(zero, zero))
    assert not similarity.passes_similarity(zero, other)
    assert not similarity.is_match(empty, empty)


def test_threshold_is_strict():
    similarity = CosineSimilarity({"similarity_threshold": 1.0})
    a = make_spectrum([(100.0, 1), (200.0, 1)])
    assert similarity.similarity(a, a) == 1.0
    assert not similarity.passes_similarity(a, a)


def test_precursor_window_is_strict(similarity):
    a = make_spectrum([(100.0, 1)], precursor_mz=500.0)
    assert similarity.precursor_compatible(a, make_spectrum([(100.0, 1)], precursor_mz=501.5))
    assert not similarity.precursor_compatible(a, make_spectrum([(100.0, 1)], precursor_mz=502.0))
    assert not similarity.is_match(a, make_spectrum([(100.0, 1)], precursor_mz=497.0))


@pytest.mark.parametrize(
    "configs",
    [
        {"peak_tolerance": 0},
        {"precursor_mass_window": -1.0},
        {"similarity_threshold": float("nan")},
    ],
)
def test_invalid_parameters(configs):
    with pytest.raises(ValueError):
        CosineSimilarity(configs)


@pytest.mark.parametrize("scale", [1e80, 1e-170])
def test_self_similarity_at_extreme_intensities(similarity, scale):
    a = make_spectrum([(100.0, 1 * scale), (200.0, 2 * scale)])
    assert similarity.similarity(a, a) == 1.0
    b = make_spectrum([(100.0, 2 * scale), (200.0, 4 * scale)])
    assert similarity.similarity(a, b) == pytest.approx(1.0)


def test_score_does_not_depend_on_intensity_scale():
    mz_a, intensity_a = [100.0, 200.0, 300.0], [1.0, 2.0, 3.0]
    mz_b, intensity_b = [100.0, 300.0, 400.0], [2.0, 1.0, 9.0]
    expected = cosine_score(mz_a, intensity_a, mz_b, intensity_b, 0.1)
    scaled = cosine_score(
        mz_a, [x * 1e150 for x in intensity_a], mz_b, [x * 1e-150 for x in intensity_b], 0.1
    )
    assert scaled == pytest.approx(expected)
