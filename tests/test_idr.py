"""Tests for local and global IDR scores."""

import numpy as np
import pytest

from mixidr import (MixtureParameters, InvalidInput, em, reproducible_component,
                    local_idr, global_idr, select_reproducible, generate_data)


@pytest.fixture
def fit_and_labels(rng, true_params):
    sample, labels = generate_data(1000, true_params, random_state=rng)
    result = em(sample, MixtureParameters(0.5, -2.0, 8.0, 2.0), progress_callback=None)
    return result, labels


class TestReproducibleComponent:

    def test_larger_mean(self):
        assert reproducible_component(MixtureParameters(0.5, 0.0, 3.0, 1.0)) == 2
        assert reproducible_component(MixtureParameters(0.5, 3.0, 0.0, 1.0)) == 1


class TestLocalIdr:

    def test_complement_of_signal_posterior(self, fit_and_labels):
        result, _ = fit_and_labels
        assert np.allclose(local_idr(result), 1 - result.responsibilities)
        assert np.allclose(local_idr(result, component=1), result.responsibilities)

    def test_does_not_alias_result(self, fit_and_labels):
        result, _ = fit_and_labels
        lidr = local_idr(result, component=1)
        lidr[:] = -1
        assert np.all(result.responsibilities >= 0)

    def test_invalid_component(self, fit_and_labels):
        result, _ = fit_and_labels
        with pytest.raises(InvalidInput):
            local_idr(result, component=3)


class TestGlobalIdr:

    def test_hand_example(self):
        g = global_idr([0.1, 0.3, 0.0, 0.3])
        assert np.allclose(g, [0.05, 0.175, 0.0, 0.175])

    def test_bounded_by_local_and_monotone(self, rng):
        local = rng.uniform(size=200)
        g = global_idr(local)
        order = np.argsort(local)
        assert np.all(g <= local + 1e-12)
        assert np.all(np.diff(g[order]) >= -1e-12)

    def test_empty(self):
        assert global_idr([]).shape == (0,)

    def test_rejects_2d(self):
        with pytest.raises(InvalidInput):
            global_idr(np.zeros((2, 2)))


class TestSelectReproducible:

    def test_selects_signal_component(self, fit_and_labels):
        result, labels = fit_and_labels
        selected = select_reproducible(result, threshold=0.05)
        # component 2 (mean 10) is the signal
        assert np.mean(selected[labels == 2]) > 0.95
        # the global IDR bounds the noise share among the selected values, not the share of noise selected
        assert np.mean(labels[selected] == 1) <= 0.06
        assert np.mean(local_idr(result)[selected]) <= 0.05

    def test_label_free(self, rng, true_params):
        sample, _ = generate_data(500, true_params, random_state=rng)
        a = em(sample, MixtureParameters(0.5, 0.0, 8.0, 2.0), progress_callback=None)
        b = em(sample, MixtureParameters(0.5, 8.0, 0.0, 2.0), progress_callback=None)
        assert np.array_equal(select_reproducible(a), select_reproducible(b))

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_invalid_threshold(self, fit_and_labels, threshold):
        result, _ = fit_and_labels
        with pytest.raises(InvalidInput):
            select_reproducible(result, threshold=threshold)
