"""Shared fixtures for mixidr tests."""

import numpy as np
import pytest

from mixidr import MixtureParameters, generate_data


@pytest.fixture
def rng():
    """Seeded random number generator for reproducibility."""
    return np.random.RandomState(42)


@pytest.fixture
def true_params():
    """Well separated mixture: 30% at 0, 70% at 10, unit variance."""
    return MixtureParameters(pi=0.3, mu1=0.0, mu2=10.0, sigma2=1.0)


@pytest.fixture
def separated_sample(rng, true_params):
    """1000 draws from true_params."""
    sample, _ = generate_data(1000, true_params, random_state=rng)
    return sample


@pytest.fixture
def initial_guess():
    return MixtureParameters(pi=0.5, mu1=-2.0, mu2=8.0, sigma2=2.0)
