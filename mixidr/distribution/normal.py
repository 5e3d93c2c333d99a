# coding=utf-8
import numpy as np

from .distribution import Distribution


class NormalDistribution(Distribution):
    """Univariate normal distribution with parameters (mu, sigma2).

    The variance is a plain attribute so that several components can be handed the same
    pooled estimate; :meth:`estimate_parameters` only moves the mean.
    """

    def __init__(self, mu, sigma2):
        self.mu = mu
        self.sigma2 = sigma2

    def log_density(self, data):
        assert(len(data.shape) == 1), "Expect 1D data!"

        return - (data - self.mu) ** 2 / (2 * self.sigma2) - 0.5 * np.log(self.sigma2) - 0.5 * np.log(2 * np.pi)

    def estimate_parameters(self, data, weights):
        assert(len(data.shape) == 1), "Expect 1D data!"

        wsum = np.sum(weights)
        if not wsum > 0:
            return False

        self.mu = np.sum(weights * data) / wsum
        return True

    def squared_deviation(self, data, weights):
        """Weighted sum of squared deviations from the current mean, the component's share of the pooled variance."""
        return np.sum(weights * (data - self.mu) ** 2)

    def __repr__(self):
        return "Norm[μ={mu:.4g}, σ²={sigma2:.4g}]".format(mu=self.mu, sigma2=self.sigma2)

    def get_mu(self):
        return self.mu

    def get_sigma2(self):
        return self.sigma2
