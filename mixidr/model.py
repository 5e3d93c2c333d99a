import collections

import numpy as np
from scipy.special import logsumexp

from .distribution import NormalDistribution


# pi is the weight of component 1, sigma2 the variance shared by both components
MixtureParameters = collections.namedtuple('MixtureParameters', ['pi', 'mu1', 'mu2', 'sigma2'])


def components(params):
    """Build the two component densities of a parameter set, in label order."""
    return (NormalDistribution(params.mu1, params.sigma2),
            NormalDistribution(params.mu2, params.sigma2))


def probability(data, params):
    """Compute the probability for data of the two-component mixture density given by params"""

    if not hasattr(data, '__len__'):
        data = [data]

    data = np.asarray(data, dtype=np.float64)
    comp1, comp2 = components(params)

    return params.pi * np.exp(comp1.log_density(data)) + (1 - params.pi) * np.exp(comp2.log_density(data))


def log_likelihood(data, params):
    """Log-likelihood of the sample under the mixture, summed over observations.

    Evaluated with log-sum-exp over the two components so that observations far from
    both means contribute a finite value even when the linear densities underflow.
    """
    comp1, comp2 = components(params)

    with np.errstate(divide='ignore'):
        log_weight = np.log(np.array([params.pi, 1 - params.pi]))

    log_density = np.column_stack([comp1.log_density(data), comp2.log_density(data)])

    return float(np.sum(logsumexp(log_density + log_weight[np.newaxis, :], axis=1)))


def e_step(data, params):
    """Posterior probability of component 2 for every observation.

    Returns the responsibilities together with a mask of the observations whose mixture
    density underflowed to zero. Those are given to the component with the closer mean,
    component 1 on ties.
    """
    comp1, comp2 = components(params)

    d1 = params.pi * np.exp(comp1.log_density(data))
    d2 = (1 - params.pi) * np.exp(comp2.log_density(data))
    total = d1 + d2

    zero = total == 0
    resp = np.empty(data.shape[0])
    resp[~zero] = d2[~zero] / total[~zero]
    resp[zero] = np.where(np.abs(data[zero] - params.mu2) < np.abs(data[zero] - params.mu1), 1.0, 0.0)

    return resp, zero


def responsibilities(data, params):
    """Posterior probability that each observation was generated by component 2."""
    data = np.asarray(data, dtype=np.float64)
    return e_step(data, params)[0]


def guess_initial_params(sample):
    """A data-driven starting point: the quartiles as means, the sample variance, equal weights."""
    sample = np.asarray(sample, dtype=np.float64)

    q25, q75 = np.percentile(sample, [25, 75])
    sigma2 = np.var(sample)
    if not sigma2 > 0:
        sigma2 = 1.0

    return MixtureParameters(pi=0.5, mu1=float(q25), mu2=float(q75), sigma2=float(sigma2))
