import numpy as np

from .errors import InvalidInput


def generate_data(n_data, params, random_state=None):
    """Draw a sample from the two-component mixture given by params.

    :param n_data: The number of observations.
    :param params: :class:`mixidr.model.MixtureParameters`; pi is the probability of component 1.
    :param random_state: Seed or :class:`numpy.random.RandomState`.

    :returns: (sample, labels), labels holding 1 or 2 for the generating component.
    """
    if n_data < 1:
        raise InvalidInput("n_data must be positive, got %r." % (n_data,))
    if not 0.0 <= params.pi <= 1.0:
        raise InvalidInput("Mixing weight must lie in [0, 1], got %r." % (params.pi,))
    if not params.sigma2 > 0:
        raise InvalidInput("Variance must be positive, got %r." % (params.sigma2,))

    if isinstance(random_state, np.random.RandomState):
        rng = random_state
    else:
        rng = np.random.RandomState(random_state)

    labels = np.where(rng.uniform(size=n_data) < params.pi, 1, 2)
    means = np.where(labels == 1, params.mu1, params.mu2)
    sample = rng.normal(loc=means, scale=np.sqrt(params.sigma2))

    return sample, labels
