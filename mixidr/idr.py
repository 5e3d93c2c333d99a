"""Irreproducible discovery rate (IDR) style scores from a two-component fit.

One component is taken to hold the reproducible signal and the other the noise. The local
IDR of an observation is its posterior probability of belonging to the noise component; the
global IDR of an observation is the expected fraction of noise among all observations at
least as reproducible as it, which is what a threshold selects on.
"""
import numpy as np

from .errors import InvalidInput

DEFAULT_IDR_THRESHOLD = 0.05


def reproducible_component(params):
    """The label (1 or 2) of the component with the larger mean, which is treated as the signal."""
    return 2 if params.mu2 >= params.mu1 else 1


def local_idr(result, component=None):
    """Posterior probability that each observation belongs to the irreproducible component.

    :param result: A fit from :func:`mixidr.em.run`.
    :param component: Label of the reproducible component; by default the one with the larger mean.
    """
    if component is None:
        component = reproducible_component(result.params)
    if component not in (1, 2):
        raise InvalidInput("component must be 1 or 2, got %r." % (component,))

    resp = np.asarray(result.responsibilities, dtype=np.float64)
    # responsibilities are posteriors of component 2
    return 1 - resp if component == 2 else resp.copy()


def global_idr(local):
    """Mean local IDR over the observations whose local IDR does not exceed each one's."""
    local = np.asarray(local, dtype=np.float64)
    if local.ndim != 1:
        raise InvalidInput("Expect 1D local IDR values.")
    if local.shape[0] == 0:
        return np.empty(0)

    order = np.argsort(local, kind='mergesort')
    running = np.cumsum(local[order]) / np.arange(1, local.shape[0] + 1)

    # tied local values get the value of the whole tie group
    sorted_local = local[order]
    last_of_group = np.searchsorted(sorted_local, sorted_local, side='right') - 1
    running = running[last_of_group]

    out = np.empty_like(local)
    out[order] = running
    return out


def select_reproducible(result, threshold=DEFAULT_IDR_THRESHOLD, component=None):
    """Boolean mask of observations whose global IDR is at most threshold."""
    if not 0.0 <= threshold <= 1.0:
        raise InvalidInput("IDR threshold must lie in [0, 1], got %r." % (threshold,))
    return global_idr(local_idr(result, component=component)) <= threshold
