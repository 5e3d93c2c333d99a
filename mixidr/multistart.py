"""Independent EM fits from several starting points.

EM only finds a local maximum of the likelihood, so a common remedy is to start from a
handful of guesses and keep the best fit. Fits share nothing and can run in worker processes.
"""
from multiprocessing import Pool

import numpy as np

from .em import initialize, run, DEFAULT_TOLERANCE, DEFAULT_MAX_ITERATIONS
from .errors import InvalidInput
from .model import MixtureParameters

from logging import getLogger
logger = getLogger(__name__)


def initial_param_grid(sample, n_starts=4):
    """Deterministic starting points spread over the sample quantiles.

    The k-th start puts the means at the q-th and (1-q)-th quantiles, q moving from the
    5th towards the 45th percentile; every other start lists the means in the opposite
    label order so both labellings are explored.
    """
    sample = np.asarray(sample, dtype=np.float64)
    if sample.ndim != 1 or sample.shape[0] == 0:
        raise InvalidInput("Expect a non-empty 1D sample.")
    if n_starts < 1:
        raise InvalidInput("n_starts must be positive, got %r." % (n_starts,))

    sigma2 = float(np.var(sample))
    if not sigma2 > 0:
        sigma2 = 1.0

    n_pairs = (n_starts + 1) // 2
    quantiles = np.linspace(5, 45, n_pairs) if n_pairs > 1 else np.array([25.0])

    starts = []
    for i in range(n_starts):
        q = quantiles[i // 2]
        lo, hi = np.percentile(sample, [q, 100 - q])
        if i % 2 == 0:
            starts.append(MixtureParameters(pi=0.5, mu1=float(lo), mu2=float(hi), sigma2=sigma2))
        else:
            starts.append(MixtureParameters(pi=0.5, mu1=float(hi), mu2=float(lo), sigma2=sigma2))

    return starts


def _run_quiet(state):
    return run(state, progress_callback=None)


def multi_start(sample, initial_params_list, tolerance=DEFAULT_TOLERANCE, max_iterations=DEFAULT_MAX_ITERATIONS, processes=1):
    """Fit the mixture once per starting point.

    All starting points are validated before any fit runs.

    :param processes: Number of worker processes. 1 runs the fits in the calling process.
    :type processes: int

    :returns: One :class:`mixidr.em.FitResult` per starting point, in the given order.
    :rtype: list
    """
    states = [initialize(sample, p, tolerance=tolerance, max_iterations=max_iterations) for p in initial_params_list]
    if len(states) == 0:
        raise InvalidInput("No starting points given.")
    if processes < 1:
        raise InvalidInput("processes must be positive, got %r." % (processes,))

    logger.info("Running %d EM fits with %d process(es)." % (len(states), processes))

    if processes == 1 or len(states) == 1:
        return [_run_quiet(s) for s in states]

    with Pool(processes=min(processes, len(states))) as pool:
        results = pool.map(_run_quiet, states)

    return results


def best_fit(results):
    """The result with the highest log-likelihood, preferring fits without degeneracies."""
    if len(results) == 0:
        raise InvalidInput("No results to choose from.")

    candidates = [r for r in results if not r.degenerate]
    if len(candidates) == 0:
        logger.warning("All %d fits were degenerate; choosing among them anyway." % len(results))
        candidates = results

    return max(candidates, key=lambda r: r.log_likelihood)
