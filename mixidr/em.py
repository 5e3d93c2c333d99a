import collections
import numbers

import numpy as np

from . import errors
from .errors import InvalidInput
from .model import MixtureParameters, components, e_step, log_likelihood
from .progress import logged_simple_progress

from logging import getLogger
logger = getLogger(__name__)

DEFAULT_TOLERANCE      = 1e-6
DEFAULT_MAX_ITERATIONS = 1000


FitState = collections.namedtuple('FitState', [
    'sample',                   # read-only 1D float array
    'params',                   # current MixtureParameters
    'log_likelihood',           # log-likelihood under params
    'previous_log_likelihood',  # log-likelihood before the last step, None before the first one
    'iteration',
    'tolerance',
    'max_iterations',
    'responsibilities',         # output of the last E-step, None before the first one
    'degeneracies',             # tuple of flags from mixidr.errors, in order of first occurrence
    'fatal',                    # the last step could not produce a usable variance or likelihood
])


class FitResult(collections.namedtuple('FitResult', [
        'params', 'responsibilities', 'iterations', 'termination',
        'log_likelihood', 'trace', 'degeneracies'])):
    """Outcome of :func:`run`.

    Only invalid input is raised; non-convergence and numerical trouble are reported here.
    ``trace`` holds the log-likelihood at the initial guess followed by one value per iteration.

    Which fitted mean is labelled component 1 follows the initial guess. Swapping mu1 and mu2
    in the guess swaps the labels of the result (and pi becomes 1 - pi); this is inherent to
    mixture models. Use :func:`mixidr.idr.reproducible_component` when a label-free choice is needed.
    """
    __slots__ = ()

    @property
    def converged(self):
        return self.termination == errors.CONVERGED

    @property
    def degenerate(self):
        return len(self.degeneracies) > 0


def _flag(flags, flag):
    if flag not in flags:
        flags.append(flag)


def initialize(sample, initial_params, tolerance=DEFAULT_TOLERANCE, max_iterations=DEFAULT_MAX_ITERATIONS):
    """Validate the inputs of a fit and build its starting state.

    :param sample: The observations. Can be an array-like or a :class:`numpy.ndarray`, must be 1D, non-empty and finite.
    :type sample: numpy.ndarray

    :param initial_params: Starting point (pi, mu1, mu2, sigma2) with 0 < pi < 1 and sigma2 > 0.
    :type initial_params: :class:`mixidr.model.MixtureParameters` or tuple

    :param tolerance: Absolute change in log-likelihood below which the fit has converged.
    :type tolerance: float

    :param max_iterations: The maximum number of EM iterations.
    :type max_iterations: int

    :raises InvalidInput: if any of the above does not hold. Nothing is computed in that case.
    :rtype: :class:`FitState`
    """
    try:
        data = np.array(sample, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInput("Sample is not numeric: %s" % e)

    if data.ndim != 1:
        raise InvalidInput("Expect 1D sample, got %d dimensions." % data.ndim)
    if data.shape[0] == 0:
        raise InvalidInput("Sample is empty.")
    if not np.all(np.isfinite(data)):
        raise InvalidInput("Sample contains non-finite values.")

    try:
        params = MixtureParameters(*[float(v) for v in initial_params])
    except (TypeError, ValueError) as e:
        raise InvalidInput("Initial parameters must be (pi, mu1, mu2, sigma2): %s" % e)

    if not 0.0 < params.pi < 1.0:
        raise InvalidInput("Initial mixing weight must lie in (0, 1), got %r." % params.pi)
    if not (np.isfinite(params.sigma2) and params.sigma2 > 0.0):
        raise InvalidInput("Initial variance must be positive and finite, got %r." % params.sigma2)
    if not (np.isfinite(params.mu1) and np.isfinite(params.mu2)):
        raise InvalidInput("Initial means must be finite, got %r and %r." % (params.mu1, params.mu2))

    if isinstance(tolerance, bool) or not isinstance(tolerance, numbers.Real) or not tolerance > 0:
        raise InvalidInput("Tolerance must be a positive number, got %r." % (tolerance,))
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral) or max_iterations < 1:
        raise InvalidInput("max_iterations must be a positive integer, got %r." % (max_iterations,))

    data.setflags(write=False)

    return FitState(
        sample=data,
        params=params,
        log_likelihood=log_likelihood(data, params),
        previous_log_likelihood=None,
        iteration=0,
        tolerance=float(tolerance),
        max_iterations=int(max_iterations),
        responsibilities=None,
        degeneracies=(),
        fatal=False,
    )


def step(state):
    """One E-step followed by one M-step. Returns a new state, the given one is left untouched."""

    data = state.sample
    params = state.params
    n_data = data.shape[0]
    iteration = state.iteration + 1
    flags = list(state.degeneracies)
    fatal = False

    # E-step #######
    resp, zero = e_step(data, params)
    if np.any(zero):
        logger.warning("iteration %d: mixture density underflowed for %d observations; assigned to the closer mean." % (iteration, np.sum(zero)))
        _flag(flags, errors.ZERO_DENSITY)

    # M-step #######
    comp1, comp2 = components(params)

    if not comp1.estimate_parameters(data, 1 - resp):
        logger.warning("iteration %d: component 1 has no responsibility mass; its mean is kept at %g." % (iteration, params.mu1))
        _flag(flags, errors.EMPTY_COMPONENT_1)

    if not comp2.estimate_parameters(data, resp):
        logger.warning("iteration %d: component 2 has no responsibility mass; its mean is kept at %g." % (iteration, params.mu2))
        _flag(flags, errors.EMPTY_COMPONENT_2)

    pi = float(np.mean(1 - resp))
    if not 0.0 < pi < 1.0:
        logger.warning("iteration %d: mixing weight reached the boundary (pi=%g)." % (iteration, pi))
        _flag(flags, errors.BOUNDARY_WEIGHT)

    # pooled over both components
    sigma2 = (comp1.squared_deviation(data, 1 - resp) + comp2.squared_deviation(data, resp)) / n_data
    if not (np.isfinite(sigma2) and sigma2 > 0.0):
        logger.warning("iteration %d: variance update is %r; keeping the last valid variance %g." % (iteration, sigma2, params.sigma2))
        _flag(flags, errors.VARIANCE_COLLAPSE)
        sigma2 = params.sigma2
        fatal = True

    new_params = MixtureParameters(pi=pi, mu1=float(comp1.get_mu()), mu2=float(comp2.get_mu()), sigma2=float(sigma2))

    ll = log_likelihood(data, new_params)
    if not np.isfinite(ll):
        logger.warning("iteration %d: log-likelihood is %r." % (iteration, ll))
        _flag(flags, errors.NON_FINITE_LIKELIHOOD)
        fatal = True

    return state._replace(
        params=new_params,
        log_likelihood=ll,
        previous_log_likelihood=state.log_likelihood,
        iteration=iteration,
        responsibilities=resp,
        degeneracies=tuple(flags),
        fatal=fatal,
    )


def run(state, progress_callback=logged_simple_progress):
    """Iterate :func:`step` until convergence, the iteration budget or a fatal degeneracy.

    :param state: A state produced by :func:`initialize` (or by :func:`step`).
    :type state: :class:`FitState`

    :param progress_callback: A function ``(iteration, params, log_likelihood)`` called after every iteration.
    :type progress_callback: function or None

    :rtype: :class:`FitResult`
    """
    trace = [state.log_likelihood]
    termination = None

    while termination is None:
        if state.iteration >= state.max_iterations:
            termination = errors.MAX_ITERATIONS
            break

        state = step(state)
        trace.append(state.log_likelihood)

        if progress_callback:
            progress_callback(state.iteration, state.params, state.log_likelihood)

        # Convergence check #######
        if state.fatal:
            termination = errors.NUMERICAL_DEGENERACY
        elif abs(state.log_likelihood - state.previous_log_likelihood) < state.tolerance:
            termination = errors.CONVERGED

    if termination == errors.MAX_ITERATIONS:
        logger.warning("EM did not converge within %d iterations (last change in log-likelihood %g)." %
                       (state.max_iterations, abs(trace[-1] - trace[-2]) if len(trace) > 1 else float('nan')))
    else:
        logger.info("EM stopped after %d iterations: %s, log-likelihood=%.6g." % (state.iteration, termination, state.log_likelihood))

    resp, zero = e_step(state.sample, state.params)
    degeneracies = state.degeneracies
    if np.any(zero) and errors.ZERO_DENSITY not in degeneracies:
        logger.warning("final parameters: mixture density underflowed for %d observations; assigned to the closer mean." % np.sum(zero))
        degeneracies = degeneracies + (errors.ZERO_DENSITY,)

    return FitResult(
        params=state.params,
        responsibilities=resp,
        iterations=state.iteration,
        termination=termination,
        log_likelihood=state.log_likelihood,
        trace=np.array(trace),
        degeneracies=degeneracies,
    )


def em(sample, initial_params, tolerance=DEFAULT_TOLERANCE, max_iterations=DEFAULT_MAX_ITERATIONS, progress_callback=logged_simple_progress):
    """Fit a two-component Gaussian mixture with shared variance using the Expectation-Maximization (EM) algorithm.

    Shorthand for ``run(initialize(sample, initial_params, tolerance, max_iterations))``.

    :rtype: :class:`FitResult`
    """
    state = initialize(sample, initial_params, tolerance=tolerance, max_iterations=max_iterations)
    return run(state, progress_callback=progress_callback)
