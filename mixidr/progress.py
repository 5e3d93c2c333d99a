# coding=utf-8
from logging import getLogger

from .model import components

logger = getLogger(__name__)


def _format(iteration, params, log_likelihood):
    comp1, comp2 = components(params)
    return "iteration {iteration:4d} (log-likelihood={log_likelihood:.5e}): p(x|Φ) = {w1:.3g}*{d1} + {w2:.3g}*{d2}".format(
        iteration=iteration,
        log_likelihood=log_likelihood,
        w1=params.pi, d1=comp1,
        w2=1 - params.pi, d2=comp2,
    )

def simple_progress(iteration, params, log_likelihood):
    """A simple progress callback printing every iteration to stdout"""

    print(_format(iteration, params, log_likelihood))

def logged_simple_progress(iteration, params, log_likelihood):
    """The default progress callback of mixidr.em.run, logging at info level"""

    logger.info(_format(iteration, params, log_likelihood))
