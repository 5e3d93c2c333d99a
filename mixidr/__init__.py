"""
Expectation-Maximization fitting of two-component Gaussian mixtures with a shared variance,
and IDR-style reproducibility scores derived from the fit.
"""

from ._version import __version__
from . import distribution
from .errors import InvalidInput
from .progress import simple_progress, logged_simple_progress
from .model import MixtureParameters, probability, log_likelihood, responsibilities, guess_initial_params
from .em import FitState, FitResult, initialize, step, run, em
from .multistart import initial_param_grid, multi_start, best_fit
from .idr import reproducible_component, local_idr, global_idr, select_reproducible
from .simulate import generate_data
