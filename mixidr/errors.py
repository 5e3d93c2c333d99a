# coding=utf-8
"""Error type and termination codes shared by the fitting routines."""

# termination reasons reported in FitResult.termination
CONVERGED            = "converged"
MAX_ITERATIONS       = "max_iterations_reached"
NUMERICAL_DEGENERACY = "numerical_degeneracy"

# degeneracy flags reported in FitResult.degeneracies
ZERO_DENSITY          = "zero_density"
EMPTY_COMPONENT_1     = "empty_component_1"
EMPTY_COMPONENT_2     = "empty_component_2"
BOUNDARY_WEIGHT       = "boundary_weight"
VARIANCE_COLLAPSE     = "variance_collapse"
NON_FINITE_LIKELIHOOD = "non_finite_likelihood"


class InvalidInput(ValueError):
    """Raised before fitting when the sample or the initial guess cannot be used."""
    pass
