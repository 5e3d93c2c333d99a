import abc


class Distribution(abc.ABC):
    """
    Base class for a mixture component density.

    A component exposes its log-density and a weighted maximum-likelihood update of its
    location. Scale parameters shared across components are estimated by the caller.
    """

    @abc.abstractmethod
    def log_density(self, data):
        """Compute the log-probability density :math:`\\log P(x|\\phi)`

        :param data: The data :math:`x` to compute a probability density for. A N-element :class:`numpy.ndarray`
        :type data: numpy.ndarray

        :returns: The log-density of every observation, given the component's parameters
        :rtype: numpy.ndarray
        """
        raise NotImplementedError("Need to implement density calculation!")

    @abc.abstractmethod
    def estimate_parameters(self, data, weights):
        """Estimate the component's location using weighted maximum-likelihood estimation.

        :param data: The data :math:`x` to estimate parameters for. A N-element :class:`numpy.ndarray`
        :type data: numpy.ndarray

        :param weights: The weights :math:`\\gamma` for individual data points. A N-element :class:`numpy.ndarray`.

        Choose those parameters :math:`\\phi` that maximize the weighted log-likelihood function:

        .. math::
            ll_\\gamma(x|\\phi) = \\sum_{n=1}^N \\gamma_{n} \\log [P(x|\\phi)]

        :returns: False when the weights carry no mass and the parameters were left unchanged, True otherwise.
        """
        raise NotImplementedError("Need to implement parameter estimation!")

    @abc.abstractmethod
    def __repr__(self):
        """Create a string representation of the probability distribution"""
        raise NotImplementedError("Need to implement string representation!")
