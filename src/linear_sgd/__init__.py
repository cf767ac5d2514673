"""Linear models trained with stochastic gradient descent."""

__version__ = '0.1.0'
