"""Index-based private information retrieval over the learning-with-errors problem."""

__version__ = "0.0.1"