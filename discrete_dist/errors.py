class InvalidArgumentError(ValueError):
    """Raised before any computation when a caller passes an argument outside the contract."""


class ConvergenceError(RuntimeError):
    """Raised when the quantile bracket cannot be established within the iteration cap."""
