"""
Errors and warnings raised by kitagawa.
"""


class KitagawaError(Exception):
    """Base class for kitagawa errors."""


class InvalidConfigurationError(KitagawaError, ValueError):
    """Raised for unsupported options: unit flags, taper counts, series shapes."""


class DomainError(KitagawaError, ValueError):
    """Raised when an input lies outside the physical domain of the model."""


class NumericalInconsistencyError(KitagawaError, ArithmeticError):
    """Raised when a quantity that must be real has an imaginary residual."""


class NumericalInconsistencyWarning(RuntimeWarning):
    """Emitted instead of NumericalInconsistencyError outside strict mode."""
