"""Exceptions raised by docquery."""


class InvalidExpressionError(ValueError):
    """
    Raised when a raw expression tree does not have a renderable shape.

    Records must be non-empty, keyed by strings, and the ``"object"`` literal
    marker must be the only key of the record that carries it.
    """
