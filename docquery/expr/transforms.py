"""Capturing Python callables as query lambdas."""

import inspect
import logging
from typing import Callable, List

from .base import Expr
from .query import var, wrap

logger = logging.getLogger(__name__)

_UNSUPPORTED_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def _parameter_names(fn: Callable) -> List[str]:
    """
    Read the positional parameter names of a callable.

    Raises:
        TypeError: If the signature cannot be read, takes no parameters, or
            uses *args, **kwargs or keyword-only parameters
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot read the parameters of {fn!r}: {e}")

    names = []
    for param in signature.parameters.values():
        if param.kind in _UNSUPPORTED_KINDS:
            raise TypeError(
                f"Lambda parameters must be plain positional names, "
                f"got {param.kind.description} parameter '{param.name}'"
            )
        names.append(param.name)

    if not names:
        raise TypeError("Lambda functions must take at least one parameter")
    return names


def capture_lambda(fn: Callable) -> Expr:
    """
    Call a Python function with Var expressions to capture its body.

    The function runs once, at build time, with ``var(name)`` for each
    parameter. Whatever it returns becomes the lambda body.

    Args:
        fn: e.g. ``lambda x: add(x, 1)`` or ``lambda a, b: equals(a, b)``

    Returns:
        Expression wrapping {"lambda": "x", "expr": body}; several
        parameters are given as a list of names

    Example:
        >>> capture_lambda(lambda doc: select("data", doc)).raw["lambda"]
        'doc'
    """
    names = _parameter_names(fn)
    body = fn(*[var(name) for name in names])
    logger.debug(
        "Captured lambda %s with parameters %s",
        getattr(fn, "__name__", repr(fn)),
        names,
    )

    params = names[0] if len(names) == 1 else names
    return Expr({"lambda": params, "expr": wrap(body)})
