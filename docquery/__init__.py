# docquery: query expressions for a remote document service, and a printer
# that renders them as readable call syntax.

import logging

from . import config
from .errors import InvalidExpressionError
from .expr import (
    Bytes,
    Date,
    Expr,
    OpaqueScalar,
    Query,
    Ref,
    SetRef,
    Time,
    query,
    wrap,
)
from .printer import PrintOptions, RenderContext, render, resolve

logging.getLogger(__name__).addHandler(logging.NullHandler())
config.configure_logging()


def to_string(expr, options=None) -> str:
    """
    Pretty-print an expression tree.

    Args:
        expr: An Expr or raw tree
        options: None, True for compact output, a dict of option names
                 ({"compact": ..., "map": ...}) or a PrintOptions

    Returns:
        The rendered text
    """
    return render(expr, options)


__all__ = [
    "Expr",
    "OpaqueScalar",
    "Ref",
    "Time",
    "Date",
    "Bytes",
    "SetRef",
    "Query",
    "InvalidExpressionError",
    "PrintOptions",
    "RenderContext",
    "query",
    "render",
    "resolve",
    "to_string",
    "wrap",
]
