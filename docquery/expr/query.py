"""
Query builder functions.

Each function returns an ``Expr`` wrapping the record the service expects,
e.g. ``add(1, 2)`` wraps ``{"add": [1, 2]}``. Arguments are wrapped with
``wrap()``: plain dicts become object literals, lists are wrapped element by
element, and Expr or opaque values pass through unchanged.

Names that clash with Python keywords or builtins carry a trailing
underscore (``if_``, ``map_``, ``and_``, ``max_``, ...).
"""

import warnings
from typing import Any, Callable, Dict, Optional, Sequence, Union

from .base import OBJECT_KEY, Expr
from .values import OpaqueScalar


def wrap(value: Any) -> Any:
    """
    Turn a Python value into an expression tree node.

    Args:
        value: Any Python value

    Returns:
        Expr/opaque values unchanged, dicts as object literal Exprs, lists
        with every element wrapped, and other values unchanged

    Example:
        >>> wrap({"name": "Ada"}).raw
        {'object': {'name': 'Ada'}}
    """
    if isinstance(value, (Expr, OpaqueScalar)):
        return value
    if isinstance(value, dict):
        return Expr({OBJECT_KEY: {k: wrap(v) for k, v in value.items()}})
    if isinstance(value, (list, tuple)):
        return [wrap(v) for v in value]
    return value


def _varargs(values: Sequence[Any]) -> Any:
    """A single argument is passed as is, several as a list."""
    if len(values) == 1:
        return wrap(values[0])
    return [wrap(v) for v in values]


def _params(main: Dict[str, Any], optional: Dict[str, Any]) -> Expr:
    """Build a call record, dropping optional arguments that are None."""
    record = {k: wrap(v) for k, v in main.items()}
    for key, value in optional.items():
        if value is not None:
            record[key] = wrap(value)
    return Expr(record)


def _lambda_arg(fn: Any) -> Any:
    if callable(fn) and not isinstance(fn, (Expr, OpaqueScalar)):
        return lambda_(fn)
    return wrap(fn)


# =============================================================================
# Basic forms
# =============================================================================


def let(bindings: Dict[str, Any], in_expr: Any) -> Expr:
    """
    Bind names for use in ``in_expr``.

    Bindings are evaluated in order, so later ones may refer to earlier ones.

    Args:
        bindings: Mapping of variable name to value
        in_expr: Expression evaluated with the bindings in scope

    Returns:
        Expression wrapping {"let": [{name: value}, ...], "in": in_expr}

    Example:
        >>> let({"x": 1}, var("x"))
        Let([{x:1}],Var("x"))
    """
    if not isinstance(bindings, dict):
        raise TypeError(f"let() bindings must be a dict, got {type(bindings).__name__}")
    return Expr(
        {
            "let": [{name: wrap(value)} for name, value in bindings.items()],
            "in": wrap(in_expr),
        }
    )


def var(name: str) -> Expr:
    """Reference a variable bound by ``let`` or a lambda."""
    return Expr({"var": name})


def lambda_(params: Union[str, Sequence[str], Callable], expr: Any = None) -> Expr:
    """
    Create a lambda.

    Either pass parameter name(s) and a body, or a Python callable whose
    parameter names become the lambda's parameters:

        >>> lambda_("x", add(var("x"), 1))
        >>> lambda_(lambda x: add(x, 1))

    Args:
        params: A parameter name, a list of names, or a callable
        expr: The body, when params are given as names

    Returns:
        Expression wrapping {"lambda": params, "expr": body}

    Raises:
        TypeError: If a body is missing, or the callable cannot be captured
    """
    if callable(params) and not isinstance(params, (str, Expr)):
        if expr is not None:
            raise TypeError("lambda_() takes no body when given a callable")
        from .transforms import capture_lambda

        return capture_lambda(params)

    if expr is None:
        raise TypeError("lambda_() needs a body when given parameter names")
    return Expr({"lambda": wrap(params), "expr": wrap(expr)})


def do(*exprs: Any) -> Expr:
    """Evaluate expressions in order, returning the last."""
    return Expr({"do": _varargs(exprs)})


def if_(condition: Any, then: Any, else_: Any) -> Expr:
    return Expr({"if": wrap(condition), "then": wrap(then), "else": wrap(else_)})


def abort(message: str) -> Expr:
    return Expr({"abort": wrap(message)})


def call(ref: Any, *args: Any) -> Expr:
    """Call a user-defined function with arguments."""
    return Expr({"call": wrap(ref), "arguments": _varargs(args)})


def query(fn: Any) -> Expr:
    """Wrap a lambda so it is stored rather than evaluated."""
    return Expr({"query": _lambda_arg(fn)})


def at(timestamp: Any, expr: Any) -> Expr:
    """Evaluate ``expr`` as of ``timestamp``."""
    return Expr({"at": wrap(timestamp), "expr": wrap(expr)})


# =============================================================================
# Collection functions
# =============================================================================


def map_(collection: Any, fn: Any) -> Expr:
    """
    Apply ``fn`` to each element of ``collection``.

    Printed collection-first, as written: Map(collection, lambda).

    Example:
        >>> map_([1, 2], lambda x: add(x, 1))
        Map([1,2],Lambda("x",Add(Var("x"),1)))
    """
    return Expr({"map": _lambda_arg(fn), "collection": wrap(collection)})


def foreach(collection: Any, fn: Any) -> Expr:
    return Expr({"foreach": _lambda_arg(fn), "collection": wrap(collection)})


def filter_(collection: Any, fn: Any) -> Expr:
    """Keep the elements of ``collection`` for which ``fn`` returns true."""
    return Expr({"filter": _lambda_arg(fn), "collection": wrap(collection)})


def take(number: Any, collection: Any) -> Expr:
    return Expr({"take": wrap(number), "collection": wrap(collection)})


def drop(number: Any, collection: Any) -> Expr:
    return Expr({"drop": wrap(number), "collection": wrap(collection)})


def prepend(elements: Any, collection: Any) -> Expr:
    return Expr({"prepend": wrap(elements), "collection": wrap(collection)})


def append(elements: Any, collection: Any) -> Expr:
    return Expr({"append": wrap(elements), "collection": wrap(collection)})


def is_empty(collection: Any) -> Expr:
    return Expr({"is_empty": wrap(collection)})


def is_nonempty(collection: Any) -> Expr:
    return Expr({"is_nonempty": wrap(collection)})


# =============================================================================
# Reads and writes
# =============================================================================


def get(ref: Any, ts: Any = None) -> Expr:
    return _params({"get": ref}, {"ts": ts})


def paginate(
    set_: Any,
    size: Optional[int] = None,
    after: Any = None,
    before: Any = None,
    ts: Any = None,
    events: Optional[bool] = None,
    sources: Optional[bool] = None,
) -> Expr:
    """
    Page through a set.

    Optional arguments are left out of the record when None.

    Example:
        >>> paginate(match(index("all_users")), size=10)
        Paginate(Match(Index("all_users")),10)
    """
    return _params(
        {"paginate": set_},
        {
            "size": size,
            "after": after,
            "before": before,
            "ts": ts,
            "events": events,
            "sources": sources,
        },
    )


def exists(ref: Any, ts: Any = None) -> Expr:
    return _params({"exists": ref}, {"ts": ts})


def create(collection_ref: Any, params: Any) -> Expr:
    return Expr({"create": wrap(collection_ref), "params": wrap(params)})


def update(ref: Any, params: Any) -> Expr:
    return Expr({"update": wrap(ref), "params": wrap(params)})


def replace(ref: Any, params: Any) -> Expr:
    return Expr({"replace": wrap(ref), "params": wrap(params)})


def delete(ref: Any) -> Expr:
    return Expr({"delete": wrap(ref)})


# =============================================================================
# Sets
# =============================================================================


def match(index_ref: Any, *terms: Any) -> Expr:
    """Match an index, optionally on terms."""
    if not terms:
        return Expr({"match": wrap(index_ref)})
    return Expr({"match": wrap(index_ref), "terms": _varargs(terms)})


def union(*sets: Any) -> Expr:
    return Expr({"union": _varargs(sets)})


def intersection(*sets: Any) -> Expr:
    return Expr({"intersection": _varargs(sets)})


def difference(*sets: Any) -> Expr:
    return Expr({"difference": _varargs(sets)})


def distinct(set_: Any) -> Expr:
    return Expr({"distinct": wrap(set_)})


def join(source: Any, target: Any) -> Expr:
    return Expr({"join": wrap(source), "with": _lambda_arg(target)})


# =============================================================================
# Logic, comparison and arithmetic
# =============================================================================


def equals(*values: Any) -> Expr:
    return Expr({"equals": _varargs(values)})


def contains_path(path: Any, in_: Any) -> Expr:
    """True when ``path`` exists in ``in_``."""
    return Expr({"contains_path": wrap(path), "in": wrap(in_)})


def contains(path: Any, in_: Any) -> Expr:
    """
    Deprecated: Use contains_path() instead.
    """
    warnings.warn(
        "contains() is deprecated. Use contains_path() instead.",
        DeprecationWarning,
        stacklevel=2,
    )
    return contains_path(path, in_)


def select(path: Any, from_: Any, default: Any = None) -> Expr:
    """
    Extract the value at ``path`` from ``from_``.

    Args:
        path: A key, an index, or a list of them
        from_: The value to extract from
        default: Returned when the path does not exist

    Example:
        >>> select(["data", "name"], get(ref(collection("users"), "1")))
    """
    return _params({"select": path, "from": from_}, {"default": default})


def select_all(path: Any, from_: Any) -> Expr:
    return Expr({"select_all": wrap(path), "from": wrap(from_)})


def add(*values: Any) -> Expr:
    return Expr({"add": _varargs(values)})


def multiply(*values: Any) -> Expr:
    return Expr({"multiply": _varargs(values)})


def subtract(*values: Any) -> Expr:
    return Expr({"subtract": _varargs(values)})


def divide(*values: Any) -> Expr:
    return Expr({"divide": _varargs(values)})


def modulo(*values: Any) -> Expr:
    return Expr({"modulo": _varargs(values)})


def max_(*values: Any) -> Expr:
    return Expr({"max": _varargs(values)})


def min_(*values: Any) -> Expr:
    return Expr({"min": _varargs(values)})


def lt(*values: Any) -> Expr:
    return Expr({"lt": _varargs(values)})


def lte(*values: Any) -> Expr:
    return Expr({"lte": _varargs(values)})


def gt(*values: Any) -> Expr:
    return Expr({"gt": _varargs(values)})


def gte(*values: Any) -> Expr:
    return Expr({"gte": _varargs(values)})


def and_(*values: Any) -> Expr:
    return Expr({"and": _varargs(values)})


def or_(*values: Any) -> Expr:
    return Expr({"or": _varargs(values)})


def not_(boolean: Any) -> Expr:
    return Expr({"not": wrap(boolean)})


# =============================================================================
# Strings and time
# =============================================================================


def concat(strings: Any, separator: Optional[str] = None) -> Expr:
    return _params({"concat": strings}, {"separator": separator})


def casefold(string: Any, normalizer: Optional[str] = None) -> Expr:
    return _params({"casefold": string}, {"normalizer": normalizer})


def time(string: Any) -> Expr:
    return Expr({"time": wrap(string)})


def epoch(number: Any, unit: str) -> Expr:
    return Expr({"epoch": wrap(number), "unit": wrap(unit)})


def date(string: Any) -> Expr:
    return Expr({"date": wrap(string)})


def now() -> Expr:
    return Expr({"now": None})


# =============================================================================
# References
# =============================================================================


def collection(name: str, scope: Any = None) -> Expr:
    return _params({"collection": name}, {"scope": scope})


def index(name: str, scope: Any = None) -> Expr:
    return _params({"index": name}, {"scope": scope})


def function(name: str, scope: Any = None) -> Expr:
    return _params({"function": name}, {"scope": scope})


def ref(collection_ref: Any, id: Any) -> Expr:
    """Reference the document ``id`` in ``collection_ref``."""
    return Expr({"ref": wrap(collection_ref), "id": wrap(id)})


def new_id() -> Expr:
    return Expr({"new_id": None})
