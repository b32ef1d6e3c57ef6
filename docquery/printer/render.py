"""
Pretty-printer for query expressions.

Turns an expression tree into call syntax for logs and error messages:

    >>> render({"add": [1, 2]}, compact=True)
    'Add(1,2)'
    >>> print(render({"filter": {"lambda": "x", "expr": {"var": "x"}},
    ...               "collection": [1, 2]}))
    Filter(
    · [1,2],
    · Lambda(
    · · "x",
    · · Var("x")
    · )
    )

The output is for humans only; there is no parser for it.
"""

import json
import logging
import math
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from ..expr.nodes import BINDING_KEY, NodeKind, classify, unwrap
from ..expr.base import OBJECT_KEY
from .context import PathKey, RenderContext
from .names import is_varargs, resolve, reverses_args
from .options import PrintOptions

logger = logging.getLogger(__name__)


def render(
    node: Any,
    options: Any = None,
    context: Optional[RenderContext] = None,
    **kwargs: Any,
) -> str:
    """
    Render an expression tree as indented call syntax.

    Args:
        node: An Expr, a raw tree (dicts, lists, scalars) or an opaque value
        options: None, a bool (compact), a dict or a PrintOptions
        context: Render state to use; a fresh one is created when omitted.
                 It is left as found when render returns.
        **kwargs: Option names, merged over ``options``
                  (e.g. ``render(expr, compact=True)``)

    Returns:
        The rendered text

    Example:
        >>> render({"object": {"x": 1, "y": "z"}})
        '{x: 1,y: "z"}'
    """
    opts = PrintOptions.coerce(options)
    if kwargs:
        merged = {"compact": opts.compact, "map": opts.map}
        merged.update(kwargs)
        opts = PrintOptions.coerce(merged)

    logger.debug(
        "Rendering %s (compact=%s, map=%s)",
        type(node).__name__,
        opts.compact,
        opts.map is not None,
    )
    if context is None:
        return _Printer(opts, RenderContext(compact=opts.compact)).render(node)

    was_compact = context.compact
    context.compact = was_compact or opts.compact
    try:
        return _Printer(opts, context).render(node)
    finally:
        context.compact = was_compact


class _Printer:
    """Recursive renderer bound to one options value and one context."""

    def __init__(self, options: PrintOptions, context: RenderContext):
        self.options = options
        self.ctx = context

    def render(self, node: Any) -> str:
        node = unwrap(node)
        kind = classify(node)

        if kind is NodeKind.OPAQUE:
            return node.display
        if kind is NodeKind.SCALAR:
            return _scalar(node)
        if kind is NodeKind.SEQUENCE:
            return self.render_sequence(node, self.render)
        if kind is NodeKind.OBJECT:
            return self.render_object(unwrap(node[OBJECT_KEY]))
        return self.render_call(node, binding=kind is NodeKind.BINDING_CALL)

    # -- layout rules ---------------------------------------------------------

    def _block(self, open_: str, parts: List[str], close: str) -> str:
        """Lay out already-rendered children between delimiters."""
        ctx = self.ctx
        if ctx.compact:
            return open_ + ",".join(parts) + close
        inner = ctx.indent_marker(ctx.depth + 1)
        return (
            ctx.eol(open_)
            + ctx.eol(",").join(inner + part for part in parts)
            + ctx.eol("")
            + ctx.indent_marker()
            + close
        )

    def _child(self, key: PathKey, value: Any, to_str: Callable[[Any], str]) -> str:
        """Render one child under its key and pass it through the map hook."""
        with self.ctx.path(key) as path:
            return self.options.apply_map(to_str(value), path)

    def render_sequence(self, items: Sequence[Any], to_str: Callable[[Any], str]) -> str:
        if not items:
            return "[]"
        with self.ctx.compactness(items):
            with self.ctx.nested():
                parts = [self._child(i, item, to_str) for i, item in enumerate(items)]
            return self._block("[", parts, "]")

    def render_object(self, fields: Any) -> str:
        if not isinstance(fields, dict):
            # Best effort for a malformed literal
            return self.render(fields)
        if not fields:
            return "{}"
        with self.ctx.compactness(fields.values()) as was_compact:
            sep = "" if was_compact else " "
            with self.ctx.nested():
                parts = [
                    f"{key}:{sep}{self._child(key, value, self.render)}"
                    for key, value in fields.items()
                ]
            return self._block("{", parts, "}")

    def render_bindings(self, bindings: Any) -> str:
        bindings = unwrap(bindings)
        if isinstance(bindings, (list, tuple)):
            return self.render_sequence(
                bindings, lambda entry: self.render_object(unwrap(entry))
            )
        return self.render_object(bindings)

    def render_call(self, record: dict, binding: bool = False) -> str:
        if not record:
            return "{}"

        keys = list(record)
        name = resolve(str(keys[0]))

        with self.ctx.compactness(record.values()):
            with self.ctx.nested():
                args = self._call_args(name, keys, record, binding)
            if reverses_args(name):
                args.reverse()
            return self._block(name + "(", args, ")")

    def _call_args(
        self, name: str, keys: List[str], record: dict, binding: bool
    ) -> List[str]:
        args = []
        for position, key in enumerate(keys):
            value = record[key]
            if binding and key == BINDING_KEY:
                args.append(self._child(key, value, self.render_bindings))
            elif position == 0 and is_varargs(name) and _is_sequence(value):
                args.extend(self._spread(key, unwrap(value)))
            else:
                args.append(self._child(key, value, self.render))
        return args

    def _spread(self, key: str, items: Sequence[Any]) -> List[str]:
        with self.ctx.path(key):
            return [self._child(i, item, self.render) for i, item in enumerate(items)]


def _is_sequence(value: Any) -> bool:
    return classify(value) is NodeKind.SEQUENCE


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return str(value)

