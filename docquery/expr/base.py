"""Base expression class for docquery."""

import json
from typing import Any, Dict, List, Union

from ..errors import InvalidExpressionError
from .values import OpaqueScalar

# Key that marks a record as a literal object rather than a call
OBJECT_KEY = "object"


def _validate_record(raw: Dict[Any, Any]) -> None:
    """
    Check that a raw record can be rendered as a call or object literal.

    Raises:
        InvalidExpressionError: If the record is empty, has non-string keys,
            or mixes the object marker with other keys
    """
    if not raw:
        raise InvalidExpressionError(
            "Expression records need at least one key naming the operation"
        )

    bad_keys = [k for k in raw if not isinstance(k, str)]
    if bad_keys:
        raise InvalidExpressionError(
            f"Expression record keys must be strings, got {bad_keys!r}"
        )

    if OBJECT_KEY in raw and len(raw) > 1:
        raise InvalidExpressionError(
            f"'{OBJECT_KEY}' must be the only key of a literal object record, "
            f"got keys {list(raw)}"
        )


def to_wire(value: Any) -> Any:
    """
    Convert an expression tree to plain JSON-compatible data.

    Expr wrappers are unwrapped, opaque values become their tagged forms
    ({"@ref": ...}, {"@ts": ...}, ...), lists and dicts are converted
    recursively. Everything else is returned unchanged.
    """
    if isinstance(value, Expr):
        return to_wire(value.raw)
    if isinstance(value, OpaqueScalar):
        return value.serialize()
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


class Expr:
    """
    A query expression: a raw tree of calls, literals, arrays and records.

    Generally built with the helpers in ``docquery.expr.query`` rather than
    directly. The raw tree may itself contain further ``Expr`` instances.

    Attributes:
        raw: The wrapped dict or list
    """

    def __init__(self, raw: Union[Dict[str, Any], List[Any]]):
        """
        Initialize an Expr.

        Args:
            raw: A call record ({"add": [1, 2]}), an object literal record
                 ({"object": {...}}) or a list

        Raises:
            InvalidExpressionError: If raw is not a dict or list, or is a
                malformed record
        """
        if isinstance(raw, dict):
            _validate_record(raw)
        elif not isinstance(raw, (list, tuple)):
            raise InvalidExpressionError(
                f"Expr wraps a dict or list, got {type(raw).__name__}"
            )
        self.raw = raw

    @property
    def key(self) -> Union[str, None]:
        """The identifying key of a record expression, None for lists."""
        if isinstance(self.raw, dict):
            return next(iter(self.raw))
        return None

    def serialize(self) -> Any:
        """
        Convert this expression to wire data.

        Returns:
            Nested dicts and lists ready for ``json.dumps``
        """
        return to_wire(self.raw)

    def to_json(self, **kwargs: Any) -> str:
        """Dump the wire form as a JSON string; kwargs go to ``json.dumps``."""
        return json.dumps(self.serialize(), **kwargs)

    def to_string(self, options: Any = None) -> str:
        """
        Pretty-print this expression.

        Args:
            options: None, a bool (compact), a dict or a PrintOptions

        Returns:
            The rendered text, e.g. 'Add(1,2)'
        """
        from ..printer import render

        return render(self, options)

    def __repr__(self) -> str:
        return self.to_string(True)

    def __str__(self) -> str:
        return self.to_string()
