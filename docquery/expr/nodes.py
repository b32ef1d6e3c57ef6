"""Classification of expression tree nodes."""

from enum import Enum
from typing import Any

from .base import OBJECT_KEY, Expr
from .values import OpaqueScalar

# Identifying key of a call whose payload introduces named bindings
BINDING_KEY = "let"


class NodeKind(Enum):
    OPAQUE = "opaque"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    OBJECT = "object"
    BINDING_CALL = "binding_call"
    CALL = "call"


def unwrap(node: Any) -> Any:
    """Strip any Expr wrappers, returning the raw tree."""
    while isinstance(node, Expr):
        node = node.raw
    return node


def classify(node: Any) -> NodeKind:
    """
    Decide what kind of node a value is.

    Expr wrappers are looked through. Records holding the object marker are
    literal objects; records whose first key is the binding keyword are
    binding calls; any other record is a call, including an empty one.
    """
    node = unwrap(node)

    if isinstance(node, OpaqueScalar):
        return NodeKind.OPAQUE
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    if isinstance(node, dict):
        if OBJECT_KEY in node:
            return NodeKind.OBJECT
        if node and next(iter(node)) == BINDING_KEY:
            return NodeKind.BINDING_CALL
        return NodeKind.CALL
    return NodeKind.SCALAR


def is_simple(node: Any) -> bool:
    """
    Return True for leaves that never need a line of their own.

    Only scalars and opaque scalars are simple. Sequences and records,
    including plain nested records, are not.
    """
    return classify(node) in (NodeKind.SCALAR, NodeKind.OPAQUE)
