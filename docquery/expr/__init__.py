"""
Expression system for docquery: query trees and the values inside them.

Core Classes:
  - Expr: Wrapper around a raw tree of call records, object literals and lists
  - OpaqueScalar: Leaf value with its own display string (Ref, Time, ...)
  - NodeKind: What kind of node a tree value is, as decided by classify()

Builder functions live in ``docquery.expr.query``.

Example:
  >>> from docquery.expr import query as q
  >>> expr = q.add(1, 2)
  >>> expr.raw
  {'add': [1, 2]}
  >>> expr
  Add(1,2)
"""

# Re-export base expression class
from .base import OBJECT_KEY, Expr, to_wire

# Re-export value types
from .values import Bytes, Date, OpaqueScalar, Query, Ref, SetRef, Time

# Re-export node classification
from .nodes import BINDING_KEY, NodeKind, classify, is_simple, unwrap

# Re-export builder entry points
from . import query
from .query import wrap
from .transforms import capture_lambda

__all__ = [
    "Expr",
    "OBJECT_KEY",
    "BINDING_KEY",
    "to_wire",
    "OpaqueScalar",
    "Ref",
    "Time",
    "Date",
    "Bytes",
    "SetRef",
    "Query",
    "NodeKind",
    "classify",
    "is_simple",
    "unwrap",
    "query",
    "wrap",
    "capture_lambda",
]
