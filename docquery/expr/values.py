"""
Opaque scalar values: leaves that know how to display themselves.

The printer never looks inside these. Each value computes its display string
once, at construction time, and exposes a wire form for JSON serialization.

Classes:
  - OpaqueScalar: Base class
  - Ref: Reference to a document, collection, index, ...
  - Time: Timestamp with nanosecond precision
  - Date: Calendar date
  - Bytes: Binary blob, shown base64-encoded
  - SetRef: Set reference returned by Match, Union, ...
  - Query: A captured lambda that can be stored and run later
"""

import base64
import binascii
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import pandas as pd

# Native collection id -> (member display name, collection display name)
NATIVE_REFS = {
    "collections": ("Collection", "Collections"),
    "indexes": ("Index", "Indexes"),
    "functions": ("Function", "Functions"),
    "databases": ("Database", "Databases"),
    "roles": ("Role", "Roles"),
    "keys": ("Key", "Keys"),
}


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _iso_date(stamp: "pd.Timestamp") -> str:
    # strftime("%Y") does not pad years below 1000
    return f"{stamp.year:04d}-{stamp.month:02d}-{stamp.day:02d}"


class OpaqueScalar(ABC):
    """
    Abstract base class for leaf values with a precomputed display string.

    Subclasses must call ``OpaqueScalar.__init__`` with the finished display
    text and implement ``serialize()``.
    """

    def __init__(self, display: str):
        self._display = display

    @property
    def display(self) -> str:
        """The text the printer emits for this value."""
        return self._display

    @abstractmethod
    def serialize(self) -> Dict[str, Any]:
        """
        Convert this value to its tagged wire form.

        Returns:
            A single-key dict such as {"@ts": "..."}
        """
        pass

    def __str__(self) -> str:
        return self._display

    def __repr__(self) -> str:
        return self._display

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._display))


class Ref(OpaqueScalar):
    """
    Reference to a stored entity.

    A ref without a collection whose id names a native collection
    ("collections", "indexes", ...) is the native collection itself.

    Attributes:
        id (str): The entity id
        collection (Ref | None): The collection the entity lives in
    """

    def __init__(self, id: str, collection: Optional["Ref"] = None):
        if not isinstance(id, str) or not id:
            raise ValueError(f"Ref id must be a non-empty string, got {id!r}")
        if collection is not None and not isinstance(collection, Ref):
            raise TypeError(
                f"Ref collection must be a Ref, got {type(collection).__name__}"
            )
        self.id = id
        self.collection = collection
        super().__init__(self._build_display())

    def _build_display(self) -> str:
        if self.collection is None:
            if self.id in NATIVE_REFS:
                return f"{NATIVE_REFS[self.id][1]}()"
            return f"Ref({_quote(self.id)})"

        parent = self.collection
        if parent.collection is None and parent.id in NATIVE_REFS:
            # Collection("users") rather than Ref(Collections(), "users")
            return f"{NATIVE_REFS[parent.id][0]}({_quote(self.id)})"
        return f"Ref({parent.display}, {_quote(self.id)})"

    def serialize(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"id": self.id}
        if self.collection is not None:
            body["collection"] = self.collection.serialize()
        return {"@ref": body}


class Time(OpaqueScalar):
    """
    A point in time, kept at nanosecond precision in UTC.

    Accepts ISO-8601 strings, ``datetime`` objects and ``pandas.Timestamp``.
    Naive inputs are taken to be UTC.
    """

    def __init__(self, value: Union[str, Any]):
        try:
            stamp = pd.Timestamp(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Cannot interpret {value!r} as a timestamp: {e}")
        if stamp is pd.NaT:
            raise ValueError(f"Cannot interpret {value!r} as a timestamp")

        if stamp.tzinfo is None:
            stamp = stamp.tz_localize("UTC")
        else:
            stamp = stamp.tz_convert("UTC")

        self.timestamp = stamp
        self.iso = self._format(stamp)
        super().__init__(f"Time({_quote(self.iso)})")

    @staticmethod
    def _format(stamp: "pd.Timestamp") -> str:
        text = (
            f"{_iso_date(stamp)}T"
            f"{stamp.hour:02d}:{stamp.minute:02d}:{stamp.second:02d}"
        )
        nanos = stamp.microsecond * 1000 + stamp.nanosecond
        if nanos:
            text += "." + f"{nanos:09d}".rstrip("0")
        return text + "Z"

    def serialize(self) -> Dict[str, Any]:
        return {"@ts": self.iso}


class Date(OpaqueScalar):
    """A calendar date, e.g. Date("2024-02-29")."""

    def __init__(self, value: Union[str, Any]):
        try:
            stamp = pd.Timestamp(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Cannot interpret {value!r} as a date: {e}")
        if stamp is pd.NaT:
            raise ValueError(f"Cannot interpret {value!r} as a date")

        self.iso = _iso_date(stamp)
        super().__init__(f"Date({_quote(self.iso)})")

    def serialize(self) -> Dict[str, Any]:
        return {"@date": self.iso}


class Bytes(OpaqueScalar):
    """
    Binary data.

    Accepts raw ``bytes``/``bytearray`` or a base64 string.
    """

    def __init__(self, value: Union[bytes, bytearray, str]):
        if isinstance(value, (bytes, bytearray)):
            self.data = bytes(value)
        elif isinstance(value, str):
            try:
                self.data = base64.b64decode(value, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 payload {value!r}: {e}")
        else:
            raise TypeError(
                f"Bytes expects bytes or a base64 string, got {type(value).__name__}"
            )

        self.encoded = base64.b64encode(self.data).decode("ascii")
        super().__init__(f"Bytes({_quote(self.encoded)})")

    def serialize(self) -> Dict[str, Any]:
        return {"@bytes": self.encoded}


class SetRef(OpaqueScalar):
    """
    A set reference, as returned by the service for Match, Union, ...

    Displayed as ``SetRef(<compact expression>)``.
    """

    def __init__(self, raw: Any):
        from ..printer import render

        self.raw = raw
        super().__init__(f"SetRef({render(raw, True)})")

    def serialize(self) -> Dict[str, Any]:
        from .base import to_wire

        return {"@set": to_wire(self.raw)}


class Query(OpaqueScalar):
    """
    A stored lambda, displayed as ``Query(<compact lambda>)``.
    """

    def __init__(self, raw: Any):
        from ..printer import render

        self.raw = raw
        super().__init__(f"Query({render(raw, True)})")

    def serialize(self) -> Dict[str, Any]:
        from .base import to_wire

        return {"@query": to_wire(self.raw)}
