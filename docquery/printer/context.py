"""Render state: indentation depth, compact mode and the current key path."""

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Union

from ..expr.nodes import is_simple

MARKER = "·"
BLANK = " "

PathKey = Union[str, int]


class RenderContext:
    """
    Mutable state threaded through one render.

    Every change is made inside a context manager that restores the previous
    value on exit, so a context is left exactly as found once a render
    returns or raises.

    Attributes:
        depth (int): Nesting depth of the node being rendered
        compact (bool): Whether output is currently single-line
        key_path (list): Keys and indices from the root to the current node
    """

    def __init__(self, compact: bool = False, depth: int = 0):
        self.depth = depth
        self.compact = compact
        self.key_path: List[PathKey] = []

    def snapshot(self):
        """Return (depth, compact, key_path) as an immutable tuple."""
        return (self.depth, self.compact, tuple(self.key_path))

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Render children one level deeper."""
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def compactness(self, values: Iterable[Any]) -> Iterator[bool]:
        """
        Decide compact mode for a composite node.

        A compact ancestor forces compact mode. Otherwise the node is compact
        when every one of its immediate values is simple.

        Yields:
            The compact flag that was in force before this node
        """
        was_compact = self.compact
        if not was_compact:
            self.compact = all(is_simple(v) for v in values)
        try:
            yield was_compact
        finally:
            self.compact = was_compact

    @contextmanager
    def path(self, key: PathKey) -> Iterator[List[PathKey]]:
        self.key_path.append(key)
        try:
            yield self.key_path
        finally:
            self.key_path.pop()

    def indent_marker(self, depth: Optional[int] = None) -> str:
        if self.compact:
            return ""
        if depth is None:
            depth = self.depth
        return (MARKER + BLANK) * depth

    def eol(self, text: str) -> str:
        return text if self.compact else text + "\n"
