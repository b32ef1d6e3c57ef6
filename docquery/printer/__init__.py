"""
Expression pretty-printer.

  - render: Render a tree as indented call syntax
  - PrintOptions: compact / map options
  - RenderContext: Depth, compact flag and key path of one render
  - resolve: Display name for a call key
"""

from .context import RenderContext
from .names import resolve
from .options import PrintOptions
from .render import render

__all__ = ["render", "PrintOptions", "RenderContext", "resolve"]
