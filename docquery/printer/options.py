"""Options accepted by the printer."""

from dataclasses import dataclass, fields
from typing import Any, Callable, List, Optional, Union

from .. import config

MapFn = Callable[[str, List[Union[str, int]]], str]


@dataclass(frozen=True)
class PrintOptions:
    """
    Printer configuration.

    Attributes:
        compact: Render everything on one line
        map: Called as map(text, key_path) for each rendered child; its
             return value replaces the child's text
    """

    compact: bool = False
    map: Optional[MapFn] = None

    def apply_map(self, text: str, key_path: List[Union[str, int]]) -> str:
        if self.map is None:
            return text
        return self.map(text, list(key_path))

    @classmethod
    def coerce(cls, options: Any) -> "PrintOptions":
        """
        Build PrintOptions from the forms callers pass.

        Args:
            options: None (defaults), a bool (shorthand for compact), a
                     dict of option names or a PrintOptions. DOCQUERY_COMPACT
                     supplies compact when None or a dict without it is given.

        Raises:
            TypeError: On unknown option names or unsupported types
        """
        if options is None:
            return cls(compact=config.env_flag(config.COMPACT_ENV))
        if isinstance(options, cls):
            return options
        if isinstance(options, bool):
            return cls(compact=options)
        if isinstance(options, dict):
            allowed = [f.name for f in fields(cls)]
            unknown = [k for k in options if k not in allowed]
            if unknown:
                raise TypeError(
                    f"Unrecognized print options {unknown}. "
                    f"Accepted options: {allowed}"
                )
            if "map" in options and options["map"] is not None:
                if not callable(options["map"]):
                    raise TypeError(
                        f"'map' must be callable, got {type(options['map']).__name__}"
                    )
            settings = dict(options)
            settings.setdefault("compact", config.env_flag(config.COMPACT_ENV))
            return cls(**settings)
        raise TypeError(
            f"options must be None, bool, dict or PrintOptions, "
            f"got {type(options).__name__}"
        )
