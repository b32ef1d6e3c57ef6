"""Display names for call keys."""

from functools import lru_cache

# Keys whose display name does not follow the PascalCase rule
SPECIAL_CASES = {
    "is_nonempty": "IsNonEmpty",
    "lt": "LT",
    "lte": "LTE",
    "gt": "GT",
    "gte": "GTE",
}

# Calls that take their arguments as one list; printed spread out
VARARGS = frozenset(
    [
        "Do",
        "Call",
        "Union",
        "Intersection",
        "Difference",
        "Equals",
        "Add",
        "BitAnd",
        "BitOr",
        "BitXor",
        "Divide",
        "Max",
        "Min",
        "Modulo",
        "Multiply",
        "Subtract",
        "LT",
        "LTE",
        "GT",
        "GTE",
        "And",
        "Or",
    ]
)

# Calls stored lambda-first but written collection-first
REVERSED_ARGS = frozenset(["Filter", "Map", "Foreach"])


@lru_cache(maxsize=1024)
def resolve(key: str) -> str:
    """
    Map a call key to its display name.

    Example:
        >>> resolve("select_all")
        'SelectAll'
        >>> resolve("lte")
        'LTE'
    """
    if key in SPECIAL_CASES:
        return SPECIAL_CASES[key]
    return "".join(part[:1].upper() + part[1:] for part in key.split("_"))


def is_varargs(name: str) -> bool:
    return name in VARARGS


def reverses_args(name: str) -> bool:
    return name in REVERSED_ARGS
