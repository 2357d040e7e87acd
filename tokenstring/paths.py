"""Property-path walking for object-valued tokens.

A token such as ``{user.address.city}`` bound to an object walks the path
``('address', 'city')`` starting from that object. Each step reads a mapping
key, a sequence index or an attribute:

    >>> walk_path({'address': {'city': 'NYC'}}, ('address', 'city'))
    'NYC'
    >>> walk_path({'items': ['a', 'b']}, ('items', '1'))
    'b'
"""

from collections.abc import Mapping, Sequence
from typing import Any, Iterable

# Values a path can never step into
SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool)


class PathNotFoundError(Exception):
    """Raised when a property path can't be walked to the end."""
    pass


def is_navigable(obj: Any) -> bool:
    """Whether a path step can read properties from ``obj``.

    >>> is_navigable({'a': 1}), is_navigable('text'), is_navigable(None)
    (True, False, False)
    """
    return obj is not None and not isinstance(obj, SCALAR_TYPES)


def get_property(obj: Any, prop: str) -> Any:
    """Read a single property from ``obj``.

    Args:
        obj: A mapping, sequence or plain object
        prop: Key, index (as digits) or attribute name

    Raises:
        PathNotFoundError: If ``obj`` is not navigable or lacks ``prop``
    """
    if not is_navigable(obj):
        raise PathNotFoundError(
            f"Cannot read {prop!r} from {type(obj).__name__}"
        )

    if isinstance(obj, Mapping):
        try:
            return obj[prop]
        except KeyError:
            raise PathNotFoundError(f"Key not found: {prop!r}") from None

    if isinstance(obj, Sequence) and prop.lstrip('-').isdigit():
        try:
            return obj[int(prop)]
        except IndexError:
            raise PathNotFoundError(f"Index out of range: {prop}") from None

    try:
        return getattr(obj, prop)
    except AttributeError:
        raise PathNotFoundError(
            f"{type(obj).__name__} has no attribute {prop!r}"
        ) from None


def walk_path(obj: Any, path: Iterable[str]) -> Any:
    """Follow ``path`` from ``obj`` and return the value at its end.

    Raises:
        PathNotFoundError: If any step fails, or the path ends on None

    Examples:
        >>> class User:
        ...     name = 'Alice'
        >>> walk_path({'user': User()}, ['user', 'name'])
        'Alice'
        >>> walk_path({'user': User()}, ['user', 'name', 'first'])
        Traceback (most recent call last):
        ...
        tokenstring.paths.PathNotFoundError: Cannot read 'first' from str
    """
    current = obj
    for prop in path:
        current = get_property(current, prop)
    if current is None:
        raise PathNotFoundError("Path resolved to None")
    return current
