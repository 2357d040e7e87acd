"""Utility functions for tokenstring: positional data and cycle detection."""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterable


class CycleError(Exception):
    """Raised when a nested template refers back to itself."""
    pass


def is_positional(values: Any) -> bool:
    """Whether ``values`` binds by position rather than by name.

    Lists and tuples are positional; so is a mapping whose keys are exactly
    ``0..n-1``. Any string key makes a mapping named.

    Examples:
        >>> is_positional(['a', 'b'])
        True
        >>> is_positional({0: 'a', 1: 'b'})
        True
        >>> is_positional({'foo': 'a', 1: 'b'})
        False
        >>> is_positional('ab')
        False
    """
    if isinstance(values, Mapping):
        keys = list(values)
        return bool(keys) and all(
            isinstance(k, int) and not isinstance(k, bool) for k in keys
        ) and sorted(keys) == list(range(len(keys)))
    return isinstance(values, Sequence) and not isinstance(values, (str, bytes))


def make_associative(values: Any, names: Iterable[str]) -> Dict[str, Any]:
    """Convert positional ``values`` to a name-keyed dict.

    Values are zipped against ``names`` in order; the output is clipped to
    the shorter of the two. Named mappings pass through unchanged.

    Args:
        values: A named mapping, a positional sequence, or None
        names: Token names in order of first appearance

    Returns:
        Dictionary of name -> value

    Raises:
        TypeError: If ``values`` is neither a mapping nor a sequence

    Examples:
        >>> make_associative(['x', 'y'], ['a', 'b', 'c'])
        {'a': 'x', 'b': 'y'}
        >>> make_associative(['x', 'y', 'z'], ['a'])
        {'a': 'x'}
        >>> make_associative({'b': 1}, ['a', 'b'])
        {'b': 1}
    """
    if values is None:
        return {}

    if is_positional(values):
        if isinstance(values, Mapping):
            values = [values[i] for i in range(len(values))]
        return dict(zip(names, values))

    if isinstance(values, Mapping):
        return dict(values)

    raise TypeError(
        f"Expected a mapping or a sequence of values, got {type(values).__name__}"
    )


def merge_data(*mappings: Mapping) -> Dict[str, Any]:
    """Merge mappings left to right; later ones take precedence.

    >>> merge_data({'a': 1, 'b': 2}, {'b': 3})
    {'a': 1, 'b': 3}
    """
    merged: Dict[str, Any] = {}
    for mapping in mappings:
        merged.update(mapping)
    return merged

