"""Named filters applied to resolved token values.

A token may carry a filter chain, as in ``{title|strip|slug}``. Each filter
receives the value produced by the previous step and returns a new value:

    >>> apply_filters('  Hello World ', ('strip', 'slug'))
    'hello-world'
"""

import re
from typing import Any, Callable, Dict, Iterable, Mapping, Optional
from urllib.parse import quote


class UnknownFilterError(KeyError):
    """Raised when a token names a filter that is not registered."""
    pass


def slug(value: Any) -> str:
    """Lowercase, hyphen-separated form of a value.

    >>> slug('Yet Another  Article!')
    'yet-another-article'
    """
    text = re.sub(r'[^\w\s-]', '', str(value)).strip().lower()
    return re.sub(r'[\s_-]+', '-', text)


def snake(value: Any) -> str:
    """
    >>> snake('yetAnother Article')
    'yet_another_article'
    """
    text = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', str(value))
    return re.sub(r'[\s-]+', '_', text.strip()).lower()


def camel(value: Any) -> str:
    """
    >>> camel('yet-another article')
    'yetAnotherArticle'
    """
    words = [word for word in re.split(r'[\s_-]+', str(value).strip()) if word]
    if not words:
        return ''
    return words[0].lower() + ''.join(word.capitalize() for word in words[1:])


FILTERS: Dict[str, Callable[[Any], Any]] = {
    'upper': lambda value: str(value).upper(),
    'lower': lambda value: str(value).lower(),
    'title': lambda value: str(value).title(),
    'capitalize': lambda value: str(value).capitalize(),
    'strip': lambda value: str(value).strip(),
    'slug': slug,
    'snake': snake,
    'camel': camel,
    'urlencode': lambda value: quote(str(value), safe=''),
    'length': lambda value: len(str(value)),
}


def get_filter(
    name: Any,
    registry: Optional[Mapping[str, Callable]] = None
) -> Callable[[Any], Any]:
    """Look up a filter by name; callables are returned as they are.

    Raises:
        UnknownFilterError: If ``name`` is not in the registry
    """
    if callable(name):
        return name
    registry = FILTERS if registry is None else registry
    try:
        return registry[name]
    except KeyError:
        raise UnknownFilterError(f"Unknown filter: {name}") from None


def apply_filters(
    value: Any,
    filters: Iterable[Any],
    registry: Optional[Mapping[str, Callable]] = None
) -> Any:
    """Apply each filter in order, feeding each result to the next.

    >>> apply_filters('abc', ('upper', 'length'))
    3
    """
    for name in filters:
        value = get_filter(name, registry)(value)
    return value
