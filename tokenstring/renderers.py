"""Renderers: the values bound to token names.

Every value bound to a template is wrapped once, when it is bound, in the
renderer for its kind:

- LiteralRenderer: strings, numbers and other plain values
- FunctionRenderer: callables, invoked as ``func(name, token, source)``
- ObjectRenderer: objects and mappings, read through the token's path
- TemplateRenderer: nested templates, rendered with the same data

Examples:
    >>> from tokenstring.tokens import Token
    >>> token = Token('user.name|upper', '{user.name|upper}')
    >>> make_renderer({'name': 'alice'}).render(token, {}, '{user.name|upper}')
    'ALICE'
"""

import logging
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from tokenstring.filters import apply_filters
from tokenstring.paths import PathNotFoundError, SCALAR_TYPES, walk_path
from tokenstring.tokens import Token

logger = logging.getLogger(__name__)


def has_own_str(value: Any) -> bool:
    """Whether ``value``'s class defines ``__str__`` rather than inheriting object's.

    >>> from decimal import Decimal
    >>> has_own_str(Decimal('1.5')), has_own_str({'a': 1}), has_own_str(object())
    (True, False, False)
    """
    return type(value).__str__ is not object.__str__


class TokenRenderer:
    """Base class for bound values."""

    def __init__(self, value: Any):
        self.value = value

    def resolve(
        self,
        token: Token,
        data: Dict[str, 'TokenRenderer'],
        source: str,
        visited: FrozenSet[int] = frozenset()
    ) -> Any:
        """Produce the raw replacement for ``token``, before filtering.

        Args:
            token: The placeholder being replaced
            data: The effective name -> renderer mapping of the render call
            source: The source being rendered
            visited: Ids of templates currently being rendered

        Returns:
            The replacement value
        """
        raise NotImplementedError

    def render(
        self,
        token: Token,
        data: Dict[str, 'TokenRenderer'],
        source: str,
        filters: Optional[Mapping[str, Callable]] = None,
        visited: FrozenSet[int] = frozenset()
    ) -> str:
        """Resolve ``token``, run its filter chain and return the string."""
        value = self.resolve(token, data, source, visited)
        return self.finish(token, value, filters)

    @staticmethod
    def finish(
        token: Token,
        value: Any,
        filters: Optional[Mapping[str, Callable]] = None
    ) -> str:
        if token.filters:
            value = apply_filters(value, token.filters, filters)
        return str(value)

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class LiteralRenderer(TokenRenderer):
    """A plain value, substituted as its string form."""

    def resolve(self, token, data, source, visited=frozenset()):
        return self.value


class FunctionRenderer(TokenRenderer):
    """A callable, invoked with ``(name, token, source)``.

    Whatever the callable raises propagates to the caller of render.

    >>> from tokenstring.tokens import Token
    >>> shout = FunctionRenderer(lambda name, token, source: name + '!')
    >>> shout.render(Token('hey', '{hey}'), {}, '{hey}')
    'hey!'
    """

    def resolve(self, token, data, source, visited=frozenset()):
        return self.value(token.name, token, source)


class ObjectRenderer(TokenRenderer):
    """An object read through the token's property path.

    Without a path, objects whose class defines its own ``__str__`` (dates,
    decimals, paths, enums) render as that string; other objects and
    mappings leave the placeholder unchanged. When the path can't be
    walked, the placeholder is also left unchanged and no filters run.

    >>> from datetime import date
    >>> from tokenstring.tokens import Token
    >>> ObjectRenderer(date(2016, 4, 16)).render(Token('when', '{when}'), {}, '{when}')
    '2016-04-16'
    >>> ObjectRenderer({'a': 1}).render(Token('obj', '{obj}'), {}, '{obj}')
    '{obj}'
    """

    def resolve(self, token, data, source, visited=frozenset()):
        if not token.path:
            if has_own_str(self.value):
                return self.value
            raise PathNotFoundError(f"No property path in {token.match}")
        return walk_path(self.value, token.path)

    def render(self, token, data, source, filters=None, visited=frozenset()):
        try:
            value = self.resolve(token, data, source, visited)
        except PathNotFoundError as e:
            logger.debug("Leaving %s unresolved: %s", token.match, e)
            return token.match
        return self.finish(token, value, filters)


class TemplateRenderer(TokenRenderer):
    """A nested template, rendered with the data of the enclosing render.

    The nested template's own data is used for names the enclosing data
    doesn't define. The nested template itself is never modified.
    """

    def resolve(self, token, data, source, visited=frozenset()):
        return self.value._render(data, visited)


def make_renderer(value: Any) -> TokenRenderer:
    """Wrap ``value`` in the renderer for its kind.

    Examples:
        >>> make_renderer('foo')
        LiteralRenderer('foo')
        >>> make_renderer(42)
        LiteralRenderer(42)
        >>> make_renderer({'a': 1})
        ObjectRenderer({'a': 1})
        >>> type(make_renderer(lambda name, token, source: name)).__name__
        'FunctionRenderer'
    """
    from tokenstring.template import Template

    if isinstance(value, TokenRenderer):
        return value
    if isinstance(value, Template):
        return TemplateRenderer(value)
    if isinstance(value, SCALAR_TYPES) or value is None:
        return LiteralRenderer(value)
    if callable(value):
        return FunctionRenderer(value)
    return ObjectRenderer(value)
