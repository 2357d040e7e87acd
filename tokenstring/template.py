"""The Template class: render a source string, or match strings against it.

A template is a source string containing ``{token}`` placeholders, the data
bound to its token names and, for matching, a filter pattern per token.

Examples:
    >>> template = Template('/blog/{date}/posts/{slug}/')
    >>> template.render({'date': '2016-04-16', 'slug': 'hello'})
    '/blog/2016-04-16/posts/hello/'
    >>> template.match('/blog/2016-04-16/posts/hello/')
    {'date': '2016-04-16', 'slug': 'hello'}
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from tokenstring.compiler import CompiledPattern, Filter, PatternCompiler
from tokenstring.config import Config, DEFAULT_CONFIG
from tokenstring.renderers import TokenRenderer, make_renderer
from tokenstring.tokens import Token, parse_tokens
from tokenstring.util import CycleError, is_positional, make_associative, merge_data

logger = logging.getLogger(__name__)


class Template:
    """A source string with tokens, bound data and match filters.

    Data values may be:

    - strings, numbers, or any value with a useful ``str()``
    - a callable ``func(name, token, source)`` returning the replacement
    - an object or mapping, read by tokens with a path (``{user.name}``);
      objects with their own ``__str__`` also render without a path
    - another Template, rendered with the same data

    Tokens with no data are left in place, so a template can be rendered in
    stages:

        >>> template = Template('{foo} {bar} {baz}', {'foo': 'foo', 'bar': 'bar'})
        >>> template.render()
        'foo bar {baz}'
        >>> template.resolve().source
        'foo bar {baz}'
        >>> [template.render({'baz': n}) for n in (1, 2, 3)]
        ['foo bar 1', 'foo bar 2', 'foo bar 3']

    A Template is not thread-safe: changing its source, data or filters
    while another thread renders or matches needs external locking.

    Args:
        source: The source string
        data: Initial data, by name or by position
        filters: Initial match filters, by name or by position
        config: Token syntax and source-format configuration
    """

    def __init__(
        self,
        source: str = '',
        data: Any = None,
        filters: Any = None,
        config: Config = DEFAULT_CONFIG
    ):
        self.config = config
        self._compiler = PatternCompiler(config)
        self._source = ''
        self._tokens: Dict[str, Token] = {}
        self._data: Dict[str, TokenRenderer] = {}
        self._filters: Dict[str, Filter] = {}
        self._pattern = None

        self.set_source(source)
        if data is not None:
            self.set_data(data)
        if filters is not None:
            self.set_filter(filters)

    # ------------------------------------------------------------------
    # Accessors

    @property
    def source(self) -> str:
        return self._source

    @source.setter
    def source(self, source: str):
        self.set_source(source)

    @property
    def tokens(self) -> Dict[str, Token]:
        """Name -> Token, in order of first appearance."""
        return dict(self._tokens)

    @property
    def data(self) -> Dict[str, TokenRenderer]:
        """Name -> renderer for the bound data."""
        return dict(self._data)

    @property
    def filters(self) -> Dict[str, Filter]:
        """Name -> regex used for the token's content when matching."""
        return dict(self._filters)

    @property
    def value(self) -> str:
        """The source rendered with the bound data."""
        return self.render()

    def set_source(self, source: str) -> 'Template':
        """Set the source string and re-parse its tokens."""
        self._source = str(source)
        self._tokens = parse_tokens(self._source, self.config)
        self._invalidate()
        return self

    def set_data(self, name: Any, value: Any = None, merge: bool = True) -> 'Template':
        """Bind data to token names.

        Pass in a name and a value, or a mapping or positional sequence of
        values. A value of None removes the name's data. With ``merge=False``
        a mapping replaces all bound data.

        Examples:
            >>> template = Template('{a} {b}').set_data(['x', 'y'])
            >>> template.render()
            'x y'
            >>> template.set_data('b', None).render()
            'x {b}'
        """
        if isinstance(name, str):
            values = {name: value}
        else:
            values = self.make_associative(name)
            if not merge:
                self._data = {}

        for key, item in values.items():
            if item is None:
                self._data.pop(key, None)
            else:
                self._data[key] = make_renderer(item)
        return self

    def set_filter(self, name: Any, regex: Optional[Filter] = None, merge: bool = True) -> 'Template':
        """Set match filters for individual tokens.

        Pass in a name and a regex, or a mapping or positional sequence of
        regexes. A regex of None removes the name's filter. Don't include
        delimiters or capturing parentheses; they are added when compiling.

        Filters are copied into the compiled pattern as they are. Don't take
        them from untrusted input: a pathological pattern can make matching
        take exponential time.
        """
        if isinstance(name, str):
            values = {name: regex}
        else:
            values = self.make_associative(name)
            if not merge:
                self._filters = {}

        for key, item in values.items():
            if item is None:
                self._filters.pop(key, None)
            else:
                self._filters[key] = item
        self._invalidate()
        return self

    def clear_filters(self) -> 'Template':
        self._filters = {}
        self._invalidate()
        return self

    def make_associative(self, values: Any) -> Dict[str, Any]:
        """Bind positional ``values`` to this template's token names.

        >>> Template('{foo} {bar}').make_associative(['x'])
        {'foo': 'x'}
        """
        return make_associative(values, self._tokens)

    def missing(self, *args: Any, **kwargs: Any) -> List[str]:
        """Token names that would be left unresolved by ``render``.

        >>> Template('{a} {b} {c}', ['x']).missing({'c': 'z'})
        ['b']
        """
        data = merge_data(self._data, self._override(args, kwargs))
        return [name for name in self._tokens if name not in data]

    # ------------------------------------------------------------------
    # Rendering

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render the source, without changing it.

        With no arguments the bound data is used. Otherwise the given data,
        a mapping, a sequence, one or more positional values or keywords,
        is merged over the bound data.

        Examples:
            >>> template = Template('{foo} {bar}')
            >>> template.render(['foo', 'bar'])
            'foo bar'
            >>> template.render('foo', 'bar')
            'foo bar'
            >>> template.render(bar='baz')
            '{foo} baz'
            >>> template.render(5)
            '5 {bar}'
        """
        return self._render(self._override(args, kwargs))

    def resolve(self, prune: bool = False) -> 'Template':
        """Render with the bound data and keep the result as the new source.

        Placeholders produced by the data become tokens of the new source.

        Args:
            prune: Drop data whose name is no longer a token

        Returns:
            This template
        """
        self.set_source(self._render({}))
        if prune:
            self._data = {
                name: renderer
                for name, renderer in self._data.items()
                if name in self._tokens
            }
        logger.debug("Resolved to %r, %d tokens left", self._source, len(self._tokens))
        return self

    def chain(self, *args: Any, **kwargs: Any) -> 'Template':
        """Render, then keep the result as the new source.

        Use this when the data itself produces further tokens, to be filled
        in by a later pass.

        >>> Template('{greeting}').chain(greeting='Hello {name}').render(name='Bob')
        'Hello Bob'
        """
        return self.set_source(self.render(*args, **kwargs))

    def _override(self, args: tuple, kwargs: Dict[str, Any]) -> Dict[str, TokenRenderer]:
        if len(args) == 1 and (isinstance(args[0], Mapping) or is_positional(args[0])):
            values = self.make_associative(args[0])
        else:
            values = self.make_associative(list(args))
        values.update(kwargs)
        return {
            name: make_renderer(value)
            for name, value in values.items()
            if value is not None
        }

    def _render(self, data: Dict[str, TokenRenderer], visited=frozenset()) -> str:
        """Substitute the tokens that have data, one name at a time.

        Names are processed in order of first appearance. Each pass replaces
        every placeholder of one name in the working copy of the source, so
        a value may produce placeholders for names processed later. Renderers
        receive the working copy as it stands before their pass.

        ``data`` takes precedence over the bound data.
        """
        if id(self) in visited:
            raise CycleError(f"Template {self._source!r} is nested inside itself")
        visited = visited | {id(self)}

        data = merge_data(self._data, data)
        filters = self.config.filter_functions
        working = self._source

        for name in self._tokens:
            renderer = data.get(name)
            if renderer is None:
                continue
            current = working

            def replace(m) -> str:
                token = Token(m.group(1), m.group(0))
                if token.name != name:
                    return token.match
                return renderer.render(token, data, current, filters, visited)

            working = self.config.token_regex.sub(replace, working)

        return working

    # ------------------------------------------------------------------
    # Matching

    def _invalidate(self):
        if self._pattern is not None:
            logger.debug("Dropping compiled pattern for %r", self._source)
        self._pattern = None

    def get_pattern(self, source_format: Optional[str] = None) -> CompiledPattern:
        """The compiled pattern for the source and filters, cached.

        Args:
            source_format: Overrides the configured format, e.g. ``^source``
        """
        key = source_format or self.config.source_format
        if self._pattern is None or self._pattern[0] != key:
            compiled = self._compiler.compile(
                self._source, self._tokens, self._filters, source_format
            )
            self._pattern = (key, compiled)
        return self._pattern[1]

    @property
    def pattern(self) -> CompiledPattern:
        return self.get_pattern()

    def match(self, input: str, source_format: Optional[str] = None) -> Optional[Dict[str, str]]:
        """Match ``input`` against the template and extract token values.

        Returns:
            Name -> matched text, or None if ``input`` doesn't match

        Examples:
            >>> template = Template('a.b{x}')
            >>> template.match('a.b5')
            {'x': '5'}
            >>> template.match('acb5') is None
            True
            >>> Template('/foo/bar/').match('/foo/bar/etc/', '^source')
            {}
        """
        return self.get_pattern(source_format).match(str(input))

    def matcher(self, filters: Any = None) -> 'Matcher':
        """A Matcher for this template with its own filters."""
        from tokenstring.matcher import Matcher

        return Matcher(self, filters)

    # ------------------------------------------------------------------
    # Utilities

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source!r})"
