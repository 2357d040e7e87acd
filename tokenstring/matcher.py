"""Reverse matching with filters kept apart from the template.

A Matcher wraps a Template and holds its own filters and compiled pattern,
so several matchers can constrain the same template differently without
touching the template's own filters:

    >>> from tokenstring.template import Template
    >>> route = Template('/blog/{date}/posts/{slug}/')
    >>> strict = Matcher(route, {'date': r'\\d{4}-\\d{2}-\\d{2}'})
    >>> strict.match('/blog/2016-04-16/posts/hello/')
    {'date': '2016-04-16', 'slug': 'hello'}
    >>> strict.match('/blog/yesterday/posts/hello/') is None
    True
    >>> route.match('/blog/yesterday/posts/hello/')
    {'date': 'yesterday', 'slug': 'hello'}
"""

import logging
from typing import Any, Dict, Optional, Union

from tokenstring.compiler import CompiledPattern, Filter, PatternCompiler
from tokenstring.config import Config, DEFAULT_CONFIG
from tokenstring.template import Template

logger = logging.getLogger(__name__)


class Matcher:
    """Match strings against a template using independent filters.

    The compiled pattern is cached. It is rebuilt when the template's source
    or the matcher's filters change, or when a different source format is
    requested. Filters are copied into the pattern as they are, so filters
    from untrusted input can make matching backtrack catastrophically.

    Args:
        template: A Template, or a source string to build one from
        filters: Initial filters, by name or by position
        config: Configuration used when ``template`` is a string
    """

    def __init__(
        self,
        template: Union[Template, str],
        filters: Any = None,
        config: Config = DEFAULT_CONFIG
    ):
        self._filters: Dict[str, Filter] = {}
        self._cache = None
        self.set_template(template, config)
        if filters is not None:
            self.set_filter(filters)

    @property
    def template(self) -> Template:
        return self._template

    @property
    def filters(self) -> Dict[str, Filter]:
        return dict(self._filters)

    def set_template(self, template: Union[Template, str], config: Config = DEFAULT_CONFIG) -> 'Matcher':
        """Match against another template; filters are kept."""
        if not isinstance(template, Template):
            template = Template(template, config=config)
        self._template = template
        self._compiler = PatternCompiler(template.config)
        self._invalidate()
        return self

    def set_filter(self, name: Any, regex: Optional[Filter] = None, merge: bool = True) -> 'Matcher':
        """Set filters, as for ``Template.set_filter``.

        >>> matcher = Matcher('{year}/{month}').set_filter([r'\\d{4}', r'\\d{2}'])
        >>> matcher.filters
        {'year': '\\\\d{4}', 'month': '\\\\d{2}'}
        """
        if isinstance(name, str):
            values = {name: regex}
        else:
            values = self._template.make_associative(name)
            if not merge:
                self._filters = {}

        for key, item in values.items():
            if item is None:
                self._filters.pop(key, None)
            else:
                self._filters[key] = item
        self._invalidate()
        return self

    def clear_filters(self) -> 'Matcher':
        self._filters = {}
        self._invalidate()
        return self

    def _invalidate(self):
        self._cache = None

    def get_pattern(self, source_format: Optional[str] = None) -> CompiledPattern:
        """The compiled pattern for the template's current source."""
        template = self._template
        key = (template.source, source_format or template.config.source_format)
        if self._cache is None or self._cache[0] != key:
            if self._cache is not None:
                logger.debug("Recompiling matcher for %r", template.source)
            compiled = self._compiler.compile(
                template.source, template.tokens, self._filters, source_format
            )
            self._cache = (key, compiled)
        return self._cache[1]

    @property
    def pattern(self) -> CompiledPattern:
        return self.get_pattern()

    def match(self, input: str, source_format: Optional[str] = None) -> Optional[Dict[str, str]]:
        """Match ``input`` and extract the token values.

        Args:
            input: The string to match
            source_format: Overrides the configured format, e.g. ``source$``

        Returns:
            Name -> matched text (empty if the template has no tokens), or
            None when ``input`` doesn't match
        """
        return self.get_pattern(source_format).match(str(input))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._template.source!r}, {self._filters!r})"
