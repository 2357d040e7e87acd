"""Compilation of template sources into matching patterns.

The compiled pattern must match the literal text of a template exactly while
letting each token match either ``.*`` or a caller-supplied filter pattern.
Escaping the whole source would also escape the filters, and escaping only
the literal text by searching for it is fragile, so compilation works on an
index-based split of the source:

1. the source is split into literal segments and token slots, one slot per
   placeholder occurrence, each referring to its token by index
2. literal segments are quoted for use in a regex
3. token slots are replaced by a group around the token's filter; the first
   occurrence of a token captures, later occurrences with the same text
   back-reference that capture, and other occurrences of the same name only
   match the filter
4. the body is wrapped in the configured source format (``^source$``)

Examples:
    >>> compiled = PatternCompiler().compile('a.b{x}', {'x': Token('x', '{x}')})
    >>> compiled.expression
    '^a\\\\.b(?P<_tok0_>.*)$'
    >>> compiled.match('a.b5')
    {'x': '5'}
    >>> compiled.match('acb5') is None
    True
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from tokenstring.config import (
    Config, ConfigurationError, DEFAULT_CONFIG, SOURCE_PLACEHOLDER,
)
from tokenstring.tokens import Token

logger = logging.getLogger(__name__)

DEFAULT_FILTER = '.*'

# Slot kinds
CAPTURE = 'capture'
BACKREF = 'backref'
GROUP = 'group'

Filter = Union[str, 're.Pattern[str]']

# Flags of compiled filters that can be scoped to the filter's group
INLINE_FLAGS = (
    (re.IGNORECASE, 'i'),
    (re.MULTILINE, 'm'),
    (re.DOTALL, 's'),
    (re.VERBOSE, 'x'),
)


class Slot(NamedTuple):
    """A placeholder occurrence in a split source."""
    index: int
    name: str
    kind: str


def group_name(index: int) -> str:
    """
    >>> group_name(3)
    '_tok3_'
    """
    return f'_tok{index}_'


def quote(text: str, delimiter: Optional[str] = None) -> str:
    """Escape ``text`` for literal use in a regex.

    With a delimiter, occurrences of it are escaped as well, so the result is
    safe inside a delimited expression such as ``~...~``.

    >>> quote('a.b/c')
    'a\\\\.b/c'
    >>> quote('a.b/c', '/')
    'a\\\\.b\\\\/c'
    """
    escaped = re.escape(text)
    if delimiter and re.escape(delimiter) == delimiter:
        escaped = escaped.replace(delimiter, '\\' + delimiter)
    return escaped


def escape_delimiter(pattern: str, delimiter: str) -> str:
    """Escape unescaped ``delimiter`` characters inside a filter pattern.

    >>> escape_delimiter('[a-z~]+', '~')
    '[a-z\\\\~]+'
    >>> escape_delimiter('a\\\\~b', '~')
    'a\\\\~b'
    """
    return re.sub(
        r'(?<!\\)' + re.escape(delimiter),
        lambda m: '\\' + delimiter,
        pattern,
    )


def _filter_text(value: Filter) -> str:
    """Pattern text of a filter; a compiled pattern keeps its i, m, s and x flags.

    >>> _filter_text(re.compile('abc', re.I | re.S))
    '(?is:abc)'
    >>> _filter_text(re.compile('abc'))
    'abc'
    """
    if isinstance(value, re.Pattern):
        flags = ''.join(
            letter for flag, letter in INLINE_FLAGS if value.flags & flag
        )
        if flags:
            return f'(?{flags}:{value.pattern})'
        return value.pattern
    return value


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled source pattern and the token names its groups capture.

    Attributes:
        regex: The compiled Python pattern
        expression: The pattern text, wrapped in the source format
        delimited: The pattern in delimited form, e.g. ``~^...$~i``
        names: Token names; name ``i`` is captured by ``group_name(i)``
    """

    regex: 're.Pattern[str]'
    expression: str
    delimited: str
    names: Tuple[str, ...]

    def match(self, text: str) -> Optional[Dict[str, str]]:
        """Match ``text`` and return the captured token values.

        Returns:
            A name -> value dict (empty when there are no tokens), or None
            when ``text`` doesn't match
        """
        m = self.regex.search(text)
        if m is None:
            return None
        groups = m.groupdict()
        return {
            name: groups[group_name(index)]
            for index, name in enumerate(self.names)
            if group_name(index) in groups
        }

    def __str__(self) -> str:
        return self.delimited


class PatternCompiler:
    """Builds matching patterns for template sources.

    Args:
        config: Supplies the token pattern, source format and delimiter
    """

    def __init__(self, config: Config = DEFAULT_CONFIG):
        self.config = config

    def split(self, source: str, tokens: Mapping[str, Token]) -> List[Union[str, Slot]]:
        """Split ``source`` into literal strings and token slots.

        Placeholders whose name isn't in ``tokens`` stay literal text.

        >>> from tokenstring.tokens import parse_tokens
        >>> source = '/{a}/{b}/{a}'
        >>> PatternCompiler().split(source, parse_tokens(source))
        ['/', Slot(index=0, name='a', kind='capture'), '/', Slot(index=1, name='b', kind='capture'), '/', Slot(index=0, name='a', kind='backref')]
        """
        indices = {name: index for index, name in enumerate(tokens)}
        first_match: Dict[str, str] = {}
        segments: List[Union[str, Slot]] = []
        position = 0

        for m in self.config.token_regex.finditer(source):
            token = Token(m.group(1), m.group(0))
            if token.name not in indices:
                continue
            if m.start() > position:
                segments.append(source[position:m.start()])
            position = m.end()

            if token.name not in first_match:
                first_match[token.name] = token.match
                kind = CAPTURE
            elif first_match[token.name] == token.match:
                kind = BACKREF
            else:
                kind = GROUP
            segments.append(Slot(indices[token.name], token.name, kind))

        if position < len(source):
            segments.append(source[position:])
        return segments

    def assemble(
        self,
        segments: List[Union[str, Slot]],
        filters: Optional[Mapping[str, Filter]] = None,
        delimiter: Optional[str] = None
    ) -> str:
        """Join split segments into a pattern body.

        Args:
            segments: Output of ``split``
            filters: Token name -> regex for the token's content
            delimiter: When given, escape it in literal text and filters
        """
        filters = filters or {}
        parts = []
        for segment in segments:
            if isinstance(segment, str):
                parts.append(quote(segment, delimiter))
                continue

            group = group_name(segment.index)
            if segment.kind == BACKREF:
                parts.append(f'(?P={group})')
                continue

            pattern = _filter_text(filters.get(segment.name) or DEFAULT_FILTER)
            if delimiter:
                pattern = escape_delimiter(pattern, delimiter)
            if segment.kind == CAPTURE:
                parts.append(f'(?P<{group}>{pattern})')
            else:
                parts.append(f'(?:{pattern})')
        return ''.join(parts)

    def wrap(self, body: str, source_format: Optional[str] = None) -> str:
        """Embed ``body`` in the source format.

        >>> PatternCompiler().wrap('abc', '^source')
        '^abc'
        """
        source_format = source_format or self.config.source_format
        if source_format.count(SOURCE_PLACEHOLDER) != 1:
            raise ConfigurationError(
                f'Source format MUST contain the string "{SOURCE_PLACEHOLDER}" '
                f"exactly once: {source_format!r}"
            )
        return source_format.replace(SOURCE_PLACEHOLDER, body)

    def compile(
        self,
        source: str,
        tokens: Mapping[str, Token],
        filters: Optional[Mapping[str, Filter]] = None,
        source_format: Optional[str] = None
    ) -> CompiledPattern:
        """Compile a template source into a matching pattern.

        Filter patterns are used verbatim, so a malformed or adversarial
        filter can make matching backtrack catastrophically. Don't compile
        filters taken from untrusted input.

        Args:
            source: The template source
            tokens: The source's name -> Token mapping
            filters: Token name -> regex for the token's content (default ``.*``)
            source_format: Overrides the configured source format

        Returns:
            CompiledPattern

        Raises:
            ConfigurationError: If ``source_format`` lacks ``source``
            re.error: If a filter pattern is not a valid regex
        """
        config = self.config
        segments = self.split(source, tokens)

        expression = self.wrap(self.assemble(segments, filters), source_format)
        delimited = config.make(
            self.wrap(self.assemble(segments, filters, config.delimiter), source_format),
            config.delimiter,
            config.source_modifier,
        )
        regex = re.compile(expression, config.source_flags)
        logger.debug("Compiled %r to %s", source, delimited)

        return CompiledPattern(
            regex=regex,
            expression=expression,
            delimited=delimited,
            names=tuple(tokens),
        )
