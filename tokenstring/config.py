"""Configuration for token recognition and source matching.

A ``Config`` is an immutable value object. Build one (or derive one from
``DEFAULT_CONFIG``) and pass it to the templates and matchers that need it:

    >>> config = DEFAULT_CONFIG.with_source('^source')
    >>> config.source_expression
    '~^source~i'
    >>> config.with_delimiter('!').token_expression
    '!{([a-z][.\\\\w]*(?:\\\\|[|\\\\w]+)?)}!i'
"""

import logging
import re
from dataclasses import dataclass, field, replace as replace_fields
from functools import cached_property
from typing import Any, Callable, Dict, Mapping

from tokenstring.filters import FILTERS

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = '~'
DEFAULT_TOKEN_PATTERN = r'{([a-z][.\w]*(?:\|[|\w]+)?)}'
DEFAULT_SOURCE_FORMAT = '^source$'
SOURCE_PLACEHOLDER = 'source'

# Mode modifiers accepted in place of Python flags
MODIFIER_FLAGS = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'u': re.UNICODE,
}


class ConfigurationError(Exception):
    """Raised when a token pattern, source format or delimiter is invalid."""
    pass


def modifier_flags(modifier: str) -> int:
    """Convert a mode modifier string such as ``'im'`` to ``re`` flags.

    >>> modifier_flags('i') == re.IGNORECASE
    True
    >>> modifier_flags('')
    0
    """
    flags = 0
    for char in modifier:
        try:
            flags |= MODIFIER_FLAGS[char]
        except KeyError:
            raise ConfigurationError(
                f"Unknown mode modifier {char!r} in {modifier!r}"
            )
    return int(flags)


def _has_anchor(pattern: str) -> bool:
    """Whether ``pattern`` contains ``^``, ``$``, ``\\A`` or ``\\Z`` outside a class.

    >>> _has_anchor('{([a-z]+)}|^x')
    True
    >>> _has_anchor('{([^}]+)}\\\\$')
    False
    """
    in_class = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == '\\':
            if not in_class and pattern[i + 1:i + 2] in ('A', 'Z', 'z'):
                return True
            i += 2
            continue
        if in_class:
            if char == ']':
                in_class = False
        elif char == '[':
            in_class = True
            # a leading ^ negates, a leading ] is literal
            if pattern[i + 1:i + 2] == '^':
                i += 1
            if pattern[i + 1:i + 2] == ']':
                i += 1
        elif char in '^$':
            return True
        i += 1
    return False


@dataclass(frozen=True)
class Config:
    """Delimiter, token-recognition pattern and source-wrap format.

    Args:
        delimiter: Single character used to delimit exported expressions
        token_pattern: Regex matching one ``{token}``; exactly one capturing
            group (the selector) and no anchors
        token_modifier: Mode modifiers for the token pattern
        source_format: Regex wrapped around compiled sources; must contain
            the word ``source`` exactly once
        source_modifier: Mode modifiers for compiled source patterns
        filter_functions: Registry of named filters usable as ``{name|filter}``

    Raises:
        ConfigurationError: If any of the above constraints is violated

    Examples:
        >>> Config(token_pattern='{[a-z]+}')
        Traceback (most recent call last):
        ...
        tokenstring.config.ConfigurationError: Token pattern MUST contain exactly one capturing group: '{[a-z]+}'
    """

    delimiter: str = DEFAULT_DELIMITER
    token_pattern: str = DEFAULT_TOKEN_PATTERN
    token_modifier: str = 'i'
    source_format: str = DEFAULT_SOURCE_FORMAT
    source_modifier: str = 'i'
    filter_functions: Mapping[str, Callable] = field(
        default_factory=lambda: dict(FILTERS), hash=False, repr=False
    )

    def __post_init__(self):
        self._check_delimiter()
        self._check_token_pattern()
        self._check_source_format()
        modifier_flags(self.source_modifier)

    def _check_delimiter(self):
        delimiter = self.delimiter
        if not isinstance(delimiter, str) or len(delimiter) != 1:
            raise ConfigurationError(
                f"Delimiter must be a single character: {delimiter!r}"
            )
        if delimiter.isalnum() or delimiter.isspace() or delimiter == '\\':
            raise ConfigurationError(
                f"Delimiter must not be alphanumeric, backslash or whitespace: {delimiter!r}"
            )

    def _check_token_pattern(self):
        pattern = self.token_pattern
        if _has_anchor(pattern):
            raise ConfigurationError(
                f"Token pattern MUST NOT contain anchors: {pattern!r}"
            )
        try:
            compiled = re.compile(pattern, modifier_flags(self.token_modifier))
        except re.error as e:
            raise ConfigurationError(f"Invalid token pattern {pattern!r}: {e}")
        if compiled.groups != 1:
            raise ConfigurationError(
                f"Token pattern MUST contain exactly one capturing group: {pattern!r}"
            )

    def _check_source_format(self):
        count = self.source_format.count(SOURCE_PLACEHOLDER)
        if count != 1:
            raise ConfigurationError(
                f'Source format MUST contain the string "{SOURCE_PLACEHOLDER}" '
                f"exactly once: {self.source_format!r}"
            )

    @cached_property
    def token_regex(self) -> 're.Pattern[str]':
        """The compiled token-recognition pattern."""
        return re.compile(self.token_pattern, modifier_flags(self.token_modifier))

    @cached_property
    def source_flags(self) -> int:
        """``re`` flags for compiled source patterns."""
        return modifier_flags(self.source_modifier)

    @property
    def token_expression(self) -> str:
        """The token pattern in delimited form, e.g. ``~{(...)}~i``."""
        return self.make(self.token_pattern, self.delimiter, self.token_modifier)

    @property
    def source_expression(self) -> str:
        """The source format in delimited form, e.g. ``~^source$~i``."""
        return self.make(self.source_format, self.delimiter, self.source_modifier)

    @staticmethod
    def make(value: str, delimiter: str = DEFAULT_DELIMITER, modifier: str = '') -> str:
        """Wrap a pattern in delimiters and append its modifiers.

        >>> Config.make('^source$', '!', 'i')
        '!^source$!i'
        """
        return f'{delimiter}{value}{delimiter}{modifier}'

    def replace(self, **changes: Any) -> 'Config':
        """Return a new, validated Config with the given fields changed."""
        config = replace_fields(self, **changes)
        logger.debug("Derived config with %s", sorted(changes))
        return config

    def with_delimiter(self, delimiter: str) -> 'Config':
        return self.replace(delimiter=delimiter)

    def with_token(self, pattern: str, modifier: str = '') -> 'Config':
        """Return a Config recognizing tokens with ``pattern``.

        The pattern must not include anchors, must capture the selector in its
        only group and must escape reserved characters of the token markers:

            ``([a-z]+)``     matches ``token``
            ``{([a-z]+)}``   matches ``{token}``
            ``\\$\\{([a-z]+)}`` matches ``${token}``
        """
        return self.replace(token_pattern=pattern, token_modifier=modifier)

    def with_source(self, source_format: str, modifier: str = 'i') -> 'Config':
        """Return a Config wrapping compiled sources in ``source_format``.

            ``^source$``  must match the entire string (the default)
            ``^source``   must match the start of the string
            ``source$``   must match the end of the string
            ``source``    must match part of the string
        """
        return self.replace(source_format=source_format, source_modifier=modifier)

    def with_filters(self, **functions: Callable) -> 'Config':
        """Return a Config whose filter registry also holds ``functions``."""
        registry: Dict[str, Callable] = dict(self.filter_functions)
        registry.update(functions)
        return self.replace(filter_functions=registry)


DEFAULT_CONFIG = Config()
