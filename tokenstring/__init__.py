"""Render strings from ``{token}`` templates, and match strings against them.

This package provides a bidirectional string-template engine, supporting:
- Literal, callable, object-path and nested-template values
- Filter chains ({name|strip|upper})
- Staged rendering (unresolved tokens are left in place)
- Reverse matching, with per-token regex filters and safe literal escaping
- Configurable token syntax and source anchoring

Basic usage:
    >>> from tokenstring import Template
    >>> template = Template('/blog/{date}/posts/{slug}/')
    >>> template.render(['2016-04-16', 'hello'])
    '/blog/2016-04-16/posts/hello/'
    >>> template.match('/blog/2016-04-16/posts/hello/')
    {'date': '2016-04-16', 'slug': 'hello'}

Advanced usage:
    >>> from tokenstring import Matcher
    >>> matcher = Matcher(template, {'date': r'\\d{4}-\\d{2}-\\d{2}', 'slug': r'[a-z][\\w-]+'})
    >>> matcher.match('/blog/9999-99-99/media/yet-another-article/') is None
    True
    >>> Template('{user.name|upper}', {'user': {'name': 'alice'}}).render()
    'ALICE'
"""

from tokenstring.template import Template
from tokenstring.matcher import Matcher

from tokenstring.config import (
    Config,
    DEFAULT_CONFIG,
    ConfigurationError,
)

from tokenstring.tokens import (
    Token,
    iter_tokens,
    parse_tokens,
    extract_token_names,
)

from tokenstring.compiler import (
    PatternCompiler,
    CompiledPattern,
    quote,
)

from tokenstring.renderers import (
    TokenRenderer,
    LiteralRenderer,
    FunctionRenderer,
    ObjectRenderer,
    TemplateRenderer,
    make_renderer,
)

from tokenstring.filters import (
    FILTERS,
    apply_filters,
    UnknownFilterError,
)

from tokenstring.paths import (
    walk_path,
    PathNotFoundError,
)

from tokenstring.util import (
    make_associative,
    is_positional,
    CycleError,
)

__version__ = "0.1.0"  # Keep in sync with package version

__all__ = [
    # Core classes
    "Template",
    "Matcher",
    # Configuration
    "Config",
    "DEFAULT_CONFIG",
    # Tokens
    "Token",
    "iter_tokens",
    "parse_tokens",
    "extract_token_names",
    # Pattern compilation
    "PatternCompiler",
    "CompiledPattern",
    "quote",
    # Renderers
    "TokenRenderer",
    "LiteralRenderer",
    "FunctionRenderer",
    "ObjectRenderer",
    "TemplateRenderer",
    "make_renderer",
    # Filters and paths
    "FILTERS",
    "apply_filters",
    "walk_path",
    # Utilities
    "make_associative",
    "is_positional",
    # Exceptions
    "ConfigurationError",
    "UnknownFilterError",
    "PathNotFoundError",
    "CycleError",
]
