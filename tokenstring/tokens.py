"""Token parsing for template sources.

A token is one ``{selector}`` placeholder. The selector holds a name, an
optional dotted path and an optional filter chain:

    >>> token = Token('user.name|upper', '{user.name|upper}')
    >>> token.name, token.path, token.filters
    ('user', ('name',), ('upper',))
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from tokenstring.config import Config, DEFAULT_CONFIG

FILTER_SEPARATOR = '|'
PATH_SEPARATOR = '.'


@dataclass(frozen=True)
class Token:
    """One parsed placeholder occurrence.

    Attributes:
        selector: The captured inner content, e.g. ``user.name|upper``
        match: The full matched text, e.g. ``{user.name|upper}``
        name: The root identifier, e.g. ``user``
        path: Property names following the name, e.g. ``('name',)``
        filters: Filter identifiers in application order, e.g. ``('upper',)``
    """

    selector: str
    match: str
    name: str = field(init=False)
    path: Tuple[str, ...] = field(init=False)
    filters: Tuple[str, ...] = field(init=False)

    def __post_init__(self):
        # filters are split off first, so dots inside them never reach the path
        selector, *filters = self.selector.split(FILTER_SEPARATOR)
        name, *path = selector.split(PATH_SEPARATOR)
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'path', tuple(path))
        object.__setattr__(self, 'filters', tuple(f for f in filters if f))

    @property
    def dotted_path(self) -> Optional[str]:
        """The name and path joined back together, or None without a path.

        >>> Token('a.b.c', '{a.b.c}').dotted_path
        'a.b.c'
        >>> Token('a', '{a}').dotted_path is None
        True
        """
        if not self.path:
            return None
        return PATH_SEPARATOR.join((self.name,) + self.path)


def iter_tokens(source: str, config: Config = DEFAULT_CONFIG) -> Iterator[Token]:
    """Yield a Token for every placeholder in ``source``, left to right.

    >>> [t.match for t in iter_tokens('{a} and {b.c} and {a}')]
    ['{a}', '{b.c}', '{a}']
    """
    for m in config.token_regex.finditer(source):
        yield Token(m.group(1), m.group(0))


def parse_tokens(source: str, config: Config = DEFAULT_CONFIG) -> Dict[str, Token]:
    """Parse ``source`` into an ordered name -> Token mapping.

    Names keep the position of their first appearance; when a name repeats,
    the last occurrence's Token is kept.

    >>> tokens = parse_tokens('{a} {b} {a|upper}')
    >>> list(tokens)
    ['a', 'b']
    >>> tokens['a'].match
    '{a|upper}'
    """
    tokens: Dict[str, Token] = {}
    for token in iter_tokens(source, config):
        tokens[token.name] = token
    return tokens


def extract_token_names(source: str, config: Config = DEFAULT_CONFIG) -> List[str]:
    """Distinct token names in order of first appearance.

    >>> extract_token_names('/blog/{date}/posts/{slug}/')
    ['date', 'slug']
    >>> extract_token_names('no tokens here')
    []
    """
    return list(parse_tokens(source, config))
