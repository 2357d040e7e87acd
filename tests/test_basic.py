"""Basic tests for tokenstring rendering."""

import pytest
from tokenstring import Template


def test_basic_string():
    """Test a single token replaced by a string."""
    assert Template('{string}', {'string': 'foo'}).value == 'foo'


def test_multi_string():
    """Test several tokens in one source."""
    data = {'foo': 'foo', 'bar': 'bar', 'baz': 'baz'}
    assert Template('{foo} {bar} {baz}', data).value == 'foo bar baz'


def test_numbers_are_stringified():
    """Test that non-string literals render as their str()."""
    template = Template('port={port} ratio={ratio}')
    assert template.render({'port': 8000, 'ratio': 0.5}) == 'port=8000 ratio=0.5'


def test_render_empty_data_returns_source():
    """Test that rendering with no data leaves the source unchanged."""
    template = Template('/blog/{date}/posts/{slug}/')
    assert template.render({}) == '/blog/{date}/posts/{slug}/'
    assert template.render() == '/blog/{date}/posts/{slug}/'


def test_partial_render():
    """Test that tokens without data are left in place."""
    template = Template('{foo} {bar} {baz}')
    assert template.render({'foo': 'foo', 'bar': 'bar'}) == 'foo bar {baz}'


def test_render_does_not_change_source():
    """Test that render leaves source and tokens alone."""
    template = Template('{foo} {bar}', {'foo': 'x'})
    template.render()
    template.render({'bar': 'y'})
    assert template.source == '{foo} {bar}'
    assert list(template.tokens) == ['foo', 'bar']


def test_override_takes_precedence():
    """Test that data passed to render wins over bound data."""
    template = Template('{foo}', {'foo': 'bound'})
    assert template.render({'foo': 'passed'}) == 'passed'
    assert template.render() == 'bound'


def test_make_associative():
    """Test positional values bound to token names."""
    assert Template('{foo}').make_associative(['foo']) == {'foo': 'foo'}


def test_constructor_positional_data():
    """Test positional data passed to the constructor."""
    assert Template('{string}', ['foo']).value == 'foo'


def test_positional_truncation():
    """Test that too few positional values leave later tokens unresolved."""
    template = Template('{a} {b} {c}', ['x', 'y'])
    assert template.render() == 'x y {c}'


def test_positional_extra_values_discarded():
    """Test that extra positional values are ignored."""
    assert Template('{a}').render(['x', 'y', 'z']) == 'x'


def test_render_accepts_sequence():
    """Test render with a list of values."""
    assert Template('{foo} {bar}').render(['foo', 'bar']) == 'foo bar'


def test_render_accepts_variable_parameters():
    """Test render with several positional arguments."""
    assert Template('{foo} {bar}').render('foo', 'bar') == 'foo bar'


def test_render_accepts_keywords():
    """Test render with keyword arguments."""
    assert Template('{foo} {bar}').render(foo='a', bar='b') == 'a b'


def test_integer_keyed_mapping_is_positional():
    """Test that a mapping keyed 0..n-1 binds by position."""
    assert Template('{foo} {bar}').render({0: 'a', 1: 'b'}) == 'a b'


def test_render_no_parameters_uses_bound_data():
    """Test render() with partially bound positional data."""
    template = Template('{foo} {bar}', ['foo'])
    assert template.render() == 'foo {bar}'


def test_set_data_name_and_value():
    """Test set_data with a name and a value, then removal with None."""
    template = Template('{a} {b}').set_data('a', 'x')
    assert template.render() == 'x {b}'
    template.set_data('a', None)
    assert template.render() == '{a} {b}'


def test_set_data_merges_by_default():
    """Test that mapping data is merged into existing data."""
    template = Template('{a} {b}', {'a': 'x'})
    template.set_data({'b': 'y'})
    assert template.render() == 'x y'


def test_set_data_replace():
    """Test that merge=False replaces existing data."""
    template = Template('{a} {b}', {'a': 'x'})
    template.set_data({'b': 'y'}, merge=False)
    assert template.render() == '{a} y'


def test_str_renders():
    """Test str() on a template."""
    assert str(Template('hello {name}', {'name': 'world'})) == 'hello world'


def test_repeated_token_replaced_everywhere():
    """Test that every occurrence of a repeated token is replaced."""
    assert Template('{a}-{a}').render({'a': 'x'}) == 'x-x'


def test_repeated_token_with_different_filters():
    """Test that each occurrence keeps its own filter chain."""
    template = Template('{name} {name|upper}')
    assert list(template.tokens) == ['name']
    assert template.tokens['name'].match == '{name|upper}'
    assert template.render({'name': 'bob'}) == 'bob BOB'


def test_value_producing_later_token():
    """Test that a value producing a later token's placeholder is substituted."""
    template = Template('{a} {b}')
    assert template.render({'a': '{b}', 'b': 'x'}) == 'x x'


def test_value_producing_earlier_token():
    """Test that a placeholder for an already processed name stays in place."""
    template = Template('{b} {a}')
    assert template.render({'a': '{b}', 'b': 'x'}) == 'x {b}'


def test_value_producing_unknown_token():
    """Test that placeholders for names not in the source stay in place."""
    template = Template('{a}')
    assert template.render({'a': '{c}', 'c': 'x'}) == '{c}'


def test_render_single_scalar():
    """Test render with one non-sequence positional value."""
    assert Template('{n} items').render(5) == '5 items'
    assert Template('{n} items').render(2.5) == '2.5 items'


def test_render_single_template():
    """Test render with one nested template as a positional value."""
    inner = Template('{x}', {'x': 'y'})
    assert Template('[{a}]').render(inner) == '[y]'


def test_render_single_object_positional():
    """Test render with one object bound by position."""
    assert Template('{user.name}').render({'name': 'Al'}) == '{user.name}'
    assert Template('{user.name}').render([{'name': 'Al'}]) == 'Al'


def test_missing():
    """Test the names left unresolved by a render."""
    template = Template('{a} {b} {c}', {'a': 1})
    assert template.missing() == ['b', 'c']
    assert template.missing(c=3) == ['b']


def test_multiline():
    """Test tokens across lines."""
    template = Template('line1={a}\nline2={b}')
    assert template.render({'a': '1', 'b': '2'}) == 'line1=1\nline2=2'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
