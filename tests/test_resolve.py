"""Tests for resolve, chain and nested templates."""

import pytest
from tokenstring import Template, CycleError


def test_resolve_and_no_process():
    """Test that resolve keeps unresolved tokens in the new source."""
    template = Template('{foo} {bar} {baz}', {'foo': 'foo', 'bar': 'bar'}).resolve()
    assert template.value == 'foo bar {baz}'
    assert template.source == 'foo bar {baz}'
    assert list(template.tokens) == ['baz']


def test_resolve_and_process():
    """Test data bound after a resolve."""
    template = Template('{foo} {bar} {baz}', {'foo': 'foo', 'bar': 'bar'})
    assert template.resolve().set_data('baz', 'baz').value == 'foo bar baz'


def test_resolve_and_process_loop():
    """Test rendering a resolved template repeatedly."""
    template = Template('{foo} {bar} {baz}', {'foo': 'foo', 'bar': 'bar'}).resolve()
    output = [template.render({'baz': num}) for num in [1, 2, 3]]
    assert output == ['foo bar 1', 'foo bar 2', 'foo bar 3']


def test_resolve_keeps_data_by_default():
    """Test that resolve without prune keeps all data."""
    template = Template('{foo} {bar}', {'foo': 'foo'}).resolve()
    assert 'foo' in template.data


def test_resolve_prune():
    """Test that prune drops data for tokens that are gone."""
    template = Template('{foo} {bar}', {'foo': 'foo'}).resolve(prune=True)
    assert template.data == {}
    assert template.source == 'foo {bar}'


def test_resolve_parses_produced_tokens():
    """Test that tokens produced by data become tokens of the new source."""
    template = Template('{greeting}', {'greeting': 'Hello {name}'}).resolve(prune=True)
    assert list(template.tokens) == ['name']
    assert template.render({'name': 'Bob'}) == 'Hello Bob'


def test_chain():
    """Test chain with data that produces further tokens."""
    template = Template('{a}')
    result = template.chain({'a': '{b} and {c}'})
    assert result is template
    assert template.source == '{b} and {c}'
    assert template.chain(b='x').render(c='y') == 'x and y'


def test_chain_uses_bound_data():
    """Test chain without arguments."""
    template = Template('{a} {b}', {'a': '{c}'}).chain()
    assert template.source == '{c} {b}'


def test_nested_template():
    """Test a template bound as a value."""
    data = {
        'tokenstring': Template('{foo} {bar} {baz}'),
        'foo': 'foo',
        'bar': 'bar',
        'baz': 'baz',
    }
    assert Template('{tokenstring}', data).value == 'foo bar baz'


def test_double_nested_template():
    """Test a nested template inside a nested template."""
    data = {
        'tokenstring1': Template('{foo} {tokenstring2}'),
        'tokenstring2': Template('{bar}'),
        'foo': 'foo',
        'bar': 'bar',
        'baz': 'baz',
    }
    assert Template('{tokenstring1}', data).value == 'foo bar'


def test_triple_nested_template():
    """Test three levels of nesting flatten completely."""
    data = {
        'tokenstring1': Template('{foo} {tokenstring2}'),
        'tokenstring2': Template('{bar} {tokenstring3}'),
        'tokenstring3': Template('{baz}'),
        'foo': 'foo',
        'bar': 'bar',
        'baz': 'baz',
    }
    output = Template('{tokenstring1}', data).value
    assert output == 'foo bar baz'
    assert '{' not in output


def test_nested_template_with_function():
    """Test a nested template whose tokens resolve to functions."""
    data = {
        'tokenstring1': Template('{foo} {bar} {function}'),
        'function': lambda name, token, source: 'baz',
        'foo': 'foo',
        'bar': 'bar',
    }
    assert Template('{tokenstring1}', data).value == 'foo bar baz'


def test_nested_template_own_data():
    """Test that a nested template falls back on its own data."""
    inner = Template('{greeting}, {name}', {'greeting': 'Hi', 'name': 'inner'})
    outer = Template('{inner}!', {'inner': inner, 'name': 'outer'})
    assert outer.render() == 'Hi, outer!'


def test_nested_template_is_not_modified():
    """Test that rendering leaves a shared nested template alone."""
    inner = Template('{x}')
    Template('{a}', {'a': inner, 'x': '1'}).render()
    Template('{b}', {'b': inner, 'x': '2'}).render()
    assert inner.source == '{x}'
    assert inner.data == {}
    assert inner.render() == '{x}'


def test_shared_nested_template_twice():
    """Test the same nested template used twice in one source."""
    inner = Template('{x}')
    assert Template('{a}/{b}', {'a': inner, 'b': inner, 'x': 'y'}).render() == 'y/y'


def test_cycle_detection():
    """Test that a template nested inside itself raises CycleError."""
    template = Template('{self}')
    template.set_data('self', template)
    with pytest.raises(CycleError):
        template.render()


def test_indirect_cycle_detection():
    """Test a cycle through two templates."""
    a = Template('{b}')
    b = Template('{a}')
    with pytest.raises(CycleError):
        Template('{a}', {'a': a, 'b': b}).render()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
