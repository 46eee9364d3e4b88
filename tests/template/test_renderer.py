"""
Tests for the async renderer.
"""

import pytest

from nano import render, render_sync
from nano.errors import MissingClosingTagError, NanoSyntaxError
from nano.template.nodes import BooleanLiteral, IfStatement
from nano.template.parser import parse
from nano.template.renderer import Renderer


class TestLiterals:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("template, expected", [
        ('{"text"}', "text"),
        ("{42}", "42"),
        ("{1.5}", "1.5"),
        ("{true}", "true"),
        ("{false}", "false"),
        ("{null}", ""),
        ("{[1, 2]}", "1,2"),
    ])
    async def test_literal(self, template, expected):
        assert await render(template) == expected

    @pytest.mark.asyncio
    async def test_text_passthrough(self):
        assert await render("plain <b>text</b>") == "plain <b>text</b>"

    @pytest.mark.asyncio
    async def test_braces_across_lines_are_text(self):
        assert await render("a { b\n c } d") == "a { b\n c } d"
        assert await render("function f() {\n  return {x};\n}", {"x": 1}) == "function f() {\n  return 1;\n}"


class TestOperators:

    @pytest.mark.asyncio
    async def test_precedence(self):
        assert await render('{2 + 2 == 4 ? "Yes" : "No"}') == "Yes"
        assert await render("{1 + 2 * 3}") == "7"
        assert await render("{(1 + 2) * 3}") == "9"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("template, expected", [
        ("{7 / 2}", "3.5"),
        ("{1 / 0}", "Infinity"),
        ("{10 - 4 - 3}", "3"),
        ("{'a' + 1}", "a1"),
        ("{1 == '1'}", "true"),
        ("{null == 0}", "false"),
        ("{1 != 2}", "true"),
        ("{2 < 10}", "true"),
        ("{'2' < '10'}", "false"),
        ("{-x}", "-3"),
        ("{+'4'}", "4"),
        ("{ !zero}", "true"),
        ("{(!zero)}", "true"),
        ("{0 || 'b'}", "b"),
        ("{'a' && 'b'}", "b"),
        ("{0 && 'b'}", "0"),
    ])
    async def test_expression(self, template, expected):
        assert await render(template, {"x": "3", "zero": 0}) == expected

    @pytest.mark.asyncio
    async def test_logical_operators_evaluate_both_sides(self):
        calls = []

        def mark(name):
            calls.append(name)
            return name

        assert await render("{false && mark('and')}{'x' || mark('or')}", {"mark": mark}) == "falsex"
        assert calls == ["and", "or"]

    @pytest.mark.asyncio
    async def test_ternary_evaluates_selected_branch_only(self):
        calls = []

        def mark(name):
            calls.append(name)
            return name

        assert await render("{true ? mark('yes') : mark('no')}", {"mark": mark}) == "yes"
        assert calls == ["yes"]


class TestIdentifiersAndMembers:

    @pytest.mark.asyncio
    async def test_missing_identifier_is_empty(self):
        assert await render("[{nope}]") == "[]"
        assert await render("[{nope.deep.path}]") == "[]"

    @pytest.mark.asyncio
    async def test_member_and_bracket_access_match(self):
        data = {"a": {"b": 1}}
        assert await render("{a.b}", data) == "1"
        assert await render("{a['b']}", data) == "1"

    @pytest.mark.asyncio
    async def test_computed_access(self):
        data = {"items": ["x", "y"], "i": 1, "key": "k", "map": {"k": "v"}}
        assert await render("{items[i]}{map[key]}{items.length}", data) == "yv2"

    @pytest.mark.asyncio
    async def test_computed_access_never_raises(self):
        assert await render("[{m[k]}]", {"m": {"a": 1}, "k": [1]}) == "[]"
        assert await render("[{xs[k]}]", {"xs": [1, 2, 3], "k": "²"}) == "[]"

    @pytest.mark.asyncio
    async def test_numeric_key_on_string_keyed_mapping(self):
        assert await render("{m[0]}", {"m": {"0": "zero"}}) == "zero"

    @pytest.mark.asyncio
    async def test_object_attributes(self):
        class User:
            name = "Ann"

            def greet(self, greeting):
                return f"{greeting}, {self.name}"

        assert await render("{user.greet('Hi')}", {"user": User()}) == "Hi, Ann"


class TestCalls:

    @pytest.mark.asyncio
    async def test_sync_function(self):
        assert await render("{upper('a')}", {"upper": str.upper}) == "A"

    @pytest.mark.asyncio
    async def test_async_function_is_awaited(self):
        async def fetch(key):
            return {"title": "Async"}[key]

        assert await render("{fetch('title')}", {"fetch": fetch}) == "Async"

    @pytest.mark.asyncio
    async def test_non_callable_is_empty(self):
        assert await render("[{x()}]", {"x": 1}) == "[]"
        assert await render("[{missing()}]") == "[]"

    @pytest.mark.asyncio
    async def test_calls_run_in_document_order(self):
        calls = []

        def mark(name):
            calls.append(name)
            return name

        template = "{mark('a')}{if mark('b')}{mark('c')}{/if}{for x in [mark('d')]}{mark(x + 'e')}{/for}"
        assert await render(template, {"mark": mark}) == "acde"
        assert calls == ["a", "b", "c", "d", "de"]

    @pytest.mark.asyncio
    async def test_function_exceptions_propagate(self):
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await render("{boom()}", {"boom": boom})


class TestIf:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data, expected", [
        ({"a": True}, "A"),
        ({"a": False, "b": True}, "B"),
        ({"a": False, "b": False}, "C"),
    ])
    async def test_branches_are_exclusive(self, data, expected):
        assert await render("{if a}A{else if b}B{else}C{/if}", data) == expected

    @pytest.mark.asyncio
    async def test_no_alternate(self):
        assert await render("[{if a}A{/if}]", {"a": ""}) == "[]"

    @pytest.mark.asyncio
    async def test_empty_collections_are_falsy(self):
        assert await render("{if items}some{else}none{/if}", {"items": []}) == "none"


class TestFor:

    @pytest.mark.asyncio
    async def test_array_with_index(self):
        assert await render("{for v, i in [10,20,30]}{i}:{v};{/for}") == "0:10;1:20;2:30;"

    @pytest.mark.asyncio
    async def test_number(self):
        assert await render("{for n, i in 3}{n}-{i};{/for}") == "1-0;2-1;3-2;"

    @pytest.mark.asyncio
    async def test_fractional_number_rounds_up(self):
        assert await render("{for n in 2.5}{n};{/for}") == "1;2;3;"

    @pytest.mark.asyncio
    async def test_single_identifier_binds_value(self):
        assert await render("{for x in xs}{x}{/for}", {"xs": [1, 2, 3]}) == "123"

    @pytest.mark.asyncio
    async def test_mapping_with_key(self):
        data = {"obj": {"a": 1, "b": 2}}
        assert await render("{for v, k in obj}{k}={v};{/for}", data) == "a=1;b=2;"

    @pytest.mark.asyncio
    async def test_string(self):
        assert await render("{for c in 'ab'}[{c}]{/for}") == "[a][b]"

    @pytest.mark.asyncio
    async def test_non_iterable_renders_empty(self):
        assert await render("[{for x in missing}a{/for}]") == "[]"
        assert await render("[{for x in flag}a{/for}]", {"flag": True}) == "[]"

    @pytest.mark.asyncio
    async def test_loop_bindings_do_not_leak(self):
        data = {"x": "outer"}
        assert await render("{for x in [1, 2]}{x}{/for}{x}", data) == "12outer"
        assert data == {"x": "outer"}

    @pytest.mark.asyncio
    async def test_nested_loops(self):
        template = "{for row in rows}{for cell in row}{cell}{/for};{/for}"
        assert await render(template, {"rows": [[1, 2], [3]]}) == "12;3;"


class TestSwitch:

    TEMPLATE = "{switch kind}\n{case 'a'}A{/case}\n{case 1}One{/case}\n{/switch}"

    @pytest.mark.asyncio
    async def test_matching_case(self):
        assert await render(self.TEMPLATE, {"kind": "a"}) == "A"

    @pytest.mark.asyncio
    async def test_loose_match(self):
        assert await render(self.TEMPLATE, {"kind": "1"}) == "One"

    @pytest.mark.asyncio
    async def test_no_match(self):
        assert await render(self.TEMPLATE, {"kind": "z"}) == ""


class TestFlags:

    @pytest.mark.asyncio
    async def test_escape_tag(self):
        assert await render("{#html}", {"html": "<i>"}) == "&lt;i&gt;"

    @pytest.mark.asyncio
    async def test_trim_tag(self):
        result = await render("<div>\n\t{!x}\n</div>", {"x": "<a>\n  <b>"})
        assert result == "<div>\n\t<a><b>\n</div>"

    @pytest.mark.asyncio
    async def test_trim_block_text(self):
        template = "{!if true}<div>\n\t<b>{x}</b>\n</div>{/if}"
        assert await render(template, {"x": "hi"}) == "<div><b>hi</b></div>"

    @pytest.mark.asyncio
    async def test_escape_block_text(self):
        assert await render("{#if true}<b>{/if}") == "&lt;b&gt;"

    @pytest.mark.asyncio
    async def test_combined_flags(self):
        assert await render("{!#x}", {"x": "<i>\n</i>"}) == "&lt;i&gt;&lt;&#x2F;i&gt;"

    @pytest.mark.asyncio
    async def test_leading_bang_is_trim_flag(self):
        """{!x} is the trim flag applied to x; negation needs a space or parentheses"""
        assert await render("{!x}", {"x": 0}) == "0"
        assert await render("{ !x}", {"x": 0}) == "true"


class TestRendererApi:

    @pytest.mark.asyncio
    async def test_unknown_node_renders_empty(self):
        renderer = Renderer()
        assert await renderer.render_node(IfStatement(test=BooleanLiteral(value=True)), {}) == ""

    @pytest.mark.asyncio
    async def test_render_parsed_ast(self):
        ast = parse("Hello, {name}!")
        renderer = Renderer()
        assert await renderer.render(ast, {"name": "World"}) == "Hello, World!"
        assert await renderer.render(ast, {"name": "Again"}) == "Hello, Again!"

    @pytest.mark.asyncio
    async def test_syntax_errors_propagate(self):
        with pytest.raises(MissingClosingTagError):
            await render("{if a}no close")
        with pytest.raises(NanoSyntaxError):
            await render("{2 +}")

    def test_render_sync(self):
        assert render_sync("{a + b}", {"a": 1, "b": 2}) == "3"
