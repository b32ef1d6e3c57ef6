"""
Tests for the expression printer.

Tests verify:
- Scalar, sequence, object literal and call layout
- Compact vs expanded output
- Binding calls (Let), var-args spreading and reversed argument order
- The map hook and the key path it receives
- Render state is left as found
"""

import json
from enum import Enum

import pytest
from docquery import render, to_string
from docquery.expr import Ref, Time
from docquery.expr import query as q
from docquery.printer import PrintOptions, RenderContext


def lines(*parts):
    return "\n".join(parts)


class TestScalars:
    """Leaf values."""

    def test_null(self):
        """None renders as null."""
        assert render(None) == "null"

    def test_booleans(self):
        """Booleans render lower-case."""
        assert render(True) == "true"
        assert render(False) == "false"

    def test_numbers(self):
        """Numbers render as their literal text."""
        assert render(42) == "42"
        assert render(1.5) == "1.5"
        assert render(-3) == "-3"

    def test_non_finite_floats(self):
        """NaN and infinities use their JSON-style spellings."""
        assert render(float("nan")) == "NaN"
        assert render(float("inf")) == "Infinity"
        assert render(float("-inf")) == "-Infinity"
        assert render({"add": [float("inf"), 1]}, compact=True) == "Add(Infinity,1)"

    def test_string_is_quoted(self):
        """Strings render as JSON string literals."""
        assert render("hello") == '"hello"'

    @pytest.mark.parametrize(
        "text",
        ["", 'say "hi"', "line\nbreak", "tab\there", "back\\slash", "café", "日本"],
    )
    def test_string_round_trips(self, text):
        """Every string leaf re-extracts to the original."""
        assert json.loads(render(text)) == text

    def test_non_ascii_left_readable(self):
        """Non-ASCII characters are not escaped."""
        assert render("é") == '"é"'

    def test_enum_member(self):
        """Symbol-like values render as their plain text."""

        class Unit(Enum):
            SECOND = "second"

        assert render(Unit.SECOND) == "second"

    def test_opaque_scalar(self):
        """Opaque values render their own display string."""
        assert render(Time("2020-01-01T00:00:00Z")) == 'Time("2020-01-01T00:00:00Z")'


class TestSequences:
    """Arrays."""

    def test_empty(self):
        """Empty sequences stay []."""
        assert render([]) == "[]"
        assert render(()) == "[]"

    def test_flat_is_compact(self):
        """A sequence of scalars goes on one line."""
        assert render([1, "a", None]) == '[1,"a",null]'

    def test_nested_expands(self):
        """A sequence holding a sequence is expanded."""
        assert render([1, [2, 3]]) == lines("[", "· 1,", "· [2,3]", "]")

    def test_deeper_nesting_indents_closers(self):
        """Closing brackets line up with their opener's depth."""
        assert render([[[1], 2]]) == lines(
            "[",
            "· [",
            "· · [1],",
            "· · 2",
            "· ]",
            "]",
        )


class TestObjectLiterals:
    """Records under the object marker."""

    def test_flat_object(self):
        """Scalar fields go on one line with a space after the colon."""
        assert render({"object": {"x": 1, "y": "z"}}) == '{x: 1,y: "z"}'

    def test_forced_compact_drops_space(self):
        """With compact forced, no space follows the colon."""
        assert render({"object": {"x": 1, "y": "z"}}, compact=True) == '{x:1,y:"z"}'

    def test_empty_object(self):
        """An empty literal stays {}."""
        assert render({"object": {}}) == "{}"

    def test_nested_value_expands(self):
        """A field holding a composite expands the literal."""
        assert render({"object": {"a": [1, 2], "b": 3}}) == lines(
            "{",
            "· a: [1,2],",
            "· b: 3",
            "}",
        )

    def test_object_never_renders_as_call(self):
        """Field names are printed as-is, never resolved."""
        assert render({"object": {"select_all": 1}}) == "{select_all: 1}"


class TestCalls:
    """Generic call records."""

    def test_add_compact(self):
        """Var-args payload is spread into the argument list."""
        assert render({"add": [1, 2]}, compact=True) == "Add(1,2)"

    def test_add_expanded(self):
        """Expanded calls put each argument on its own indented line."""
        assert render({"add": [1, 2]}) == lines("Add(", "· 1,", "· 2", ")")

    def test_simple_call_is_compact(self):
        """A call with only scalar arguments goes on one line."""
        assert render({"var": "x"}) == 'Var("x")'
        assert render({"now": None}) == "Now(null)"

    def test_named_arguments_in_order(self):
        """Further keys follow the identifying key."""
        assert render({"epoch": 5, "unit": "second"}) == 'Epoch(5,"second")'

    def test_special_case_names(self):
        """Calls use the Name Resolver."""
        assert render({"is_nonempty": [1]}, compact=True) == "IsNonEmpty([1])"
        assert render({"lte": [1, 2]}, compact=True) == "LTE(1,2)"
        assert render({"select_all": "a", "from": "b"}) == 'SelectAll("a","b")'

    def test_non_varargs_list_is_not_spread(self):
        """Only var-args calls spread a list payload."""
        assert render({"select": ["a", "b"], "from": 1}, compact=True) == (
            'Select(["a","b"],1)'
        )

    def test_varargs_spread_only_for_first_key(self):
        """A list under a named argument is printed as a list."""
        assert render({"call": "f", "arguments": [1, 2]}, compact=True) == (
            'Call("f",[1,2])'
        )

    def test_nested_calls(self):
        """Nested calls are indented one level per call."""
        expr = {"get": {"ref": {"collection": "users"}, "id": "1"}}
        assert render(expr) == lines(
            "Get(",
            "· Ref(",
            '· · Collection("users"),',
            '· · "1"',
            "· )",
            ")",
        )

    def test_empty_record(self):
        """A record with no keys renders best effort as {}."""
        assert render({}) == "{}"

    def test_non_string_key(self):
        """A non-string first key is resolved from its text."""
        assert render({1: "x"}) == '1("x")'
        assert render({2: "y", "collection": 3}, compact=True) == '2("y",3)'

    def test_empties_inside_expanded_tree(self):
        """Empty sequences and records are never expanded."""
        expr = {"add": [[], {"object": {}}, {"var": "x"}]}
        assert render(expr) == lines(
            "Add(",
            "· [],",
            "· {},",
            '· Var("x")',
            ")",
        )


class TestBindingCalls:
    """Let."""

    def test_binding_list(self):
        """Bindings print as an array of object literals."""
        expr = {"let": [{"x": 1}], "in": {"add": [{"var": "x"}, 2]}}
        assert render(expr) == lines(
            "Let(",
            "· [",
            "· · {x: 1}",
            "· ],",
            "· Add(",
            '· · Var("x"),',
            "· · 2",
            "· )",
            ")",
        )

    def test_binding_list_compact(self):
        """Compact bindings drop all whitespace."""
        expr = {"let": [{"x": 1}], "in": {"add": [{"var": "x"}, 2]}}
        assert render(expr, compact=True) == 'Let([{x:1}],Add(Var("x"),2))'

    def test_binding_record(self):
        """A single bindings record prints as one object literal."""
        expr = {"let": {"x": 1, "y": 2}, "in": {"var": "y"}}
        assert render(expr, compact=True) == 'Let({x:1,y:2},Var("y"))'

    def test_binding_values_are_expressions(self):
        """Binding values are rendered as ordinary expressions."""
        expr = {"let": [{"d": {"get": {"var": "r"}}}], "in": {"var": "d"}}
        assert render(expr, compact=True) == 'Let([{d:Get(Var("r"))}],Var("d"))'

    def test_builder_let(self):
        """Trees from the builder render the same way."""
        expr = q.let({"x": 1}, q.var("x"))
        assert render(expr, compact=True) == 'Let([{x:1}],Var("x"))'


class TestReversedArguments:
    """Filter, Map and Foreach print collection first."""

    def test_two_keys_reversed(self):
        """Stored order a, b prints as b, a."""
        assert render({"map": "L", "collection": "C"}, compact=True) == 'Map("C","L")'
        assert render({"foreach": 1, "collection": 2}, compact=True) == "Foreach(2,1)"

    def test_lambda_after_collection(self):
        """The lambda is printed after the collection."""
        expr = {
            "filter": {"lambda": "x", "expr": {"var": "x"}},
            "collection": [1, 2],
        }
        assert render(expr, compact=True) == 'Filter([1,2],Lambda("x",Var("x")))'
        assert render(expr) == lines(
            "Filter(",
            "· [1,2],",
            "· Lambda(",
            '· · "x",',
            '· · Var("x")',
            "· )",
            ")",
        )

    def test_other_calls_not_reversed(self):
        """Calls outside the set keep stored order."""
        assert render({"take": 1, "collection": 2}, compact=True) == "Take(1,2)"


class TestMapHook:
    """The map option and the key path."""

    def test_map_rewrites_children(self):
        """Each child's text is replaced by the hook's return value."""
        out = render({"add": [1, 2]}, compact=True, map=lambda s, path: f"<{s}>")
        assert out == "Add(<1>,<2>)"

    def test_key_paths(self):
        """Paths are reported child-first with keys and indices."""
        seen = []

        def record(text, path):
            seen.append((tuple(path), text))
            return text

        render({"select": ["a", "b"], "from": {"var": "x"}}, map=record)
        assert seen == [
            (("select", 0), '"a"'),
            (("select", 1), '"b"'),
            (("select",), '["a","b"]'),
            (("from", "var"), '"x"'),
            (("from",), 'Var("x")'),
        ]

    def test_binding_paths(self):
        """Bindings are reached through let, index and name."""
        seen = []
        render(
            {"let": [{"x": 1}], "in": 2},
            map=lambda s, path: seen.append(list(path)) or s,
        )
        assert ["let", 0, "x"] in seen
        assert ["let", 0] in seen
        assert ["let"] in seen
        assert ["in"] in seen

    def test_redaction(self):
        """A hook can redact fields by name."""

        def redact(text, path):
            return '"***"' if path and path[-1] == "password" else text

        expr = q.create(q.collection("users"), {"password": "hunter2", "name": "a"})
        assert render(expr, compact=True, map=redact) == (
            'Create(Collection("users"),{password:"***",name:"a"})'
        )

    def test_path_is_a_copy(self):
        """Mutating the path passed to the hook does not affect rendering."""

        def clobber(text, path):
            path.clear()
            return text

        ctx = RenderContext()
        render({"add": [1, {"var": "x"}]}, map=clobber, context=ctx)
        assert ctx.key_path == []

    def test_map_does_not_change_layout(self):
        """Compactness and depth are decided on the tree, not the hook output."""
        expr = {"add": [1, 2]}
        assert render(expr, map=lambda s, p: s) == render(expr)


class TestStateDiscipline:
    """Render state is renderer-local and restored."""

    def test_repeat_render_identical(self):
        """Two renders of the same tree give the same output."""
        expr = q.let({"x": [1, {"y": 2}]}, q.map_(q.var("x"), lambda v: q.add(v, 1)))
        assert render(expr) == render(expr)
        assert render(expr, True) == render(expr, True)

    def test_context_left_as_found(self):
        """A caller context has the same depth, compact and path afterwards."""
        ctx = RenderContext()
        before = ctx.snapshot()
        first = render({"add": [1, [2, 3]]}, context=ctx)
        second = render({"add": [1, [2, 3]]}, context=ctx)
        assert first == second
        assert ctx.snapshot() == before

    def test_context_restored_after_forced_compact(self):
        """The compact option does not leak into the caller context."""
        ctx = RenderContext()
        render({"add": [1, 2]}, compact=True, context=ctx)
        assert ctx.compact is False

    def test_context_restored_when_hook_raises(self):
        """State is restored even when the map hook fails mid-render."""

        def explode(text, path):
            if path == ["add", 1]:
                raise RuntimeError("hook failed")
            return text

        ctx = RenderContext()
        before = ctx.snapshot()
        with pytest.raises(RuntimeError):
            render({"add": [1, [2]]}, map=explode, context=ctx)
        assert ctx.snapshot() == before

    def test_input_not_mutated(self):
        """The tree is not modified by rendering."""
        tree = {"filter": {"lambda": "x", "expr": 1}, "collection": [3, 2, 1]}
        snapshot = json.dumps(tree)
        render(tree)
        render(tree, compact=True)
        assert json.dumps(tree) == snapshot


class TestCompactEquivalence:
    """Compact and expanded output differ only in layout."""

    @pytest.mark.parametrize(
        "tree",
        [
            {"equals": ["a", "b", 3]},
            {"add": [1, 2, 3]},
            [1, 2, [3]],
            {"object": {"k": [1, 2]}},
        ],
    )
    def test_whitespace_only(self, tree):
        """Stripping markers, newlines and spaces gives the compact form."""
        expanded = render(tree)
        compact = render(tree, compact=True)
        stripped = expanded.replace("\n", "").replace("· ", "").replace(": ", ":")
        assert stripped == compact


class TestEntryPoints:
    """render(), to_string() and Expr methods agree."""

    def test_to_string_options(self):
        """to_string accepts True, a dict or PrintOptions."""
        expr = q.add(1, 2)
        assert to_string(expr, True) == "Add(1,2)"
        assert to_string(expr, {"compact": True}) == "Add(1,2)"
        assert to_string(expr, PrintOptions(compact=True)) == "Add(1,2)"

    def test_expr_repr_is_compact(self):
        """repr() of an Expr is its compact rendering."""
        assert repr(q.add(1, 2)) == "Add(1,2)"

    def test_expr_str_is_expanded(self):
        """str() of an Expr is its expanded rendering."""
        assert str(q.add(1, 2)) == lines("Add(", "· 1,", "· 2", ")")

    def test_kwargs_override_options(self):
        """Keyword options win over the options argument."""
        assert render({"add": [1, 2]}, {"compact": False}, compact=True) == "Add(1,2)"

    def test_refs_in_calls(self):
        """Opaque values count as simple arguments."""
        users = Ref("users", Ref("collections"))
        assert render({"get": Ref("1", users)}) == 'Get(Ref(Collection("users"), "1"))'
