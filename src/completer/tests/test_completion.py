"""
Tests for jscomplete.completion module.

Tests candidate lookup against hand-built stores and, with tree-sitter,
the end-to-end scenarios from source text.
"""

import pytest

from jscomplete.completion import (
    Candidate,
    Completing,
    Completion,
    CompletionContext,
    static_analysis,
)
from jscomplete.parser import parse
from jscomplete.scope import get_static_scope
from jscomplete.store import TypeStore

from helpers import caret_after, requires_tree_sitter


def identifier(*data):
    return CompletionContext(Completing.IDENTIFIER, list(data))


def prop(*data):
    return CompletionContext(Completing.PROPERTY, list(data))


@pytest.fixture
def symbols():
    """
    Store for:
        function Foo() {}
        Foo.prototype.bar = ...; Foo.prototype.baz = ...
        var foo = new Foo(); foo.own = 1
        var food = 2
    """
    store = TypeStore()
    store.add_property("Foo", "Function", 0)
    store.get("Foo").add_property("prototype")
    store.get("Foo").get("prototype").add_property("bar")
    store.get("Foo").get("prototype").add_property("baz")
    store.add_property("foo", "Foo", 0)
    store.add_property("foo")  # referenced twice
    store.get("foo").add_property("own")
    store.add_property("food", None, 1)
    return store


class TestCompletionContext:
    """Tests for CompletionContext."""

    def test_accepts_string_kind(self):
        """Test the kind may be given as its string value."""
        context = CompletionContext("property", ["a"])
        assert context.completing is Completing.PROPERTY

    def test_rejects_unknown_kind(self):
        """Test an unknown kind raises ValueError."""
        with pytest.raises(ValueError):
            CompletionContext("keyword", [])


class TestCompletion:
    """Tests for the Completion container."""

    def test_insertion_order(self):
        """Test candidates keep the order they were found in."""
        completion = Completion()
        completion.insert(Candidate("b", "b", 0))
        completion.insert(Candidate("a", "a", 5))
        assert completion.names() == ["b", "a"]
        assert len(completion) == 2

    def test_by_weight(self):
        """Test sorting by weight keeps ties in found order."""
        completion = Completion()
        completion.insert(Candidate("low", "low", 0))
        completion.insert(Candidate("high", "high", 3))
        completion.insert(Candidate("tie", "tie", 0))
        assert [c.display for c in completion.by_weight()] == ["high", "low", "tie"]

    def test_to_dict(self):
        """Test serialisation of candidates."""
        completion = Completion()
        completion.insert(Candidate("abc", "c", 1))
        assert completion.to_dict() == {
            "candidates": [{"display": "abc", "insertion_suffix": "c", "weight": 1}],
        }


class TestIdentifierCompletion:
    """Tests for bare identifier completion."""

    def test_prefix_match(self, symbols):
        """Test names starting with the typed text are offered."""
        completion = static_analysis(identifier("fo"), symbols)
        assert completion.names() == ["foo", "food"]

    def test_suffix_and_weight(self, symbols):
        """Test each candidate carries its suffix and weight."""
        completion = static_analysis(identifier("fo"), symbols)
        by_name = {c.display: c for c in completion}
        assert by_name["foo"].insertion_suffix == "o"
        assert by_name["foo"].weight == 1
        assert by_name["food"].insertion_suffix == "od"

    def test_exact_name_not_offered(self, symbols):
        """Test a candidate must add something to the typed text."""
        assert static_analysis(identifier("food"), symbols).names() == []

    def test_case_sensitive(self, symbols):
        """Test matching is case sensitive."""
        assert static_analysis(identifier("F"), symbols).names() == ["Foo"]

    def test_prefix_property(self, symbols):
        """Every candidate extends the partial text by its suffix."""
        for partial in ["", "f", "fo", "Fo", "x"]:
            for candidate in static_analysis(identifier(partial), symbols):
                assert candidate.display.startswith(partial)
                assert len(candidate.display) > len(partial)
                assert candidate.display == partial + candidate.insertion_suffix

    def test_dotted_identifier(self, symbols):
        """Test `foo.o` matches foo's own properties."""
        completion = static_analysis(identifier("foo", "o"), symbols)
        assert completion.names() == ["own"]
        assert completion.candidates[0].insertion_suffix == "wn"


class TestPropertyCompletion:
    """Tests for property completion."""

    def test_all_properties(self, symbols):
        """Test `foo.` lists own and prototype members."""
        completion = static_analysis(prop("foo"), symbols)
        assert completion.names() == ["own", "bar", "baz"]

    def test_prototype_members_with_prefix(self, symbols):
        """Test `foo.ba` as a dotted identifier pulls from the prototype."""
        completion = static_analysis(identifier("foo", "ba"), symbols)
        assert completion.names() == ["bar", "baz"]
        assert [c.insertion_suffix for c in completion] == ["r", "z"]

    def test_missing_receiver(self, symbols):
        """Test an unknown receiver gives None."""
        assert static_analysis(prop("nope"), symbols) is None

    def test_missing_intermediate(self, symbols):
        """Test an unknown step in the path gives None."""
        assert static_analysis(prop("nope", "deeper"), symbols) is None
        assert static_analysis(identifier("nope", "x"), symbols) is None

    def test_missing_type_is_skipped(self, symbols):
        """Test a type name not in the store gives only direct members."""
        symbols.add_property("thing", "Unknown")
        symbols.get("thing").add_property("mine")
        assert static_analysis(prop("thing"), symbols).names() == ["mine"]

    def test_missing_prototype_is_skipped(self, symbols):
        """Test a constructor without prototype gives only direct members."""
        symbols.add_property("Bare", "Function")
        symbols.add_property("b", "Bare")
        symbols.get("b").add_property("x")
        assert static_analysis(prop("b"), symbols).names() == ["x"]

    def test_empty_receiver(self, symbols):
        """Test a known receiver without members gives an empty result."""
        completion = static_analysis(prop("food"), symbols)
        assert completion is not None
        assert len(completion) == 0


class TestEdgeCases:
    """Tests for degenerate requests."""

    def test_no_store(self):
        """Test there is nothing to complete without a store."""
        assert static_analysis(identifier("a"), None) is None

    def test_empty_data(self, symbols):
        """Test an empty path gives an empty result."""
        assert len(static_analysis(prop(), symbols)) == 0

    def test_query_does_not_mutate(self, symbols):
        """Test queries leave the store as it was."""
        before = symbols.to_dict()
        static_analysis(prop("foo"), symbols)
        static_analysis(identifier("nope", "x"), symbols)
        assert symbols.to_dict() == before


@requires_tree_sitter
class TestScenarios:
    """From source text to candidates."""

    def complete(self, source, caret, context):
        store = get_static_scope(parse(source), caret, TypeStore())
        return static_analysis(context, store)

    def test_simple_var(self):
        """`var a = 1; a.` has nothing to offer, and that is not an error."""
        completion = self.complete("var a = 1;\na;\n", (1, 1), prop("a"))
        assert completion is not None
        assert completion.names() == []

    def test_constructor_typing(self):
        """Test `new Foo()` offers members of Foo.prototype."""
        source = (
            "function Foo() {}\n"
            "var x = new Foo();\n"
            "Foo.prototype.bar = function () {};\n"
            "x;\n"
        )
        completion = self.complete(source, (3, 1), prop("x"))
        assert completion.names() == ["bar"]

    def test_object_literal_flattening(self):
        """Test an object literal's keys are offered on its variable."""
        completion = self.complete("var o = {a: 1, b: 2};\no;\n", (1, 1), prop("o"))
        assert completion.names() == ["a", "b"]

    def test_nested_function_params(self):
        """Test parameters weigh one more than their function."""
        source = "function f(x, y) {\n  x\n}\n"
        caret = caret_after(source, "  x")
        completion = self.complete(source, caret, identifier(""))

        found = {c.display: c.weight for c in completion}
        assert found["x"] == found["f"] + 1
        assert found["y"] == found["f"] + 1

    def test_params_hidden_outside(self):
        """Test parameters are not offered outside their function."""
        source = "function f(x, y) {\n  x\n}\nvar z;\n"
        completion = self.complete(source, (3, 0), identifier(""))
        assert "x" not in completion.names()
        assert "y" not in completion.names()
