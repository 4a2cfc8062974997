import pytest
from abnfconv.errors import MalformedInput
from abnfconv.grammar.ast import (
    Alternatives, Concatenation, Repetition, Group, Optional, Rulename,
    String, TerminalValues, Range, CodepointSeq, Prose, Specific, Variable,
)
from abnfconv.grammar.parser import parse_grammar


def test_simple_ruleset_shapes(simple_rules, rule_node):
    assert [r.name for r in simple_rules] == [
        "a", "b", "c",
        "grp-a-any-bc", "grp-a-all-bc",
        "nested-any-grp", "nested-all-grp",
        "star-a", "one-star-a", "star-two-a", "one-star-two-a",
    ]
    assert rule_node("a") == String("a")
    assert rule_node("grp-a-any-bc") == Concatenation((
        Rulename("a"),
        Group(Alternatives((Rulename("b"), Rulename("c")))),
    ))
    assert rule_node("nested-all-grp") == Concatenation((
        Rulename("a"),
        Group(Concatenation((
            Rulename("b"),
            Group(Concatenation((Rulename("a"), Rulename("c")))),
        ))),
    ))


def test_repeat_forms(rule_node):
    assert rule_node("star-a") == Repetition(Variable(None, None), Rulename("a"))
    assert rule_node("one-star-a") == Repetition(Variable(1, None), Rulename("a"))
    assert rule_node("star-two-a") == Repetition(Variable(None, 2), Rulename("a"))
    assert rule_node("one-star-two-a") == Repetition(Variable(1, 2), Rulename("a"))


def test_specific_repeat_and_optional():
    g = parse_grammar('r = 3DIGIT [ "x" / "y" ]\n')
    assert g.rules[0].node == Concatenation((
        Repetition(Specific(3), Rulename("DIGIT")),
        Optional(Alternatives((String("x"), String("y")))),
    ))


def test_num_vals():
    g = parse_grammar(
        "range = %x41-5A\n"
        "seq = %d13.10\n"
        "bin = %b1000001\n"
    )
    nodes = [r.node for r in g.rules]
    assert nodes[0] == TerminalValues(Range(0x41, 0x5A))
    assert nodes[1] == TerminalValues(CodepointSeq((13, 10)))
    assert nodes[2] == TerminalValues(CodepointSeq((65,)))


def test_case_prefixed_strings_and_prose():
    g = parse_grammar('kw = %s"Let" / %i"mut"\nnote = <anything goes>\n')
    assert g.rules[0].node == Alternatives((String("Let"), String("mut")))
    assert g.rules[1].node == Prose("anything goes")


def test_rules_span_multiple_lines():
    src = (
        "list = item\n"
        "       *( \",\" item ) ; trailing comment\n"
        "item = \"x\"\n"
    )
    g = parse_grammar(src)
    assert [r.name for r in g.rules] == ["list", "item"]
    assert isinstance(g.rules[0].node, Concatenation)
    assert g.rules[0].span.line == 1
    assert g.rules[1].span.line == 3


def test_incremental_alternatives_are_merged():
    g = parse_grammar('op = "+" / "-"\nop =/ "*"\nOP =/ "/"\n')
    assert len(g.rules) == 1
    assert g.rules[0].node == Alternatives(
        (String("+"), String("-"), String("*"), String("/"))
    )
    assert g.find_rule("Op") is g.rules[0]


def test_duplicate_definition_is_rejected():
    with pytest.raises(MalformedInput) as exc:
        parse_grammar('a = "a"\nA = "b"\n')
    assert "already defined" in str(exc.value)
    assert "2:1" in str(exc.value)


def test_incremental_on_unknown_rule_is_rejected():
    with pytest.raises(MalformedInput):
        parse_grammar('a =/ "a"\n')


def test_unexpected_character_reports_position():
    with pytest.raises(MalformedInput) as exc:
        parse_grammar('a = "a"\nb = "b" & c\n')
    msg = str(exc.value)
    assert "2:9" in msg
    assert msg.endswith('b = "b" & c\n        ^')


def test_unclosed_group():
    with pytest.raises(SyntaxError) as exc:
        parse_grammar("a = ( b c\n")
    assert "RPAREN" in str(exc.value)


def test_missing_element():
    with pytest.raises(MalformedInput) as exc:
        parse_grammar("a = b /\n")
    assert "Expected an element" in str(exc.value)


def test_repeat_must_touch_its_element():
    with pytest.raises(MalformedInput) as exc:
        parse_grammar('a = "a"\nb = 3 a\n')
    msg = str(exc.value)
    assert "2:7" in msg
    assert msg.endswith("b = 3 a\n      ^")
    assert parse_grammar('a = "a"\nb = 3a\n').rules[1].node == Repetition(Specific(3), Rulename("a"))
