import pytest

from ast_nodes import *
from errors import ErrorKind, ParseError, UnsupportedError
from parser import Parser, ParserState
from tests.utils import lex, parse_text


def test_integer_literal():
    program = parse_text("42")
    assert program.root.type == NodeType.PROGRAM
    assert len(program.children) == 1
    node = program.children[0]
    assert node.type == NodeType.INTEGER
    assert integer_value(node) == 42


def test_signed_integer_literals():
    program = parse_text("-5 +7 0")
    assert [integer_value(n) for n in program.children] == [-5, 7, 0]


def test_top_level_expressions_in_order():
    program = parse_text("1\n2 (3)")
    kinds = [n.type for n in program.children]
    assert kinds == [NodeType.INTEGER, NodeType.INTEGER, NodeType.LIST]


def test_grouped_expression():
    program = parse_text("(1 2 3)")
    assert len(program.children) == 1
    group = program.children[0]
    assert isinstance(group, ListNode)
    assert [integer_value(c) for c in group.children] == [1, 2, 3]


def test_nested_groups():
    program = parse_text("(1 (2 (3)) ())")
    outer = program.children[0]
    assert len(outer.children) == 3
    inner = outer.children[1]
    assert integer_value(inner.children[0]) == 2
    assert isinstance(inner.children[1], ListNode)
    assert outer.children[2].children == []


def test_unmatched_open_paren():
    with pytest.raises(SyntaxError):
        parse_text("(1 2")


def test_unmatched_open_paren_reports_opener():
    with pytest.raises(ParseError) as info:
        parse_text("1 (2 (3)")
    assert info.value.kind == ErrorKind.SYNTAX
    assert info.value.token.start == 2


def test_dangling_close_paren():
    with pytest.raises(ParseError) as info:
        parse_text("1 2)")
    assert info.value.text == ")"


def test_binding_at_top_level():
    program = parse_text("x: 5")
    env = program.environment
    binding = env.lookup_local("x")
    assert binding is not None
    assert integer_value(binding.value) == 5
    assert integer_value(env.lookup("x")) == 5


def test_binding_leaves_definition_site_in_tree():
    program = parse_text("x: 5")
    node = program.children[0]
    assert isinstance(node, BindingNode)
    assert node.name == "x"
    assert node.scope == program.environment.index
    assert program.environment.binding_at(node.slot).name == "x"


def test_binding_with_group_value():
    program = parse_text("xs: (1 2)")
    value = program.environment.lookup("xs")
    assert isinstance(value, ListNode)
    assert [integer_value(c) for c in value.children] == [1, 2]


def test_binding_without_space_before_colon():
    program = parse_text("x:5")
    assert integer_value(program.environment.lookup("x")) == 5


def test_reference_resolves_to_binding():
    program = parse_text("x: 5 x")
    ref = program.children[1]
    assert isinstance(ref, SymbolNode)
    assert ref.name == "x"
    frame = program.environments.frame(ref.scope)
    assert integer_value(frame.binding_at(ref.slot).value) == 5


def test_shadowing_within_a_frame():
    program = parse_text("x: 1 x: 2 x")
    env = program.environment
    assert len(env.bindings) == 2
    assert integer_value(env.lookup("x")) == 2
    assert program.children[2].slot == 1


def test_reference_before_rebinding_keeps_old_slot():
    program = parse_text("x: 1 x x: 2")
    assert program.children[1].slot == 0


def test_groups_open_child_frames():
    program = parse_text("x: 1 (y: 2 x y)")
    group = program.children[1]
    frame = program.environments.frame(group.scope)
    assert frame.parent == program.environment.index
    assert frame.exists_in_current_scope("y")
    assert not program.environment.exists("y")

    x_ref, y_ref = group.children[1], group.children[2]
    assert x_ref.scope == program.environment.index
    assert y_ref.scope == frame.index


def test_group_bindings_do_not_leak():
    with pytest.raises(ParseError) as info:
        parse_text("(y: 2) y")
    assert "y" in str(info.value)


def test_binding_value_is_parsed_before_name_is_bound():
    with pytest.raises(ParseError):
        parse_text("x: x")
    program = parse_text("x: 1 (x: x)")
    inner = program.children[1]
    frame = program.environments.frame(inner.scope)
    value = frame.lookup("x")
    assert isinstance(value, SymbolNode)
    assert value.scope == program.environment.index


def test_undeclared_identifier():
    with pytest.raises(ParseError) as info:
        parse_text("(1 y)")
    assert info.value.text == "y"


@pytest.mark.parametrize("src", ["+", "1a", "a-b", "\t1", "$"])
def test_unrecognized_token_carries_text(src):
    with pytest.raises(ParseError) as info:
        parse_text(src)
    assert info.value.text == src


@pytest.mark.parametrize("src", [": 5", "5 : 3", "(1) : 2"])
def test_colon_without_name(src):
    with pytest.raises(ParseError) as info:
        parse_text(src)
    assert info.value.text == ":"


@pytest.mark.parametrize("src", ["x:", "x: )", "(x:)"])
def test_binding_without_value(src):
    with pytest.raises(ParseError):
        parse_text(src)


def test_comma_is_unsupported():
    with pytest.raises(UnsupportedError) as info:
        parse_text("(1, 2)")
    assert info.value.kind == ErrorKind.TODO
    assert info.value.text == ","


def test_binding_as_binding_value_is_unsupported():
    with pytest.raises(NotImplementedError):
        parse_text("x: y: 5")


def test_integer_literal_out_of_range():
    assert integer_value(parse_text("9223372036854775807").children[0]) == 2**63 - 1
    assert integer_value(parse_text("-9223372036854775808").children[0]) == -(2**63)
    with pytest.raises(ParseError):
        parse_text("9223372036854775808")


def test_whitespace_only_program_is_empty():
    program = parse_text("   \n")
    assert program.children == []
    assert program.environment.bindings == []


def test_deep_nesting_is_iterative():
    depth = 5000
    program = parse_text("(" * depth + "1" + ")" * depth, max_depth=depth)
    node = program.children[0]
    count = 1
    while isinstance(node.children[0], ListNode):
        node = node.children[0]
        count += 1
    assert count == depth
    assert integer_value(node.children[0]) == 1


def test_nesting_beyond_max_depth_fails():
    with pytest.raises(ParseError):
        parse_text("(((1)))", max_depth=2)
    assert parse_text("((1))", max_depth=2).children


def test_parser_ends_in_done_state():
    parser = Parser(lex("x: (1 2) x"))
    assert parser.state == ParserState.AWAITING_EXPR
    parser.parse()
    assert parser.state == ParserState.DONE
    assert parser.error is None


def test_parser_ends_in_failed_state_and_releases():
    parser = Parser(lex("(x: 1 2"))
    with pytest.raises(ParseError) as info:
        parser.parse()
    assert parser.state == ParserState.FAILED
    assert parser.error is info.value
    assert len(parser.environments) == 0


def test_parser_tracks_intermediate_states():
    parser = Parser(lex("(x: 1)"))
    states = []
    update = parser._update_state

    def record():
        update()
        states.append((parser.state, parser.depth))

    parser._update_state = record
    parser.parse()
    assert states == [
        (ParserState.IN_GROUP, 1),
        (ParserState.AWAITING_BINDING_VALUE, 1),
        (ParserState.IN_GROUP, 1),
        (ParserState.AWAITING_EXPR, 0),
    ]


def test_parser_accepts_plain_token_lists():
    tokens = list(lex("(1 2)"))
    program = Parser(tokens).parse()
    assert len(program.children[0].children) == 2


def test_parser_cannot_run_twice():
    parser = Parser(lex("1"))
    parser.parse()
    with pytest.raises(ValueError):
        parser.parse()


def test_node_positions_come_from_tokens():
    program = parse_text("1\n  (x: 2)")
    group = program.children[1]
    assert (group.line, group.column) == (2, 3)
    binding = group.children[0]
    assert (binding.line, binding.column) == (2, 4)
