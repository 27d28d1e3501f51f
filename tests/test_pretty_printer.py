from pretty_printer import PrettyPrinter
from tests.utils import lex, parse_text


def test_print_tokens_lists_each_token():
    out = PrettyPrinter.print_tokens(lex("(x: 1)"))
    assert out.splitlines() == [
        "Token 0: (",
        "Token 1: x",
        "Token 2: :",
        "Token 3: 1",
        "Token 4: )",
    ]


def test_print_tokens_limit():
    out = PrettyPrinter.print_tokens(lex("1 2 3 4"), limit=2)
    assert out.splitlines()[-1] == "... and 2 more"


def test_print_ast_shows_kinds_and_payloads():
    out = PrettyPrinter.print_ast(parse_text("x: 5 (1 x)").root)
    lines = out.splitlines()
    assert lines[0] == "Program"
    assert "Binding(x in env0[0])" in lines[1]
    assert "List(env1)" in lines[2]
    assert "Integer(1)" in lines[3]
    assert "Symbol(x -> env0[0])" in lines[4]


def test_print_surface_round_trips_structure():
    program = parse_text("(1 (2 3)  ())")
    assert PrettyPrinter.print_surface(program.root) == "(1 (2 3) ())"


def test_print_environments_nests_frames():
    program = parse_text("x: 5 (y: (1 2))")
    out = PrettyPrinter.print_environments(program.environments)
    assert out.splitlines() == [
        "env0",
        "  [0] x = 5",
        "  env1 parent=env0",
        "    [0] y = (1 2)",
        "    env2 parent=env1",
    ]


def test_printers_handle_deep_nesting():
    depth = 3000
    program = parse_text("(" * depth + "1" + ")" * depth, max_depth=depth)
    lines = PrettyPrinter.print_ast(program.root).splitlines()
    assert len(lines) == depth + 2
    assert lines[-1].strip() == "[0]: Integer(1)"
    assert PrettyPrinter.print_surface(program.root) == "(" * depth + "1" + ")" * depth
