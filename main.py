from __future__ import annotations
import argparse
import json
import sys
from typing import Iterable, List, Optional, Union
from lexer import Lexer
from tokens import Token
from token_stream import TokenStream
from ast_nodes import Program
from parser import Parser, DEFAULT_MAX_DEPTH
from errors import LangError, format_error

from pretty_printer import PrettyPrinter
from ast_json import program_to_json
from ast_viz import write_and_render


def lex(text: str) -> TokenStream:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_tokens(
    tokens: Union[TokenStream, Iterable[Token]], max_depth: int = DEFAULT_MAX_DEPTH
) -> Program:
    """Parse tokens into a Program."""
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse()


def parse_source(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Program:
    """Lex and parse a complete source text."""
    with lex(text) as tokens:
        return parse_tokens(tokens, max_depth=max_depth)


def report_error(err: LangError) -> None:
    print(format_error(err))


def process_program(
    text: str,
    *,
    print_tokens: bool = False,
    print_ast: bool = True,
    print_env: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Process a single program: lex, parse and optionally print stages.

    Returns True when the source parsed. Errors are reported on stdout and
    stop the pipeline for this input.
    """
    try:
        with lex(text) as tokens:
            if print_tokens:
                print(f"Tokens ({len(tokens)}):")
                print(PrettyPrinter.print_tokens(tokens, limit=50))

            program = parse_tokens(tokens, max_depth=max_depth)
    except LangError as e:
        report_error(e)
        return False

    if print_ast:
        print("\nAST:")
        print(PrettyPrinter.print_ast(program.root))

    if print_env:
        print("\nEnvironments:")
        print(PrettyPrinter.print_environments(program.environments))

    if dump_ast_path:
        try:
            with open(dump_ast_path, "w", encoding="utf-8") as fh:
                json.dump(program_to_json(program), fh, indent=2)
            print(f"Wrote AST JSON to {dump_ast_path}")
        except (OSError, RecursionError) as e:
            print(f"Failed to write AST JSON to {dump_ast_path}: {e}")

    # Optionally render visualization via Graphviz
    if viz_path:
        try:
            write_and_render(program, viz_path, fmt=viz_format)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}")
        except Exception as e:
            print(f"Failed to render AST visualization to {viz_path}: {e}")

    return True


def interactive_mode(
    print_tokens: bool = False,
    print_ast: bool = True,
    print_env: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Run interactive parser REPL reading programs from stdin."""
    print("\nInteractive Parser Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nEnter program or expression: ").strip()
            if text.lower() in ("quit", "exit", "q"):
                print("Goodbye!")
                break

            if not text:
                continue

            process_program(
                text,
                print_tokens=print_tokens,
                print_ast=print_ast,
                print_env=print_env,
                max_depth=max_depth,
            )

        except (KeyboardInterrupt, EOFError):
            print("\n\nExiting...")
            break


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lex and parse a source file or read programs interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--file", "-f", dest="file", help="Path to source file to process"
    )
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--no-ast", dest="print_ast", action="store_false", help="Do not print AST"
    )
    parser.add_argument(
        "--print-env",
        dest="print_env",
        action="store_true",
        help="Print environment frames and their bindings",
    )
    parser.set_defaults(print_tokens=False, print_ast=True, print_env=False)
    parser.add_argument(
        "--dump-ast", dest="dump_ast", help="Path to write program+environments JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum nesting depth of parenthesized groups",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.interactive:
        interactive_mode(
            print_tokens=args.print_tokens,
            print_ast=args.print_ast,
            print_env=args.print_env,
            max_depth=args.max_depth,
        )
        return 0

    if not args.file:
        parser.print_help()
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as e:
        print(f"Could not open file at {args.file}: {e}")
        return 1

    ok = process_program(
        text,
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        print_env=args.print_env,
        dump_ast_path=args.dump_ast,
        viz_path=args.viz_ast,
        viz_format=args.viz_format,
        max_depth=args.max_depth,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
