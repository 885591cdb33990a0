"""
Interactive read loop for vvlang.

Reads one entry at a time, feeds it to a fresh Lexer or Parser and prints the
result. Lines ending with an unclosed `{` are continued with a `... ` prompt until
the braces balance.

Modes:
    program: parse the entry and print each statement, then any diagnostics.
    tokens: lex the entry and print every token up to and including `EOF`.

Commands:
    exit(), exit, quit   leave the REPL
    :tokens / :program   switch mode
    :json                toggle JSON output of parsed programs
    :verbose             toggle DEBUG logging
"""

import io
import logging
import traceback

from vvlang.vv_ast import Program, to_json
from vvlang.vv_lexer import Lexer
from vvlang.vv_parser import Parser

EXIT_COMMANDS = ("exit()", "exit", "quit")
MODES = ("program", "tokens")


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def set_verbose(verbose: bool) -> None:
    logging.getLogger("vvlang").setLevel(logging.DEBUG if verbose else logging.WARNING)


def show_tokens(src: str) -> None:
    for tok in Lexer(src, emit_newlines=True):
        print(repr(tok))


def show_program(src: str, as_json: bool = False) -> None:
    parser = Parser(src)
    program: Program = parser.parse_program()
    if as_json:
        print(to_json(program))
    else:
        for stmt in program.statements:
            print(f"[{type(stmt).__name__}] >>> {stmt}")
    for diagnostic in parser.diagnostics:
        print(f"[error] >>> {diagnostic}")


def read_entry() -> str | None:
    """Read one entry, continuing while braces are unbalanced. None means exit."""
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in EXIT_COMMANDS and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            return "\n".join(src_lines)


def start_repl(
    mode: str = "program", verbose: bool = False, as_json: bool = False
) -> None:
    if mode not in MODES:
        raise ValueError(f"Unknown REPL mode: {mode}")
    print(f"Welcome to vvlang! [mode={mode}]. Type 'exit()' to leave.")
    if verbose:
        set_verbose(True)

    while True:
        try:
            src = read_entry()
            if src is None:
                print("Exiting vvlang REPL.")
                return
            command = src.strip()
            if not command:
                continue
            if command in (":tokens", ":program"):
                mode = command[1:]
                print(f"[mode] >>> {mode}")
                continue
            if command == ":json":
                as_json = not as_json
                print(f"[mode] >>> JSON output {'ON' if as_json else 'OFF'}")
                continue
            if command == ":verbose":
                verbose = not verbose
                set_verbose(verbose)
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                if mode == "tokens":
                    show_tokens(src)
                else:
                    show_program(src, as_json=as_json)
            except Exception:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting vvlang REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
