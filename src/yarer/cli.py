"""Command-line interface for Yarer: one-shot expressions and an interactive shell."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from yarer import __version__
from yarer.errors import YarerError
from yarer.session import DEFAULT_PRECISION, Session

logger = logging.getLogger(__name__)

CONFIG_NAME = "yarer.toml"
HISTORY_FILE = Path.home() / ".yarer_history"
EXIT_COMMANDS = frozenset({"quit", "exit"})


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    expressions: list[str]
    variables: dict[str, Any]
    precision: int
    quiet: bool
    prompt: str
    debug: bool
    log_level: str


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="yarer",
        description="Yet another RPN expression resolver",
    )
    p.add_argument(
        "-e",
        "--expr",
        action="append",
        default=[],
        metavar="EXPR",
        help="Evaluate EXPR and exit (repeatable, shares one session)",
    )
    p.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a variable before evaluating (repeatable)",
    )
    p.add_argument("-q", "--quiet", action="store_true", help="Do not print the banner")
    p.add_argument(
        "--precision",
        type=int,
        default=None,
        metavar="DIGITS",
        help=f"Significant digits for inexact division (default: {DEFAULT_PRECISION})",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--prompt", default=None, help="Interactive prompt (default: '> ')")
    p.add_argument("--debug", action="store_true", help="Dump tokens and postfix to stderr")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING, DEBUG with --debug)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def parse_define_arg(s: str) -> tuple[str, str]:
    """Parse a NAME=VALUE string into (name, value)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid define format (expected NAME=VALUE): {s}")
    name, _, value = s.partition("=")
    return name.strip(), value.strip()


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, search_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir if search_dir is not None else Path("."))

    cfg_session = config.get("session")
    cfg_shell = config.get("shell")

    # Precision: default < config < CLI
    precision = DEFAULT_PRECISION
    if isinstance(cfg_session, dict):
        cfg_precision = cfg_session.get("precision")
        if isinstance(cfg_precision, int) and not isinstance(cfg_precision, bool):
            precision = cfg_precision
    if args.precision is not None:
        precision = args.precision
    if precision < 1:
        raise argparse.ArgumentTypeError(f"precision must be positive, got {precision}")

    # Variables: config < CLI
    variables: dict[str, Any] = {}
    cfg_vars = config.get("variables")
    if isinstance(cfg_vars, dict):
        for k, v in cfg_vars.items():
            variables[str(k)] = v
    for raw in args.define:
        name, value = parse_define_arg(raw)
        variables[name] = value

    quiet = args.quiet
    prompt = "> "
    if isinstance(cfg_shell, dict):
        if cfg_shell.get("quiet") is True:
            quiet = True
        cfg_prompt = cfg_shell.get("prompt")
        if isinstance(cfg_prompt, str):
            prompt = cfg_prompt
    if args.prompt is not None:
        prompt = args.prompt

    log_level = args.log_level or ("DEBUG" if args.debug else "WARNING")

    return CliOptions(
        expressions=list(args.expr),
        variables=variables,
        precision=precision,
        quiet=quiet,
        prompt=prompt,
        debug=args.debug,
        log_level=log_level,
    )


def build_session(options: CliOptions) -> Session:
    """Create the shared session and apply predefined variables."""
    session = Session(precision=options.precision)
    for name, value in options.variables.items():
        try:
            session.set(name, value)
        except (TypeError, ValueError) as exc:
            raise argparse.ArgumentTypeError(f"invalid value for {name}: {exc}") from None
    return session


def run_line(
    session: Session,
    line: str,
    options: CliOptions,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> bool:
    """Evaluate one line, print the value or the error. Returns True on success."""
    from yarer.debug import dump_postfix, dump_tokens
    from yarer.lexer import tokenize

    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    try:
        if options.debug:
            dump_tokens(tokenize(line), file=err)
        resolver = session.process(line)
        if options.debug:
            dump_postfix(resolver.postfix, file=err)
        value = resolver.resolve()
    except YarerError as exc:
        print(f"Error: {exc.message}", file=err)
        return False

    if resolver.target is not None:
        print(f"{resolver.target} = {value}", file=out)
    else:
        print(value, file=out)
    return True


def _read_lines(stdin: TextIO, prompt: str, interactive: bool) -> Iterator[str]:
    if not interactive:
        yield from stdin
        return
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            print("quit", file=sys.stderr)
            return


def _load_history() -> bool:
    """Enable readline history if the platform provides it."""
    try:
        import readline
    except ImportError:
        return False
    try:
        readline.read_history_file(HISTORY_FILE)
    except OSError as exc:
        logger.debug("no history loaded from %s: %s", HISTORY_FILE, exc)
    return True


def _save_history() -> None:
    import readline

    try:
        readline.write_history_file(HISTORY_FILE)
    except OSError as exc:
        logger.warning("could not save history to %s: %s", HISTORY_FILE, exc)


def repl(session: Session, options: CliOptions, stdin: TextIO | None = None) -> int:
    """Read-eval-print loop over *stdin* with one shared session."""
    stdin = stdin if stdin is not None else sys.stdin
    interactive = stdin is sys.stdin and stdin.isatty()

    if not options.quiet:
        print(f"Yarer v{__version__} - Yet Another RPN Expression Resolver.", file=sys.stderr)
        print("Type 'quit' to exit.", file=sys.stderr)

    history = interactive and _load_history()
    try:
        for raw in _read_lines(stdin, options.prompt, interactive):
            line = raw.strip()
            if not line:
                continue
            if line.lower() in EXIT_COMMANDS:
                break
            run_line(session, line, options)
    finally:
        if history:
            _save_history()
    return 0


def configure_logging(options: CliOptions) -> None:
    logging.basicConfig(
        level=getattr(logging, options.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
        configure_logging(options)
        session = build_session(options)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.expressions:
        for expression in options.expressions:
            if not run_line(session, expression, options):
                return 1
        return 0

    return repl(session, options)
