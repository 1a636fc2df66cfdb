from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from terminal_input.prompts import prompt_line, prompt_password_line, prompt_yes_no
from terminal_input.utils import parse_answer

LOG_FILE_ENV_VAR = "TERMINAL_INPUT_LOG_FILE"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Exit statuses
EXIT_YES = 0
EXIT_NO = 1
EXIT_EOF = 3
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


def setup_logging(log_file: Optional[str] = None, level: str = "INFO") -> None:
    """
    Configures the root logger.

    Logs only ever go to a file: prompts redraw stderr in place, so a stream
    handler there would garble the screen.
    """
    handlers_list: List[logging.Handler] = []

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")  # Append mode
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        handlers_list.append(file_handler)
    else:
        handlers_list.append(logging.NullHandler())

    logging.basicConfig(level=getattr(logging, level), handlers=handlers_list, force=True)


def _default_answer(value: str) -> bool:
    try:
        return parse_answer(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terminal-input",
        description="Ask the user a question on the terminal and print the answer to stdout.",
    )
    parser.add_argument(
        "--log-file",
        default=os.environ.get(LOG_FILE_ENV_VAR),
        help=f"Append debug logs to this file (default: ${LOG_FILE_ENV_VAR}, if set).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        help="Minimum level written to the log file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    yes_no_parser = subparsers.add_parser("yes-no", help="Ask a yes/no question. Exits 0 for yes, 1 for no, 3 if input closes.")
    yes_no_parser.add_argument("question")
    yes_no_parser.add_argument(
        "--default",
        type=_default_answer,
        default=None,
        help="Answer used when Enter is pressed (yes/no). Without it, Enter is ignored.",
    )

    line_parser = subparsers.add_parser("line", help="Read a line of text.")
    line_parser.add_argument("question")

    password_parser = subparsers.add_parser("password", help="Read a line of masked text.")
    password_parser.add_argument("question")
    password_parser.add_argument(
        "--mask",
        default="*",
        help="Character shown per typed character. An empty string echoes the input.",
    )
    return parser


async def run_command(args: argparse.Namespace) -> int:
    if args.command == "yes-no":
        answer = await prompt_yes_no(args.question, default_value=args.default)
        print("yes" if answer else "no")
        return EXIT_YES if answer else EXIT_NO
    if args.command == "line":
        print(await prompt_line(args.question))
        return 0
    if args.command == "password":
        print(await prompt_password_line(args.question, mask_character=args.mask))
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_file, args.log_level)
    logging.info("Running '%s' prompt.", args.command)

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        logging.info("Prompt cancelled by user.")
        return EXIT_INTERRUPTED
    except EOFError:
        logging.info("Prompt input stream closed.")
        return EXIT_EOF
    except RuntimeError as e:
        logging.error(f"Prompt failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
