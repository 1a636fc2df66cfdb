"""
Keystroke source for interactive prompts.

Wraps a prompt_toolkit ``Input`` in raw mode and turns its ``KeyPress`` objects
into ``KeyEvent`` values the prompt state machines understand.
"""

from __future__ import annotations

import logging
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Callable, List, Optional

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import Output, create_output

logger = logging.getLogger(__name__)

# Friendly names for the control keys the prompts react to.
# Both "\x7f" and "\b" are parsed as Ctrl-H by prompt_toolkit.
SPECIAL_KEY_NAMES = {
    Keys.ControlM: "return",
    Keys.ControlJ: "enter",
    Keys.ControlH: "backspace",
    Keys.ControlI: "tab",
}


@dataclass(frozen=True)
class KeyEvent:
    """One physical keystroke."""

    character: str
    key_name: Optional[str]
    sequence: str

    @classmethod
    def from_key_press(cls, key_press: KeyPress) -> "KeyEvent":
        key = key_press.key
        data = key_press.data

        if isinstance(key, Keys):
            key_name = SPECIAL_KEY_NAMES.get(key, key.value)
            character = data if len(data) == 1 else ""
            return cls(character=character, key_name=key_name, sequence=data)

        if key == " ":
            key_name: Optional[str] = "space"
        elif len(key) == 1 and key.isascii() and key.isalnum():
            key_name = key.lower()
        else:
            key_name = None
        return cls(character=data, key_name=key_name, sequence=data)


def create_terminal_input() -> Input:
    """
    Creates a prompt_toolkit input reading from the process's stdin.

    Raises:
        RuntimeError: If stdin is missing or is not an interactive terminal.
    """
    if sys.stdin is None or not sys.stdin.isatty():
        raise RuntimeError("Interactive prompts require standard input to be a terminal.")
    return create_input(sys.stdin)


def create_error_output() -> Output:
    """Creates a prompt_toolkit output that renders to stderr."""
    return create_output(stdout=sys.stderr)


class KeypressSubscription:
    """
    Owns raw mode and the event loop registration for one ``Input``.

    ``acquire()`` switches the terminal into raw mode and starts delivering
    ``callback`` whenever keys are ready; ``release()`` undoes both. Release
    is idempotent, so it can be called from ``resolve()`` and again from a
    ``finally`` block.
    """

    def __init__(self, input: Input, callback: Callable[[], None]):
        self.input = input
        self._callback = callback
        self._stack: Optional[ExitStack] = None

    @property
    def active(self) -> bool:
        return self._stack is not None

    def acquire(self) -> None:
        if self._stack is not None:
            raise RuntimeError("Keypress subscription is already active.")
        stack = ExitStack()
        try:
            stack.enter_context(self.input.raw_mode())
            stack.enter_context(self.input.attach(self._callback))
        except BaseException:
            stack.close()
            raise
        self._stack = stack
        logger.debug("Keypress subscription acquired.")

    def release(self) -> None:
        if self._stack is None:
            return
        stack, self._stack = self._stack, None
        stack.close()
        logger.debug("Keypress subscription released; terminal mode restored.")

    def drain(self) -> List[KeyEvent]:
        """Returns every key that is ready, in arrival order."""
        return [KeyEvent.from_key_press(key_press) for key_press in self.input.read_keys()]

    @property
    def closed(self) -> bool:
        return self.input.closed

    def __enter__(self) -> "KeypressSubscription":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
