"""
Handles yes/no confirmation prompts driven by single keystrokes.
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from prompt_toolkit.formatted_text import AnyFormattedText

from terminal_input.formatting import write_question
from terminal_input.keypress import KeyEvent

if TYPE_CHECKING:
    from terminal_input.keyboard_loop import KeyboardLoop

logger = logging.getLogger(__name__)

ENTER_KEY_NAMES = ("enter", "return")


def option_suffix(default_value: Optional[bool]) -> str:
    """Returns the bracketed hint shown after the question, e.g. "(Y/n)"."""
    if default_value is True:
        return "(Y/n)"
    if default_value is False:
        return "(y/N)"
    return "(y/n)"


class YesNoPrompt:
    """
    Two-outcome confirmation. Resolves on 'y' or 'n', or on Enter when a
    default answer was configured.
    """

    def __init__(self, question: AnyFormattedText, default_value: Optional[bool] = None):
        self.question = question
        self.default_value = default_value
        self.result: Optional[bool] = None

    def on_start(self, loop: KeyboardLoop) -> None:
        write_question(loop.output, self.question, suffix=option_suffix(self.default_value))

    def on_keypress(self, loop: KeyboardLoop, event: KeyEvent) -> None:
        if self.result is not None:
            return

        if event.key_name == "y":
            self.result = True
        elif event.key_name == "n":
            self.result = False
        elif event.key_name in ENTER_KEY_NAMES and self.default_value is not None:
            self.result = self.default_value

        if self.result is not None:
            loop.output.write("Yes\n" if self.result else "No\n")
            logger.debug("Confirmation answered: %s", self.result)
            loop.resolve(self.result)
