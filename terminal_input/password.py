"""
Masked single-line input (password prompts).

The whole buffer is redrawn after every edit. That keeps the cursor math
simple when the input wraps across terminal rows: the prompt only has to
remember how many rows it printed last time and where the input started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from prompt_toolkit.formatted_text import AnyFormattedText
from prompt_toolkit.output import Output

from terminal_input.formatting import last_line_width, write_question
from terminal_input.keypress import KeyEvent

if TYPE_CHECKING:
    from terminal_input.keyboard_loop import KeyboardLoop

logger = logging.getLogger(__name__)

DEFAULT_MASK_CHARACTER = "*"
DEFAULT_WRAP_WIDTH = 80
# Narrower terminals would never leave room for a character before wrapping.
MIN_WRAP_WIDTH = 2


@dataclass
class RenderState:
    """Where the typed input lives on screen, and what has been typed."""

    start_column: int = 0
    printed_row_count: int = 0
    last_printed_length: int = 0
    buffer: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(self.buffer)


def is_printable(event: KeyEvent) -> bool:
    """
    Decides whether a keystroke inserts a character.

    Named keys such as "return" or "left" are not printable, except "space".
    Single-character names (letters and digits) are.
    """
    if event.character == "":
        return False
    if event.key_name and len(event.key_name) != 1 and event.key_name != "space":
        return False
    if not event.key_name and not event.sequence:
        return False
    return True


def get_wrap_width(output: Output) -> int:
    """Current terminal column count, re-read on every call."""
    try:
        columns = output.get_size().columns
    except OSError:
        columns = 0
    if not columns:
        columns = DEFAULT_WRAP_WIDTH
    return max(columns, MIN_WRAP_WIDTH)


def render_masked_text(
    buffer: Sequence[str], mask_character: str, start_column: int, width: int
) -> Tuple[str, int]:
    """
    Builds the text that displays ``buffer`` starting at ``start_column``.

    Args:
        buffer: The characters typed so far.
        mask_character: Glyph printed per character; "" prints the characters themselves.
        start_column: Column where the first character goes.
        width: Terminal width in columns.

    Returns:
        A tuple of the text to write and the number of line breaks it contains.
    """
    pieces: List[str] = []
    column = start_column
    rows = 0
    for character in buffer:
        pieces.append(character if mask_character == "" else mask_character)
        column += 1
        # Leave the final column empty; terminals disagree on when they wrap there.
        if column >= width - 1:
            column = 0
            rows += 1
            pieces.append("\n")
    return "".join(pieces), rows


class MaskedLinePrompt:
    """
    Reads one line, echoing a mask character per typed character.

    Supports appending and backspace only. Enter resolves with the typed text.
    """

    def __init__(self, question: AnyFormattedText, mask_character: Optional[str] = DEFAULT_MASK_CHARACTER):
        self.question = question
        if mask_character is None:
            mask_character = DEFAULT_MASK_CHARACTER
        # Longer masks are cut down to their first character, not rejected.
        self.mask_character = mask_character[:1]
        self.render_state = RenderState()

    @property
    def result(self) -> str:
        return self.render_state.text

    def on_start(self, loop: KeyboardLoop) -> None:
        output = loop.output
        self.render_state = RenderState()

        output.write_raw("\r")
        output.erase_end_of_line()
        fragments = write_question(output, self.question)
        self.render_state.start_column = last_line_width(fragments) % get_wrap_width(output)

    def on_keypress(self, loop: KeyboardLoop, event: KeyEvent) -> None:
        if loop.state.resolved:
            return

        state = self.render_state
        if event.key_name in ("enter", "return"):
            loop.output.write_raw("\n")
            logger.debug("Masked line entered (%d characters).", len(state.buffer))
            loop.resolve(state.text)
            return

        if event.key_name == "backspace":
            if state.buffer:
                state.buffer.pop()
        elif is_printable(event):
            state.buffer.append(event.character)
        else:
            return

        self.redraw(loop)

    def redraw(self, loop: KeyboardLoop) -> None:
        """Repaints the whole buffer from ``start_column``, clearing leftovers after a shrink."""
        state = self.render_state
        output = loop.output
        needs_clear = len(state.buffer) < state.last_printed_length

        loop.hide_cursor()
        try:
            # Back to the first row of the input.
            while state.printed_row_count > 0:
                output.write_raw("\r")
                if needs_clear:
                    output.erase_end_of_line()
                output.cursor_up(1)
                state.printed_row_count -= 1

            output.write_raw("\r")
            output.cursor_forward(state.start_column)

            text, rows = render_masked_text(
                state.buffer, self.mask_character, state.start_column, get_wrap_width(output)
            )
            state.printed_row_count = rows
            output.write(text)

            if needs_clear:
                output.erase_end_of_line()
        finally:
            loop.unhide_cursor()

        state.last_printed_length = len(state.buffer)
