"""
Public entry points for asking the user something on the terminal.

All prompts render on stderr and are coroutines, so the caller's event loop
keeps running other tasks while the user types.
"""

from __future__ import annotations

from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import AnyFormattedText
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.input import Input
from prompt_toolkit.output import Output

from terminal_input.confirmations import YesNoPrompt
from terminal_input.formatting import PROMPT_STYLE, question_fragments
from terminal_input.keyboard_loop import KeyboardLoop
from terminal_input.keypress import create_error_output, create_terminal_input
from terminal_input.password import DEFAULT_MASK_CHARACTER, MaskedLinePrompt


async def prompt_yes_no(
    question: AnyFormattedText,
    default_value: Optional[bool] = None,
    *,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> bool:
    """
    Asks a yes/no question answered with a single keystroke.

    Args:
        question: The question to display.
        default_value: Answer used when the user just presses Enter. With no
            default, Enter is ignored until 'y' or 'n' is pressed.
        input: Keystroke source. Defaults to the process's stdin.
        output: Where to render. Defaults to stderr.

    Returns:
        True for yes, False for no.
    """
    prompt = YesNoPrompt(question, default_value=default_value)
    return await KeyboardLoop(prompt, input=input, output=output).start()


async def prompt_line(
    question: AnyFormattedText,
    *,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> str:
    """
    Reads one line of plain text.

    The line is returned exactly as entered (no trimming). Each call uses a
    fresh session, so no history is shared between calls.
    """
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        style=PROMPT_STYLE,
        input=input if input is not None else create_terminal_input(),
        output=output if output is not None else create_error_output(),
    )
    return await session.prompt_async(question_fragments(question))


async def prompt_password_line(
    question: AnyFormattedText,
    mask_character: Optional[str] = DEFAULT_MASK_CHARACTER,
    *,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> str:
    """
    Reads one line without showing it.

    Args:
        question: The question to display.
        mask_character: Shown once per typed character. An empty string echoes
            the text as typed; longer strings are cut to their first character.
        input: Keystroke source. Defaults to the process's stdin.
        output: Where to render. Defaults to stderr.

    Returns:
        The typed text.
    """
    prompt = MaskedLinePrompt(question, mask_character=mask_character)
    return await KeyboardLoop(prompt, input=input, output=output).start()
