from terminal_input.confirmations import YesNoPrompt
from terminal_input.keyboard_loop import KeyboardLoop, KeypressHandler, LoopState
from terminal_input.keypress import KeyEvent
from terminal_input.password import MaskedLinePrompt, RenderState
from terminal_input.prompts import prompt_line, prompt_password_line, prompt_yes_no

__all__ = [
    "KeyEvent",
    "KeyboardLoop",
    "KeypressHandler",
    "LoopState",
    "MaskedLinePrompt",
    "RenderState",
    "YesNoPrompt",
    "prompt_line",
    "prompt_password_line",
    "prompt_yes_no",
]
