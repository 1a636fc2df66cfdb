from __future__ import annotations

from typing import Optional

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import (
    AnyFormattedText,
    FormattedText,
    StyleAndTextTuples,
    to_formatted_text,
)
from prompt_toolkit.formatted_text.utils import fragment_list_width, split_lines
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style

MARKER = "==>"

PROMPT_STYLE = Style.from_dict(
    {
        "marker": "ansigreen",
        "question": "bold",
        "suffix": "bold",
    }
)


def question_fragments(question: AnyFormattedText, suffix: Optional[str] = None) -> FormattedText:
    """
    Builds the prompt prefix: a green marker, the bold question, an optional
    bold suffix and a trailing space.
    """
    fragments: StyleAndTextTuples = [("class:marker", MARKER), ("", " ")]
    fragments.extend(to_formatted_text(question, style="class:question"))
    if suffix:
        fragments.extend([("", " "), ("class:suffix", suffix)])
    fragments.append(("", " "))
    return FormattedText(fragments)


def last_line_width(fragments: StyleAndTextTuples) -> int:
    """
    Display width of the last line of ``fragments``.

    Styles take no columns; wide characters count double.
    """
    lines = list(split_lines(fragments))
    return fragment_list_width(lines[-1]) if lines else 0


def write_question(output: Output, question: AnyFormattedText, suffix: Optional[str] = None) -> FormattedText:
    """Renders the prompt prefix on ``output`` and returns the fragments written."""
    fragments = question_fragments(question, suffix)
    print_formatted_text(fragments, end="", style=PROMPT_STYLE, output=output)
    return fragments
