from __future__ import annotations

from typing import Union

YES_ANSWERS = ("y", "yes", "true")
NO_ANSWERS = ("n", "no", "false")


def parse_answer(value: Union[str, bool, None]) -> bool:
    """
    Converts a yes/no answer to a boolean, strictly.
    'y', 'yes', 'true' (case-insensitive) -> True
    'n', 'no', 'false' (case-insensitive) -> False
    boolean -> itself
    Other string values -> ValueError
    Other types (including None) -> TypeError
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        val_lower = value.strip().lower()
        if val_lower in YES_ANSWERS:
            return True
        if val_lower in NO_ANSWERS:
            return False
        raise ValueError(f"Cannot convert '{value}' to an answer. Expected yes or no.")
    raise TypeError(
        f"Cannot convert value of type {type(value)} to an answer. Expected str or bool."
    )
