"""Cleanup and validation of free-text task input."""

import re
import unicodedata

from ..errors import InputValidationError

MIN_INPUT_LENGTH = 2
MAX_INPUT_LENGTH = 500

# Emoji building blocks that are not in a symbol category
_EMOJI_COMPONENTS = {
    "\u200d",  # zero width joiner
    "\u20e3",  # combining enclosing keycap
    "\ufe0e",  # text presentation selector
    "\ufe0f",  # emoji presentation selector
}


def normalize_input(text: str) -> str:
    """Trim, collapse whitespace runs to one space, and cap blank lines at two."""
    processed = text.strip()
    processed = re.sub(r"\s+", " ", processed)
    processed = re.sub(r"\n{3,}", "\n\n", processed)
    return processed


def _is_filler(char: str) -> bool:
    """Whitespace, punctuation and emoji carry no task meaning."""
    if char.isspace() or char in _EMOJI_COMPONENTS:
        return True
    category = unicodedata.category(char)
    # Emoji live in So, skin tone modifiers in Sk; math and currency symbols count as content
    return category[0] == "P" or category in ("So", "Sk")


def validate_input(text: str) -> None:
    """Check cleaned input, raising InputValidationError on the first broken rule."""
    if not text or not text.strip():
        raise InputValidationError("Please enter what you need to do.", error="Content required")

    if len(text.strip()) < MIN_INPUT_LENGTH:
        raise InputValidationError(
            f"Tasks need at least {MIN_INPUT_LENGTH} characters.",
            error="Minimum 2 characters",
        )

    if len(text) > MAX_INPUT_LENGTH:
        raise InputValidationError(
            f"Tasks can be at most {MAX_INPUT_LENGTH} characters.",
            error="Maximum 500 characters",
        )

    if not any(not _is_filler(char) for char in text):
        raise InputValidationError(
            "Input must contain letters or numbers, not only punctuation or emoji.",
            error="Must contain meaningful content",
        )
