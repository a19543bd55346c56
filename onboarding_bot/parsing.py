from __future__ import annotations

from typing import Final

from .errors import FormatError
from .models import ParsedIdentity

FORMAT_HINT: Final[str] = "Message must be in the format:\n`Full Name`\n`class/division`"


def parse(raw_text: str | None) -> ParsedIdentity:
    """Parse a two-line verification message.

    Line one is the full name, line two is ``class/division``. Raises
    :class:`FormatError` describing the first rule the text breaks.
    """
    lines = (raw_text or "").strip().split("\n")
    if len(lines) != 2:
        raise FormatError(f"Expected 2 lines, got {len(lines)}")

    full_name = lines[0].strip()
    if not full_name:
        raise FormatError("Full name is empty")

    tokens = lines[1].split("/")
    if len(tokens) != 2:
        raise FormatError("Second line must be exactly one class/division pair")

    class_id, division = (token.strip() for token in tokens)
    if not class_id:
        raise FormatError("Class is empty")
    if not division:
        raise FormatError("Division is empty")

    return ParsedIdentity(full_name=full_name, class_id=class_id, division=division)
