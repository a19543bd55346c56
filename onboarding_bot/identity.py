from __future__ import annotations

from .models import NormalizedIdentity, ParsedIdentity


def capitalize_word(word: str) -> str:
    """Upper-case the first character and lower-case the rest."""
    return word[:1].upper() + word[1:].lower()


def title_case_name(full_name: str) -> str:
    # Split on single spaces only; doubled spaces survive as empty words.
    return " ".join(capitalize_word(word) for word in full_name.split(" "))


def normalize(parsed: ParsedIdentity) -> NormalizedIdentity:
    return NormalizedIdentity(
        display_name=title_case_name(parsed.full_name),
        class_id=parsed.class_id,
        division=capitalize_word(parsed.division),
    )
