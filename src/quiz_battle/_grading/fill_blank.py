# Area: Grading
"""Fill-in-blank answer matching with alternatives and case policy."""

from __future__ import annotations
from typing import Any, Dict, List

from .._shared.questions import get_field, split_alternatives


def accepted_answers(question: Dict[str, Any]) -> List[str]:
    """
    All accepted answers for a fill-in-blank question.

    The primary ``answer`` may pack alternatives as "colour|color";
    ``alternativeAnswers`` adds more. Everything is trimmed, empties
    are dropped and order is preserved (primary first).
    """
    accepted = split_alternatives(get_field(question, "answer"))

    extra = get_field(question, "alternativeAnswers", [])
    if isinstance(extra, str):
        extra = split_alternatives(extra)
    if isinstance(extra, (list, tuple)):
        for alt in extra:
            if isinstance(alt, str) and alt.strip():
                accepted.append(alt.strip())

    seen = set()
    unique = []
    for item in accepted:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def is_case_sensitive(question: Dict[str, Any]) -> bool:
    """Only an explicit boolean True turns case sensitivity on."""
    return get_field(question, "caseSensitive", False) is True


def matches_fill_blank(question: Dict[str, Any], submitted: str) -> bool:
    """True if the trimmed submission equals any accepted answer."""
    candidate = submitted.strip()
    accepted = accepted_answers(question)
    if is_case_sensitive(question):
        return candidate in accepted
    folded = candidate.casefold()
    return any(folded == answer.casefold() for answer in accepted)
