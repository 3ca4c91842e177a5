# Area: Selection
"""
quiz_battle._selection.validator — Structural question validation
==================================================================

Checks that a question has a prompt, a known type and a well-formed
answer key for that type. Returns a list of errors (empty if valid);
never raises.
"""

from __future__ import annotations
from typing import Any, Dict, List

from .._shared.questions import get_field, parse_question_type, prompt_text
from .validator_schemas import ANSWER_KEY_SCHEMAS


# ══════════════════════════════════════════════════════════════
# FIELD-LEVEL VALIDATION HELPERS
# ══════════════════════════════════════════════════════════════

def _type_label(expected: Any) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _check_fields(schema: Dict, values: Dict[str, Any], prefix: str) -> List[str]:
    """Check required fields, their types and their constraints."""
    errors: List[str] = []

    for name in schema.get("required", []):
        if values.get(name) is None:
            errors.append(f"{prefix}missing required field '{name}'")

    for name, expected in schema.get("types", {}).items():
        value = values.get(name)
        if value is None:
            continue
        if not isinstance(value, expected):
            errors.append(
                f"{prefix}field '{name}' has wrong type: expected "
                f"{_type_label(expected)}, got {type(value).__name__}"
            )

    if errors:
        return errors

    for name, constraints in schema.get("constraints", {}).items():
        value = values.get(name)
        if value is None:
            continue
        errors.extend(_apply_constraints(name, value, constraints, values, prefix))

    return errors


def _apply_constraints(
    name: str, value: Any, constraints: Dict, values: Dict[str, Any], prefix: str
) -> List[str]:
    errors: List[str] = []

    if "min_length" in constraints and len(value) < constraints["min_length"]:
        errors.append(
            f"{prefix}field '{name}' needs at least {constraints['min_length']} item(s)"
        )

    if constraints.get("non_blank") and isinstance(value, str) and not value.strip():
        errors.append(f"{prefix}field '{name}' is blank")

    if "one_of" in constraints and value not in constraints["one_of"]:
        errors.append(f"{prefix}field '{name}' must be one of {constraints['one_of']}")

    if "member_of" in constraints:
        pool = values.get(constraints["member_of"]) or []
        options = [c.strip() for c in pool if isinstance(c, str)]
        if isinstance(value, str) and value.strip() not in options:
            errors.append(
                f"{prefix}field '{name}' must be one of the '{constraints['member_of']}'"
            )

    return errors


def _check_list_items(item_schemas: Dict, values: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for name, item_schema in item_schemas.items():
        items = values.get(name)
        if not isinstance(items, list):
            continue
        for i, item in enumerate(items):
            label = f"{name}[{i}]: "
            if not isinstance(item, dict):
                errors.append(f"{label}expected dict, got {type(item).__name__}")
                continue
            errors.extend(_check_fields(item_schema, item, label))
    return errors


# ══════════════════════════════════════════════════════════════
# MAIN VALIDATION FUNCTION
# ══════════════════════════════════════════════════════════════

def validate_question(question: Any, index: int = 0) -> List[str]:
    """
    Validate one question's structure.

    Parameters
    ----------
    question : Any
        The question payload.
    index : int
        Position in the pool, used in error messages (1-based there).

    Returns
    -------
    List[str]
        Validation error messages. Empty if valid.
    """
    label = f"Question {index + 1}: "

    if not isinstance(question, dict):
        return [f"{label}expected dict, got {type(question).__name__}"]

    if not prompt_text(question):
        return [f"{label}question text is required"]

    raw_type = question.get("type")
    if raw_type is None:
        return [f"{label}question type is required"]
    qtype = parse_question_type(raw_type)
    if qtype is None:
        return [f"{label}invalid question type {raw_type!r}"]

    schema = ANSWER_KEY_SCHEMAS[qtype]
    fields = set(schema.get("required", [])) | set(schema.get("types", {}))
    values = {name: get_field(question, name) for name in fields}
    # Choices are referenced by member_of even when not required
    values.setdefault("choices", get_field(question, "choices"))

    errors = _check_fields(schema, values, label)
    if not errors and "list_item_schema" in schema:
        item_errors = _check_list_items(schema["list_item_schema"], values)
        errors.extend(f"{label}{e}" for e in item_errors)
    return errors


def is_valid_question(question: Any) -> bool:
    return not validate_question(question)
