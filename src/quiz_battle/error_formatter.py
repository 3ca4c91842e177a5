# Area: Shared
"""Error formatting for structured battle error logs and UI messages."""

from __future__ import annotations
import json
from typing import Any, Dict, Optional


def format_error_block(
    error_type: str,
    operation: str,
    join_code: Optional[str],
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for log output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " BATTLE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Operation:    {operation}",
    ]

    if join_code is not None:
        lines.append(f" Join Code:    {join_code}")

    lines.append(f" Message:      {message}")

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"


def format_battle_error(error: Any) -> str:
    """
    Build the one-line message shown to a player for a failed operation.

    Accepts any BattleError. NOT_ENOUGH_PLAYERS uses the counts in
    ``details`` to say how many more players are needed.
    """
    code = getattr(error, "code", None)
    details = getattr(error, "details", {}) or {}
    code_value = getattr(code, "value", None)

    if code_value == "NOT_ENOUGH_PLAYERS":
        needed = details.get("min_players", 0) - details.get("player_count", 0)
        if needed > 0:
            noun = "player" if needed == 1 else "players"
            return f"Need {needed} more {noun} to start"
        not_ready = details.get("not_ready", [])
        if not_ready:
            return f"Waiting for {len(not_ready)} player(s) to get ready"

    if code_value == "TOO_MANY_PLAYERS" and "max_players" in details:
        return f"Battle is full ({details['max_players']} players max)"

    if code_value == "INVALID_STATUS" and "status" in details:
        return f"Battle is already {str(details['status']).replace('_', ' ')}"

    message = getattr(error, "message", None)
    return message or str(error)
