from __future__ import annotations

import os
from dataclasses import dataclass


def _read_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"0", "false", "off", "no"}:
        return False
    if normalized in {"1", "true", "on", "yes"}:
        return True
    return default


def _read_int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


@dataclass(frozen=True)
class PlannerConfig:
    has_trello: bool = True
    has_hetzner: bool = True
    has_claude_containers: bool = True
    keep_recent_count: int = 10
    quick_summary_max_length: int = 500
    planner_max_tokens: int = 2048
    summary_max_tokens: int = 1024

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        return cls(
            has_trello=_read_bool_env("PLANNER_HAS_TRELLO", True),
            has_hetzner=_read_bool_env("PLANNER_HAS_HETZNER", True),
            has_claude_containers=_read_bool_env("PLANNER_HAS_CLAUDE_CONTAINERS", True),
            keep_recent_count=_read_int_env("SUMMARY_KEEP_RECENT", 10, minimum=1),
            quick_summary_max_length=_read_int_env("SUMMARY_QUICK_MAX_LENGTH", 500, minimum=1),
            planner_max_tokens=_read_int_env("PLANNER_MAX_TOKENS", 2048, minimum=1),
            summary_max_tokens=_read_int_env("SUMMARY_MAX_TOKENS", 1024, minimum=1),
        )
