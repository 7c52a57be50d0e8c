"""Static tool capability registry.

Declaration order matters: it breaks ties when ranking tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple


class ToolCategory(str, Enum):
    EXPLORATION = "exploration"
    CREATION = "creation"
    MODIFICATION = "modification"
    DEPLOYMENT = "deployment"
    MONITORING = "monitoring"
    DELEGATION = "delegation"


class Integration(str, Enum):
    TRELLO = "trello"
    HETZNER = "hetzner"
    CLAUDE_CONTAINERS = "claude_containers"


@dataclass(frozen=True)
class ToolCapability:
    name: str
    category: ToolCategory
    description: str
    best_for: Tuple[str, ...]
    requires: Tuple[str, ...] = ()
    integration: Optional[Integration] = None  # None: always available

    def score(self, task_lower: str) -> int:
        return sum(1 for keyword in self.best_for if keyword in task_lower)


def _tool(
    name: str,
    category: ToolCategory,
    description: str,
    best_for: Iterable[str],
    integration: Optional[Integration] = None,
    requires: Iterable[str] = (),
) -> ToolCapability:
    return ToolCapability(
        name=name,
        category=category,
        description=description,
        best_for=tuple(best_for),
        requires=tuple(requires),
        integration=integration,
    )


_TRELLO = Integration.TRELLO
_HETZNER = Integration.HETZNER
_CLAUDE = Integration.CLAUDE_CONTAINERS

DEFAULT_TOOL_REGISTRY: Tuple[ToolCapability, ...] = (
    _tool(
        "execute_bash", ToolCategory.EXPLORATION,
        "Execute shell commands for file operations, git, npm, etc.",
        ["explore", "find", "search", "list", "read", "analyze", "git", "npm", "file", "directory", "code"],
    ),
    # task management
    _tool(
        "trello_list_boards", ToolCategory.EXPLORATION, "List all Trello boards",
        ["trello", "boards", "projects", "tasks"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_create_card", ToolCategory.CREATION, "Create task cards on Trello",
        ["task", "card", "todo", "create", "track", "plan"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_add_checklist", ToolCategory.CREATION, "Add checklists to cards",
        ["checklist", "steps", "subtasks", "breakdown"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_update_card", ToolCategory.MODIFICATION, "Update card status, move between lists",
        ["update", "move", "status", "progress"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_list_cards", ToolCategory.EXPLORATION, "List cards on a board or list",
        ["cards", "backlog", "lists"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_search_cards", ToolCategory.EXPLORATION, "Search cards by text",
        ["search cards", "lookup", "query"], _TRELLO, ["trello_api_key"],
    ),
    _tool(
        "trello_add_comment", ToolCategory.MODIFICATION, "Comment on a card",
        ["comment", "note", "annotate"], _TRELLO, ["trello_api_key"],
    ),
    # deployment
    _tool(
        "deploy_to_hetzner", ToolCategory.DEPLOYMENT, "Deploy Docker containers to VPS",
        ["deploy", "ship", "release", "docker", "container", "server"], _HETZNER, ["hetzner_ssh"],
    ),
    _tool(
        "list_containers", ToolCategory.MONITORING, "List running containers",
        ["containers", "running", "status", "list"], _HETZNER, ["hetzner_ssh"],
    ),
    _tool(
        "get_container_logs", ToolCategory.MONITORING, "Get container logs",
        ["logs", "debug", "errors", "output"], _HETZNER, ["hetzner_ssh"],
    ),
    _tool(
        "get_container_stats", ToolCategory.MONITORING, "Get container CPU and memory usage",
        ["stats", "cpu", "memory", "usage", "health"], _HETZNER, ["hetzner_ssh"],
    ),
    _tool(
        "restart_container", ToolCategory.MODIFICATION, "Restart a container",
        ["restart", "refresh", "reset"], _HETZNER, ["hetzner_ssh"],
    ),
    _tool(
        "delete_container", ToolCategory.MODIFICATION, "Stop and remove a container",
        ["delete", "remove", "teardown", "destroy"], _HETZNER, ["hetzner_ssh"],
    ),
    # sub-agent delegation
    _tool(
        "spawn_claude_agent", ToolCategory.DELEGATION,
        "Spawn autonomous Claude agent for complex subtasks",
        ["complex", "implement", "build", "create", "refactor", "autonomous", "coding"], _CLAUDE,
    ),
    _tool(
        "get_claude_status", ToolCategory.MONITORING, "Monitor spawned agent progress",
        ["status", "progress", "agent", "monitor"], _CLAUDE,
    ),
    _tool(
        "get_claude_output", ToolCategory.MONITORING, "Read output produced by a spawned agent",
        ["output", "transcript", "agent"], _CLAUDE,
    ),
    _tool(
        "wait_for_claude_agent", ToolCategory.MONITORING, "Wait for agent completion",
        ["wait", "complete", "finish", "result"], _CLAUDE,
    ),
)


def available_tool_names(
    registry: Iterable[ToolCapability], enabled: FrozenSet[Integration]
) -> FrozenSet[str]:
    """``execute_bash`` plus every tool whose integration is enabled."""
    names = {"execute_bash"}
    for tool in registry:
        if tool.integration is None or tool.integration in enabled:
            names.add(tool.name)
    return frozenset(names)
