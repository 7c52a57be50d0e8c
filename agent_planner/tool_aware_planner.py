"""
Tool-Aware Planner - plan templates annotated with tool routing.

Each task is matched to one archetype, in this priority:

    codebase analysis > deployment > task management > implementation > exploration

The archetype predicates overlap ("implement a deployment pipeline" is both
deployment and implementation); the priority order decides.

Tool suggestions are limited to what the enabled integrations provide, so a
planner built without Hetzner never suggests a container tool.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from agent_planner.config import PlannerConfig
from agent_planner.plans import Complexity, Effort, ToolAwareMilestone, ToolAwarePlan
from agent_planner.tools import (
    DEFAULT_TOOL_REGISTRY,
    Integration,
    ToolCapability,
    available_tool_names,
)

logger = logging.getLogger(__name__)

_CODEBASE_VERB_RE = re.compile(r"analyze|review|audit|examine|improve|refactor")
_CODEBASE_NOUN_RE = re.compile(r"repo|codebase|code|project|architecture")
_DEPLOYMENT_RE = re.compile(r"deploy|ship|release|launch|publish")
_TASK_MANAGEMENT_RE = re.compile(r"trello|card|board|task|todo|plan|organize")
_IMPLEMENTATION_RE = re.compile(r"implement|build|create|develop|add|feature")

_DELEGATION_VERB_RE = re.compile(r"implement|build|refactor|create|develop")
_DELEGATION_SCALE_RE = re.compile(r"complex|large|entire|full")


@dataclass(frozen=True)
class Archetype:
    name: str
    matches: Callable[[str], bool]
    build: Callable[["ToolAwarePlanner", str, List[ToolCapability]], ToolAwarePlan]


class ToolAwarePlanner:
    def __init__(
        self,
        has_trello: bool = True,
        has_hetzner: bool = True,
        has_claude_containers: bool = True,
        registry: Sequence[ToolCapability] = DEFAULT_TOOL_REGISTRY,
    ) -> None:
        self.has_trello = has_trello
        self.has_hetzner = has_hetzner
        self.has_claude_containers = has_claude_containers
        self._registry = tuple(registry)

        enabled = set()
        if has_trello:
            enabled.add(Integration.TRELLO)
        if has_hetzner:
            enabled.add(Integration.HETZNER)
        if has_claude_containers:
            enabled.add(Integration.CLAUDE_CONTAINERS)
        self._available: FrozenSet[str] = available_tool_names(self._registry, frozenset(enabled))

    @classmethod
    def from_config(cls, config: PlannerConfig) -> "ToolAwarePlanner":
        return cls(
            has_trello=config.has_trello,
            has_hetzner=config.has_hetzner,
            has_claude_containers=config.has_claude_containers,
        )

    @property
    def available_tools(self) -> FrozenSet[str]:
        return self._available

    # ==================== Tool Ranking ====================

    def find_best_tools(self, task_description: str) -> List[ToolCapability]:
        """Available tools with at least one keyword hit, best first.

        sorted() is stable, so equal scores keep registry order.
        """
        lower = task_description.lower()
        scored: List[Tuple[ToolCapability, int]] = []
        for tool in self._registry:
            if tool.name not in self._available:
                continue
            score = tool.score(lower)
            if score > 0:
                scored.append((tool, score))
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [tool for tool, _ in scored]

    # ==================== Planning ====================

    def create_plan(self, task_description: str) -> ToolAwarePlan:
        lower = task_description.lower()
        best_tools = self.find_best_tools(task_description)

        logger.info(f"Tool analysis: found {len(best_tools)} relevant tools")
        for tool in best_tools[:5]:
            logger.debug(f"   - {tool.name}: {tool.description}")

        archetype = self._select_archetype(lower)
        logger.info(f"Planning task as {archetype.name}")
        plan = archetype.build(self, task_description, best_tools)

        plan.tools_required = _dedupe(
            tool for m in plan.milestones for tool in m.suggested_tools
        )
        plan.delegation_opportunities = self._find_delegation_opportunities(lower, plan.milestones)
        return plan

    def _select_archetype(self, lower: str) -> Archetype:
        for archetype in ARCHETYPES:
            if archetype.matches(lower):
                return archetype
        return EXPLORATION

    def _step(
        self,
        milestone_id: str,
        description: str,
        tools: Sequence[str],
        strategy: str,
        can_delegate: Optional[bool] = None,
    ) -> ToolAwareMilestone:
        suggested = [t for t in tools if t in self._available]
        if tools and not suggested:
            suggested = ["execute_bash"]
        return ToolAwareMilestone(
            id=milestone_id,
            description=description,
            suggested_tools=suggested,
            tool_strategy=strategy,
            can_delegate=can_delegate,
        )

    # ==================== Archetype Templates ====================

    def _codebase_analysis_plan(self, task: str, tools: List[ToolCapability]) -> ToolAwarePlan:
        milestones = [
            self._step(
                "explore_structure",
                "Explore project structure and identify key directories",
                ["execute_bash"],
                "Use `find`, `tree`, or `ls -la` to map directory structure. "
                "Look for src/, lib/, tests/, docs/",
            ),
            self._step(
                "identify_entry_points",
                "Identify main entry points and configuration files",
                ["execute_bash"],
                "Find package manifests, build configs and main modules. Read key configs.",
            ),
            self._step(
                "analyze_architecture",
                "Analyze code architecture and patterns",
                ["execute_bash"],
                "Use grep to find patterns: classes, interfaces, exports. "
                "Map dependencies between modules.",
            ),
            self._step(
                "identify_improvements",
                "Identify areas for improvement",
                ["execute_bash"],
                "Look for: TODOs, FIXMEs, deprecated code, large files, "
                "complex functions, missing tests.",
            ),
            self._step(
                "prioritize_recommendations",
                "Prioritize and document recommendations",
                ["trello_create_card", "trello_add_checklist"] if self.has_trello else ["execute_bash"],
                "Create Trello cards for each recommendation with priority labels and checklists."
                if self.has_trello
                else "Document findings in a structured format.",
            ),
            self._step(
                "present_findings",
                "Present comprehensive analysis to user",
                [],
                "Synthesize findings into clear, actionable report.",
            ),
        ]
        return ToolAwarePlan(
            task_summary="Codebase analysis with improvement recommendations",
            complexity=Complexity.EXPLORATORY,
            estimated_effort=Effort.SUBSTANTIAL,
            exploration_needed=True,
            milestones=milestones,
        )

    def _deployment_plan(self, task: str, tools: List[ToolCapability]) -> ToolAwarePlan:
        milestones = [
            self._step(
                "check_prerequisites",
                "Check deployment prerequisites and current state",
                ["list_containers", "execute_bash"],
                "List current containers, check git status, verify build readiness.",
            ),
            self._step(
                "prepare_build",
                "Prepare and validate build artifacts",
                ["execute_bash"],
                "Run build commands, check for errors, validate output.",
            ),
            self._step(
                "deploy",
                "Execute deployment to target environment",
                ["deploy_to_hetzner"],
                "Deploy container with appropriate config, env vars, and port mappings.",
            ),
            self._step(
                "verify_deployment",
                "Verify deployment success and health",
                ["get_container_logs", "get_container_stats"],
                "Check logs for errors, verify container is running, test endpoints.",
            ),
            self._step(
                "report_status",
                "Report deployment status and next steps",
                ["trello_update_card"] if self.has_trello else [],
                "Update any related Trello cards, notify user of success/failure.",
            ),
        ]
        return ToolAwarePlan(
            task_summary="Deployment to Hetzner VPS" if self.has_hetzner else "Deployment task",
            complexity=Complexity.COMPLEX,
            estimated_effort=Effort.MEDIUM,
            exploration_needed=False,
            milestones=milestones,
        )

    def _task_management_plan(self, task: str, tools: List[ToolCapability]) -> ToolAwarePlan:
        milestones = [
            self._step(
                "understand_requirements",
                "Understand task requirements and context",
                ["trello_list_boards", "trello_list_cards"],
                "List existing boards and cards to understand current state.",
            ),
            self._step(
                "execute_changes",
                "Execute requested Trello changes",
                ["trello_create_card", "trello_update_card", "trello_add_checklist"],
                "Create/update cards, add checklists, organize as requested.",
            ),
            self._step(
                "verify_results",
                "Verify changes were applied correctly",
                ["trello_list_cards", "trello_search_cards"],
                "Query Trello to confirm changes are visible.",
            ),
        ]
        return ToolAwarePlan(
            task_summary="Trello task management",
            complexity=Complexity.MODERATE,
            estimated_effort=Effort.QUICK,
            exploration_needed=False,
            milestones=milestones,
        )

    def _implementation_plan(self, task: str, tools: List[ToolCapability]) -> ToolAwarePlan:
        can_delegate = self.has_claude_containers
        milestones = [
            self._step(
                "analyze_requirements",
                "Analyze implementation requirements",
                ["execute_bash"],
                "Explore existing code, understand patterns, identify integration points.",
            ),
            self._step(
                "plan_implementation",
                "Plan implementation approach",
                ["trello_create_card", "trello_add_checklist"] if self.has_trello else [],
                "Break down into subtasks, create tracking cards with checklists.",
            ),
            self._step(
                "implement",
                "Implement the feature/changes",
                ["spawn_claude_agent"] if can_delegate else ["execute_bash"],
                "Spawn Claude agent for complex implementation. "
                "Agent runs autonomously with full coding capabilities."
                if can_delegate
                else "Implement directly using bash commands to create/modify files.",
                can_delegate=can_delegate,
            ),
            self._step(
                "monitor_progress",
                "Monitor implementation progress",
                ["get_claude_status", "get_claude_output"] if can_delegate else [],
                "Monitor spawned agent progress, check output for issues."
                if can_delegate
                else "N/A - implementation is synchronous.",
            ),
            self._step(
                "verify_and_test",
                "Verify implementation and run tests",
                ["execute_bash"],
                "Run tests, check for errors, validate functionality.",
            ),
            self._step(
                "update_tracking",
                "Update task tracking and report results",
                ["trello_update_card", "trello_add_comment"] if self.has_trello else [],
                "Mark cards complete, add implementation notes.",
            ),
        ]
        return ToolAwarePlan(
            task_summary="Feature implementation",
            complexity=Complexity.COMPLEX,
            estimated_effort=Effort.SUBSTANTIAL,
            exploration_needed=True,
            milestones=milestones,
        )

    def _exploration_plan(self, task: str, tools: List[ToolCapability]) -> ToolAwarePlan:
        primary = [t.name for t in tools[:3]] or ["execute_bash"]
        milestones = [
            self._step(
                "understand_request",
                "Understand the request and gather context",
                ["execute_bash"],
                "Explore relevant files and gather information needed.",
            ),
            self._step(
                "execute_task",
                "Execute the requested task",
                primary,
                f"Use {', '.join(primary)} as primary tools.",
            ),
            self._step(
                "verify_and_report",
                "Verify results and report to user",
                [],
                "Confirm task completion and present results.",
            ),
        ]
        return ToolAwarePlan(
            task_summary=task[:100],
            complexity=Complexity.MODERATE,
            estimated_effort=Effort.MEDIUM,
            exploration_needed=True,
            milestones=milestones,
        )

    # ==================== Delegation ====================

    def _find_delegation_opportunities(
        self, lower: str, milestones: Sequence[ToolAwareMilestone]
    ) -> List[str]:
        if not self.has_claude_containers:
            return []

        opportunities: List[str] = []
        if _DELEGATION_VERB_RE.search(lower) and _DELEGATION_SCALE_RE.search(lower):
            opportunities.append("Main implementation can be delegated to Claude agent")
        for m in milestones:
            if m.can_delegate:
                opportunities.append(f'Milestone "{m.id}" can be delegated')
        return opportunities

    # ==================== Rendering ====================

    def tool_recommendation_summary(self, plan: ToolAwarePlan) -> str:
        lines = [
            "🔧 **Tool-Aware Plan**",
            f"**Required Tools:** {', '.join(plan.tools_required)}",
            "",
            "**Milestones:**",
        ]
        for m in plan.milestones:
            lines.append(f"  {'✅' if m.completed else '⬜'} {m.description}")
            if m.suggested_tools:
                lines.append(f"     Tools: {', '.join(m.suggested_tools)}")
            if m.tool_strategy:
                lines.append(f"     Strategy: {m.tool_strategy}")

        if plan.delegation_opportunities:
            lines.append("")
            lines.append("**🤖 Delegation Opportunities:**")
            lines.extend(f"  - {opp}" for opp in plan.delegation_opportunities)

        return "\n".join(lines)


def _dedupe(names) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


EXPLORATION = Archetype(
    "generic exploration", lambda lower: True, ToolAwarePlanner._exploration_plan
)

ARCHETYPES: Tuple[Archetype, ...] = (
    Archetype(
        "codebase analysis",
        lambda lower: bool(_CODEBASE_VERB_RE.search(lower) and _CODEBASE_NOUN_RE.search(lower)),
        ToolAwarePlanner._codebase_analysis_plan,
    ),
    Archetype("deployment", lambda lower: bool(_DEPLOYMENT_RE.search(lower)), ToolAwarePlanner._deployment_plan),
    Archetype(
        "task management",
        lambda lower: bool(_TASK_MANAGEMENT_RE.search(lower)),
        ToolAwarePlanner._task_management_plan,
    ),
    Archetype(
        "implementation",
        lambda lower: bool(_IMPLEMENTATION_RE.search(lower)),
        ToolAwarePlanner._implementation_plan,
    ),
    EXPLORATION,
)
