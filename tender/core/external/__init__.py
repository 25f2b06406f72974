"""External collaborators — OpenCode agent listing and GitHub workflow dispatch."""

from tender.core.external.agents import discover_primary_agents, parse_agent_list, require_custom_agent
from tender.core.external.dispatch import build_dispatch_args, dispatch_now

__all__ = [
    "build_dispatch_args",
    "discover_primary_agents",
    "dispatch_now",
    "parse_agent_list",
    "require_custom_agent",
]
