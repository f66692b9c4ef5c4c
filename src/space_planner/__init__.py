"""Space Planner: a two-person shared availability planner."""

from __future__ import annotations

from .services import PlannerService

__all__ = ["PlannerService", "main"]


def main() -> int:
    from .cli import main as cli_main

    return cli_main()
