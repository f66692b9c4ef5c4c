from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .bootstrap import configure_logging
from .config import get_settings
from .core import ics_filename
from .errors import PlannerError
from .services import PlannerService
from .services.http import run_local_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Space Planner command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API.")
    serve_parser.add_argument("--host", default=settings.server.host)
    serve_parser.add_argument("--port", type=int, default=settings.server.port)

    subparsers.add_parser("mutual", help="Print dates that suit both people, oldest first.")
    subparsers.add_parser("apply-patterns", help="Re-project recurring patterns over the coming year.")

    export_parser = subparsers.add_parser("export-ics", help="Write a confirmed plan as an .ics file.")
    export_parser.add_argument("plan_id")
    export_parser.add_argument("-o", "--output", type=Path, default=None)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        run_local_server(host=args.host, port=args.port)
        return 0

    service = PlannerService()
    try:
        if args.command == "mutual":
            for day in service.mutual_dates():
                print(day)
        elif args.command == "apply-patterns":
            count = service.apply_patterns()
            print(f"{count} dates blocked by recurring patterns")
        elif args.command == "export-ics":
            plan = service.get_plan(args.plan_id)
            output = args.output or Path(ics_filename(plan))
            output.write_bytes(service.export_plan_ics(plan.id))
            print(output)
        else:  # pragma: no cover - argparse enforces choices
            parser.print_help()
    except PlannerError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
