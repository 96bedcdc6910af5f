"""
Command line entry point.

Usage
service-rollout services.json [--continue-on-failure] [--audit-log PATH]

Exit codes
0 every service rolled out and passed its health check
1 a service failed and was rolled back
2 a rollback failed, an operator is needed
3 the service definitions could not be loaded
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from service_rollout.agent.runner import RolloutRunner, RunnerConfig
from service_rollout.core.errors import ServiceConfigInvalid
from service_rollout.rollout.base import Service
from service_rollout.services.command import CommandService
from service_rollout.sources.static import StaticServiceSource

EXIT_OK = 0
EXIT_ROLLED_BACK = 1
EXIT_ROLLBACK_FAILED = 2
EXIT_CONFIG_INVALID = 3


def configure_logging(log_format: str = "console", verbose: bool = False) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="service-rollout",
        description="Roll out services with health checks and automatic rollback.",
    )
    parser.add_argument("services", type=Path, help="JSON file with service definitions")
    parser.add_argument(
        "--continue-on-failure",
        action="store_true",
        help="Keep rolling out the remaining services after a failure",
    )
    parser.add_argument(
        "--audit-log",
        type=Path,
        default=None,
        help="Append one JSON line per service outcome to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default="console",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every stage")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = create_argument_parser().parse_args(argv)
    configure_logging(args.log_format, args.verbose)

    try:
        specs = StaticServiceSource(path=args.services).fetch()
    except ServiceConfigInvalid as exc:
        print(f"invalid service definitions: {exc}", file=sys.stderr)
        return EXIT_CONFIG_INVALID

    services: list[tuple[str, Service]] = [(s.name, CommandService(spec=s)) for s in specs]
    runner = RolloutRunner(
        RunnerConfig(
            stop_on_failure=not args.continue_on_failure,
            audit_path=args.audit_log,
        )
    )
    report = runner.run(services)

    for record in report.records:
        if record.ok:
            print(f"{record.name}: ok")
        else:
            print(f"{record.name}: {record.message}")
    for name in report.skipped:
        print(f"{name}: skipped")

    if report.ok:
        return EXIT_OK
    if report.rollback_failed:
        return EXIT_ROLLBACK_FAILED
    return EXIT_ROLLED_BACK
