"""Command-line interface for genomesim.

Subcommands:
    serve      Run the REST API under uvicorn.
    simulate   Run one simulation locally and print the result as JSON.
    traits     List the built-in traits.
"""

import argparse
import json
import sys

import uvicorn

from genomesim import __version__
from genomesim.engine.reference import BUILTIN_TRAITS
from genomesim.engine.service import SimulationService
from genomesim.logging_config import configure_logging


def _serve(parsed: argparse.Namespace) -> int:
    print(f"Serving genomesim at http://{parsed.host}:{parsed.port}")
    print("Press Ctrl+C to stop")
    uvicorn.run(
        "genomesim.server.app:app",
        host=parsed.host,
        port=parsed.port,
        reload=parsed.reload,
    )
    return 0


def _simulate(parsed: argparse.Namespace) -> int:
    run = SimulationService(seed=parsed.seed).run(parsed.traits)
    print(json.dumps(run.result.to_dict(), indent=2 if parsed.pretty else None))
    return 0


def _traits(parsed: argparse.Namespace) -> int:
    for trait in BUILTIN_TRAITS:
        print(f"{trait.key:14s} {trait.icon} {trait.name} ({trait.kind.value})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genomesim",
        description="genomesim - offspring trait-outcome simulator",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    serve.set_defaults(handler=_serve)

    simulate = subparsers.add_parser("simulate", help="Run one simulation and print JSON")
    simulate.add_argument("traits", nargs="+", help="Trait keys, e.g. eye-color height")
    simulate.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    simulate.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    simulate.set_defaults(handler=_simulate)

    traits = subparsers.add_parser("traits", help="List built-in traits")
    traits.set_defaults(handler=_traits)

    return parser


def main(args: list[str] | None = None) -> int:
    """Entry point.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success).
    """
    parsed = build_parser().parse_args(args)
    configure_logging()
    return parsed.handler(parsed)


if __name__ == "__main__":
    sys.exit(main())
