#!/usr/bin/env python3
"""ballotgate Scenario Runner.

Replays a YAML ballot scenario against a fresh ballot and prints the
outcome of every step, then the final status and winner.

Scenario format:
    admin: admin
    variant: extended
    steps:
      - {caller: admin, op: register_voter, args: [alice]}
      - {caller: admin, op: start_proposals_registration}
      - {caller: alice, op: register_proposal, args: ["Build a park"]}
      ...

Usage:
    python scripts/run_ballot_scenario.py SCENARIO.yaml [options]

Options:
    --stop-on-error      Stop at the first rejected step
    --events             Print the notification log at the end
    --log-format FMT     'console' or 'json' structured logs (default: console)
"""

import argparse
import inspect
import sys
from pathlib import Path
from typing import Any

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import yaml
from dotenv import load_dotenv

from ballotgate.application.services.ballot_service import BallotService
from ballotgate.bootstrap.ballot import build_ballot_service
from ballotgate.config.ballot_config import BallotConfig
from ballotgate.domain.exceptions import BallotError
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.infrastructure.observability import (
    configure_structlog,
    correlation_scope,
)

# Load environment variables
load_dotenv()

# Operations a scenario may call, all taking the caller first
SCENARIO_OPERATIONS: frozenset[str] = frozenset(
    {
        "register_voter",
        "revoke_voter",
        "register_proposal",
        "delete_proposal",
        "start_proposals_registration",
        "end_proposals_registration",
        "start_voting_session",
        "end_voting_session",
        "vote",
        "runoff_vote",
        "tally_votes",
        "end_runoff_voting_session",
        "decide_tie",
    }
)


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    ENDC = "\033[0m"


class ScenarioError(Exception):
    """Raised when a scenario file is malformed."""


def load_scenario(path: Path) -> dict[str, Any]:
    """Read and validate a scenario file.

    Raises:
        ScenarioError: If the file is not a mapping with a steps list, the
            variant is unknown, or a step names an unknown operation or
            passes arguments that operation does not take.
    """
    with path.open(encoding="utf-8") as infile:
        scenario = yaml.safe_load(infile)

    if not isinstance(scenario, dict) or not isinstance(scenario.get("steps"), list):
        raise ScenarioError(f"{path}: expected a mapping with a 'steps' list")

    variant = scenario.get("variant")
    variants = [v.value for v in BallotVariant]
    if variant is not None and variant not in variants:
        raise ScenarioError(
            f"{path}: unknown variant {variant!r} (expected {', '.join(variants)})"
        )

    for number, step in enumerate(scenario["steps"], start=1):
        if not isinstance(step, dict) or "caller" not in step or "op" not in step:
            raise ScenarioError(f"{path}: step {number} needs 'caller' and 'op'")
        op = step["op"]
        if not isinstance(op, str) or op not in SCENARIO_OPERATIONS:
            raise ScenarioError(f"{path}: step {number} has unknown op {op!r}")
        args = step.get("args", [])
        if not isinstance(args, list):
            raise ScenarioError(f"{path}: step {number} 'args' must be a list")
        try:
            signature = inspect.signature(getattr(BallotService, op))
            signature.bind(None, step["caller"], *args)
        except TypeError as exc:
            raise ScenarioError(f"{path}: step {number} {op}: {exc}") from exc
    return scenario


def build_service(scenario: dict[str, Any]) -> BallotService:
    """Create a ballot from the scenario's admin and variant, else the environment."""
    env_config = BallotConfig.from_environment()
    config = BallotConfig(
        variant=BallotVariant(scenario.get("variant", env_config.variant.value)),
        admin_id=str(scenario.get("admin", env_config.admin_id)),
        max_description_length=env_config.max_description_length,
    )
    return build_ballot_service(config)


def run_steps(
    service: BallotService,
    steps: list[dict[str, Any]],
    stop_on_error: bool = False,
) -> int:
    """Run each step, printing its result.

    Returns:
        Number of rejected steps.
    """
    rejected = 0
    for number, step in enumerate(steps, start=1):
        op = step["op"]
        caller = str(step["caller"])
        args = step.get("args", [])
        label = f"{number:>3}. {caller} {op}({', '.join(map(repr, args))})"

        with correlation_scope():
            try:
                result = getattr(service, op)(caller, *args)
            except BallotError as exc:
                rejected += 1
                print(f"{Colors.RED}{label} -> {type(exc).__name__}: {exc}{Colors.ENDC}")
                if stop_on_error:
                    break
                continue

        print(f"{Colors.GREEN}{label} -> {describe(result)}{Colors.ENDC}")
    return rejected


def describe(result: Any) -> str:
    """Short text form of an operation result."""
    value = getattr(result, "value", None)
    if value is not None:
        return str(value)
    to_dict = getattr(result, "to_dict", None)
    if to_dict is not None:
        return str(to_dict())
    return str(result)


def print_summary(service: BallotService, show_events: bool) -> None:
    print(f"\n{Colors.BOLD}{Colors.CYAN}Status: {service.workflow_status.value}{Colors.ENDC}")
    for index, proposal in enumerate(service.get_proposals()):
        print(
            f"  [{index}] {proposal.description}: {proposal.vote_count} votes"
            f" ({proposal.runoff_vote_count} runoff)"
        )
    try:
        winner = service.get_winner()
    except BallotError as exc:
        print(f"  Winner: none ({type(exc).__name__})")
    else:
        state = "final" if winner.resolved else "tie awaiting decision"
        print(f"  Winner: {list(winner.descriptions)} ({state})")

    if show_events:
        print(f"\n{Colors.BOLD}Events{Colors.ENDC}")
        for event in service.event_log.events():
            print(f"  #{event.sequence} {event.event_type} {event.payload.to_dict()}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay a ballot scenario")
    parser.add_argument("scenario", type=Path, help="Path to scenario YAML")
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Stop at the first rejected step",
    )
    parser.add_argument(
        "--events",
        action="store_true",
        help="Print the notification log at the end",
    )
    parser.add_argument(
        "--log-format",
        choices=("console", "json"),
        default="console",
        help="Structured log output format",
    )
    args = parser.parse_args()

    configure_structlog("production" if args.log_format == "json" else "development")

    try:
        scenario = load_scenario(args.scenario)
    except (OSError, yaml.YAMLError, ScenarioError) as exc:
        print(f"{Colors.RED}Cannot load scenario: {exc}{Colors.ENDC}", file=sys.stderr)
        return 2

    service = build_service(scenario)
    rejected = run_steps(service, scenario["steps"], stop_on_error=args.stop_on_error)
    print_summary(service, show_events=args.events)
    return 1 if rejected and args.stop_on_error else 0


if __name__ == "__main__":
    sys.exit(main())
