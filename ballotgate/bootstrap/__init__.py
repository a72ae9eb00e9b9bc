"""Bootstrap wiring shared by the HTTP app and the scenario runner."""

from ballotgate.bootstrap.ballot import build_ballot_service

__all__: list[str] = ["build_ballot_service"]
