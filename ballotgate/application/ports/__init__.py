"""Application ports: interfaces to external collaborators."""

from ballotgate.application.ports.ballot_event_log import BallotEventLogPort

__all__: list[str] = ["BallotEventLogPort"]
