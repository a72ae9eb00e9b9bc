"""Ballot configuration.

This module defines the ballot variant, the administrator identity and
proposal description limits, with environment variable overrides.

Environment Variables:
- BALLOT_VARIANT: basic | intermediate | extended (default: extended)
- BALLOT_ADMIN_ID: Administrator identity (default: "admin")
- BALLOT_MAX_DESCRIPTION_LENGTH: Max proposal description length
  (default: 1000, min: 1, max: 10000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ballotgate.domain.models.ballot_variant import BallotVariant


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Default administrator identity for development ballots
DEFAULT_ADMIN_ID = "admin"

DEFAULT_VARIANT = BallotVariant.EXTENDED

# Description length bounds
DEFAULT_MAX_DESCRIPTION_LENGTH = 1_000
MIN_DESCRIPTION_LENGTH_CEILING = 1
MAX_DESCRIPTION_LENGTH_CEILING = 10_000


@dataclass(frozen=True)
class BallotConfig:
    """Configuration for one ballot.

    Attributes:
        variant: Ballot generation to run.
        admin_id: Administrator identity, fixed for the ballot's lifetime.
        max_description_length: Longest accepted proposal description.
    """

    variant: BallotVariant = DEFAULT_VARIANT
    admin_id: str = DEFAULT_ADMIN_ID
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.admin_id or not self.admin_id.strip():
            raise ValueError("admin_id must be a non-empty identity")
        if (
            not MIN_DESCRIPTION_LENGTH_CEILING
            <= self.max_description_length
            <= MAX_DESCRIPTION_LENGTH_CEILING
        ):
            raise ValueError(
                f"max_description_length must be between "
                f"{MIN_DESCRIPTION_LENGTH_CEILING} and "
                f"{MAX_DESCRIPTION_LENGTH_CEILING}, got {self.max_description_length}"
            )

    @classmethod
    def from_environment(cls) -> BallotConfig:
        """Create config from environment variables with defaults.

        An unknown BALLOT_VARIANT falls back to the default variant and an
        out-of-range length is clamped.

        Returns:
            BallotConfig with values from environment or defaults.
        """
        variant_name = os.environ.get("BALLOT_VARIANT", DEFAULT_VARIANT.value)
        try:
            variant = BallotVariant(variant_name.strip().lower())
        except ValueError:
            variant = DEFAULT_VARIANT

        admin_id = os.environ.get("BALLOT_ADMIN_ID", "").strip() or DEFAULT_ADMIN_ID

        max_length = _get_int_env(
            "BALLOT_MAX_DESCRIPTION_LENGTH",
            DEFAULT_MAX_DESCRIPTION_LENGTH,
        )
        # Clamp to valid range
        max_length = max(
            MIN_DESCRIPTION_LENGTH_CEILING,
            min(max_length, MAX_DESCRIPTION_LENGTH_CEILING),
        )

        return cls(
            variant=variant,
            admin_id=admin_id,
            max_description_length=max_length,
        )


DEFAULT_BALLOT_CONFIG = BallotConfig()
