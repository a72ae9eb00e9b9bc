"""Domain primitives shared by ballot operations."""

from ballotgate.domain.primitives.ensure_atomicity import AtomicOperationContext

__all__: list[str] = ["AtomicOperationContext"]
