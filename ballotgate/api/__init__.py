"""HTTP API layer for ballotgate (FastAPI)."""
