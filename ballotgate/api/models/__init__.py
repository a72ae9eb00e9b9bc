"""Pydantic request/response models for the ballot API."""
