"""Pydantic models for orchestrator configuration and persisted state."""
