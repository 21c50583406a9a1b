"""Shared library code for the SD-WAN deployment orchestrator."""
