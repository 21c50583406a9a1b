"""Command-line interface for the deployment orchestrator."""
