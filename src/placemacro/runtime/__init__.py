"""Expansion runtime: configuration, dispatch table and the orchestrator."""
__all__ = ["config", "dispatch", "engine"]
