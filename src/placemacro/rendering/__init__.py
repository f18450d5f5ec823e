"""Rendering of token streams back to text."""
__all__ = ["renderer"]
