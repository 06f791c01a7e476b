"""Adapters - concrete implementations of the core interfaces."""
