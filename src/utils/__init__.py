"""Shared utilities (configuration)."""
