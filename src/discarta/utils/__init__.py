"""Shared utilities for DisCarta."""
