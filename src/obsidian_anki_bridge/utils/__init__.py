"""Shared utilities: logging, retries, identity and path safety."""
