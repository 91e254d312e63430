"""Shared helpers: subprocess tools, file IO, logging, polling."""
