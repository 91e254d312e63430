"""Tempo resolution, segment processing and reconstruction."""
