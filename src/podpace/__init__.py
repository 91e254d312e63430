"""PodPace — per-speaker speaking-rate normalization."""

__version__ = "0.1.0"
