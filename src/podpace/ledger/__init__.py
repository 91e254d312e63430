"""Job ledger: the single source of truth polled by clients."""

from podpace.ledger.base import (
    BaseLedger,
    InvalidTransitionError,
    JobLedger,
    JobNotFoundError,
    StaleStatusError,
)
from podpace.ledger.codec import LedgerDataError, LedgerError
from podpace.ledger.file import FileLedger
from podpace.ledger.memory import MemoryLedger

__all__ = [
    "BaseLedger",
    "FileLedger",
    "InvalidTransitionError",
    "JobLedger",
    "JobNotFoundError",
    "LedgerDataError",
    "LedgerError",
    "MemoryLedger",
    "StaleStatusError",
]
