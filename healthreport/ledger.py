"""
Fee Ledger

Submission fees are charged through a ledger so the transfer is an
observable event. The report store only ever calls ``transfer``.
"""

import threading
from abc import ABC, abstractmethod
from typing import List

from .models import FeeTransfer


class FeeLedger(ABC):
    """
    Abstract interface for recording fee transfers.

    Implementations must preserve call order.
    """

    @abstractmethod
    def transfer(self, amount: int, sender: str, recipient: str) -> FeeTransfer:
        """Record a transfer of ``amount`` from ``sender`` to ``recipient``."""
        pass

    @abstractmethod
    def transfers(self) -> List[FeeTransfer]:
        """All recorded transfers, oldest first."""
        pass

    def total_received(self, recipient: str) -> int:
        return sum(t.amount for t in self.transfers() if t.recipient == recipient)

    def total_paid(self, sender: str) -> int:
        return sum(t.amount for t in self.transfers() if t.sender == sender)


class InMemoryFeeLedger(FeeLedger):
    """
    In-memory ledger for development/testing.

    Not persistent across restarts.
    """

    def __init__(self):
        self._transfers: List[FeeTransfer] = []
        self._lock = threading.Lock()

    def transfer(self, amount: int, sender: str, recipient: str) -> FeeTransfer:
        event = FeeTransfer(amount=amount, sender=sender, recipient=recipient)
        with self._lock:
            self._transfers.append(event)
        return event

    def transfers(self) -> List[FeeTransfer]:
        with self._lock:
            return self._transfers[:]

    def clear(self) -> None:
        with self._lock:
            self._transfers.clear()
