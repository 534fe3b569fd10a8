"""
Counter Repository Interface
============================

Atomic named sequences used for task numbers, sprint numbers and ITSM ids.
"""
from abc import ABC, abstractmethod


class CounterRepository(ABC):

    @abstractmethod
    def next_sequence(self, name: str) -> int:
        """
        Atomically increment and return a named counter.

        Args:
            name: Counter name, e.g. "INC-2026" or "task:<project id>"

        Returns:
            The new value (1 for a counter that did not exist)
        """
        pass

