"""
Generate Ticket ID Use Case
===========================

Human-readable ITSM ids (INC-2026-00001) from per-prefix, per-year counters.
"""
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.utils.datetime_utils import now
from servicedesk.utils.id_utils import format_sequence_id


class GenerateTicketIdUseCase:
    """Issues the next ticket id for a prefix. Numbering restarts every year."""

    def __init__(self, counter_repository: CounterRepository):
        self._counters = counter_repository

    def execute(self, prefix: str) -> str:
        """
        Args:
            prefix: Ticket prefix (INC, PRB, CHG, REL, SRQ)

        Returns:
            Ticket id such as "INC-2026-00042"
        """
        year = now().year
        sequence = self._counters.next_sequence(f"{prefix}-{year}")
        return format_sequence_id(prefix, year, sequence)
