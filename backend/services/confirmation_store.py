"""In-memory one-time tickets for destructive actions awaiting confirmation.

Owned by the orchestrator/session layer, never by the FunctionRegistry.
issue() stamps a PendingAction with a ticket_id; consume() hands it back
exactly once, for the same user, before the TTL runs out. Ephemeral:
tickets do not survive a process restart.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from application.models import PendingAction

logger = logging.getLogger(__name__)


@dataclass
class _Ticket:
    action: PendingAction
    user_id: str
    expires_at: float


class ConfirmationTicketStore:
    """Thread-safe TTL store of pending destructive actions."""

    def __init__(self, ttl_seconds: int = 300):  # 5 minutes default
        self._ttl = ttl_seconds
        self._tickets: Dict[str, _Ticket] = {}
        self._lock = threading.Lock()

    def issue(self, action: PendingAction, user_id: str) -> PendingAction:
        """Store an action and return a copy carrying its new ticket_id."""
        ticket_id = uuid.uuid4().hex
        ticketed = action.model_copy(update={"ticket_id": ticket_id})
        with self._lock:
            self._evict_expired()
            self._tickets[ticket_id] = _Ticket(
                action=ticketed,
                user_id=user_id,
                expires_at=time.monotonic() + self._ttl,
            )
        logger.debug("Issued confirmation ticket %s for %s", ticket_id, action.function)
        return ticketed

    def consume(self, ticket_id: str, user_id: str) -> Optional[PendingAction]:
        """Retrieve and invalidate a ticket. None if missing/expired/wrong user."""
        with self._lock:
            ticket = self._tickets.get(ticket_id)
            if ticket is None or ticket.user_id != user_id:
                return None
            del self._tickets[ticket_id]
            if time.monotonic() > ticket.expires_at:
                return None
            return ticket.action

    def discard(self, ticket_id: str, user_id: str) -> bool:
        """Abandon a pending action. Returns True if a live ticket was removed."""
        return self.consume(ticket_id, user_id) is not None

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._tickets)

    def _evict_expired(self) -> None:
        """Remove expired tickets. Must be called with lock held."""
        now = time.monotonic()
        expired = [k for k, v in self._tickets.items() if now > v.expires_at]
        for k in expired:
            del self._tickets[k]
