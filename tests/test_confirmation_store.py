"""Tests for ConfirmationTicketStore."""

import time

from application.models import PendingAction
from backend.services.confirmation_store import ConfirmationTicketStore

ACTION = PendingAction(
    function="deleteWorkout", args={"workoutId": "w-1", "userId": "user-1"}
)


class TestConfirmationTicketStore:
    """Tests for one-time confirmation tickets with TTL."""

    def test_issue_stamps_ticket(self):
        """issue returns a copy carrying a fresh ticket_id."""
        store = ConfirmationTicketStore(ttl_seconds=60)

        ticketed = store.issue(ACTION, "user-1")

        assert ticketed.ticket_id
        assert ticketed.function == ACTION.function
        assert ticketed.args == ACTION.args
        assert ACTION.ticket_id is None
        assert len(store) == 1

    def test_tickets_are_unique(self):
        store = ConfirmationTicketStore(ttl_seconds=60)

        first = store.issue(ACTION, "user-1")
        second = store.issue(ACTION, "user-1")

        assert first.ticket_id != second.ticket_id

    def test_consume_is_one_time(self):
        """consume returns the action once, then None."""
        store = ConfirmationTicketStore(ttl_seconds=60)
        ticketed = store.issue(ACTION, "user-1")

        assert store.consume(ticketed.ticket_id, "user-1") == ticketed
        assert store.consume(ticketed.ticket_id, "user-1") is None
        assert len(store) == 0

    def test_user_isolation(self):
        """Another user cannot consume the ticket, and does not burn it."""
        store = ConfirmationTicketStore(ttl_seconds=60)
        ticketed = store.issue(ACTION, "user-1")

        assert store.consume(ticketed.ticket_id, "user-2") is None
        assert store.consume(ticketed.ticket_id, "user-1") == ticketed

    def test_ttl_expiry(self):
        """Expired tickets cannot be consumed."""
        store = ConfirmationTicketStore(ttl_seconds=1)
        ticketed = store.issue(ACTION, "user-1")

        time.sleep(1.1)

        assert store.consume(ticketed.ticket_id, "user-1") is None
        assert len(store) == 0

    def test_discard(self):
        """discard abandons the action so it can never be confirmed."""
        store = ConfirmationTicketStore(ttl_seconds=60)
        ticketed = store.issue(ACTION, "user-1")

        assert store.discard(ticketed.ticket_id, "user-1") is True
        assert store.discard(ticketed.ticket_id, "user-1") is False
        assert store.consume(ticketed.ticket_id, "user-1") is None

    def test_unknown_ticket(self):
        store = ConfirmationTicketStore(ttl_seconds=60)

        assert store.consume("nonexistent", "user-1") is None
