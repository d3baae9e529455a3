# tests/services/test_status_machine.py
"""
Unit tests for the service request lifecycle.
"""

import pytest

from negotiation_service.core.exceptions import (
    InvalidStatusTransitionError,
    LockedRequestError,
    RequestClosedError,
)
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.services.negotiation import status_machine


def _request(status="pending", locked=False):
    return ServiceRequest(
        id="srq_test",
        organizer_id="user_organizer",
        title="Catering",
        status=status,
        is_agreement_locked=locked,
    )


class TestCanTransition:
    @pytest.mark.parametrize(
        "old,new",
        [
            ("pending", "negotiating"),
            ("pending", "cancelled"),
            ("negotiating", "agreed"),
            ("negotiating", "declined"),
            ("agreed", "in_progress"),
            ("agreed", "declined"),
            ("in_progress", "pending_review"),
            ("pending_review", "completed"),
            ("pending_review", "cancelled"),
        ],
    )
    def test_forward_transitions_allowed(self, old, new):
        assert status_machine.can_transition(old, new)

    @pytest.mark.parametrize(
        "old,new",
        [
            ("agreed", "negotiating"),
            ("agreed", "pending"),
            ("negotiating", "pending"),
            ("in_progress", "agreed"),
            ("pending", "agreed"),
            ("in_progress", "declined"),
        ],
    )
    def test_backward_and_skipping_transitions_rejected(self, old, new):
        assert not status_machine.can_transition(old, new)

    @pytest.mark.parametrize("terminal", ["completed", "declined", "cancelled"])
    def test_terminal_states_have_no_exits(self, terminal):
        for target in ["pending", "negotiating", "agreed", "in_progress", "cancelled"]:
            assert not status_machine.can_transition(terminal, target)


class TestTransition:
    def test_applies_and_returns_previous_status(self):
        request = _request("pending")
        old = status_machine.transition(request, "negotiating")
        assert old == "pending"
        assert request.status == "negotiating"

    def test_agreed_is_reserved_for_the_finalizer(self):
        request = _request("negotiating")
        with pytest.raises(InvalidStatusTransitionError):
            status_machine.transition(request, "agreed")
        assert request.status == "negotiating"

    def test_backward_move_raises(self):
        request = _request("agreed", locked=True)
        with pytest.raises(InvalidStatusTransitionError) as exc:
            status_machine.transition(request, "negotiating")
        assert exc.value.details["old_status"] == "agreed"
        assert request.status == "agreed"

    def test_unknown_status_raises_value_error(self):
        with pytest.raises(ValueError):
            status_machine.transition(_request(), "archived")


class TestMarkAgreed:
    def test_locks_and_assigns_provider(self):
        request = _request("negotiating")
        old = status_machine.mark_agreed(request, "spv_123")
        assert old == "negotiating"
        assert request.status == "agreed"
        assert request.is_agreement_locked is True
        assert request.provider_id == "spv_123"

    def test_without_provider_keeps_existing_assignment(self):
        request = _request("negotiating")
        request.provider_id = "spv_existing"
        status_machine.mark_agreed(request, None)
        assert request.provider_id == "spv_existing"

    def test_only_from_negotiating(self):
        with pytest.raises(InvalidStatusTransitionError):
            status_machine.mark_agreed(_request("pending"), None)


class TestEnsureNegotiable:
    def test_open_statuses_pass(self):
        status_machine.ensure_negotiable(_request("pending"))
        status_machine.ensure_negotiable(_request("negotiating"))

    def test_lock_is_reported_before_status(self):
        with pytest.raises(LockedRequestError):
            status_machine.ensure_negotiable(_request("cancelled", locked=True))

    @pytest.mark.parametrize("status", ["declined", "cancelled", "completed"])
    def test_closed_request(self, status):
        with pytest.raises(RequestClosedError):
            status_machine.ensure_negotiable(_request(status))
