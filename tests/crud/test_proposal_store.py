# tests/crud/test_proposal_store.py
"""
Tests for the proposal card store: numbering, single pending card, and the
monotonic card status.
"""

import pytest

from negotiation_service.core.exceptions import (
    InvalidCardTransitionError,
    LockedRequestError,
    StaleProposalError,
)
from negotiation_service.crud import crud_proposal_card, crud_service_request
from negotiation_service.services.negotiation import proposal_store
from tests.conftest import ORGANIZER, PROVIDER, make_terms


def _lock(db, request_id):
    return crud_service_request.get_for_update(db, request_id)


class TestCreateCard:
    def test_first_card_is_number_one_and_pending(self, db, open_request):
        request = _lock(db, open_request.id)
        card = proposal_store.create_card(
            db, request=request, author_id=ORGANIZER, terms=make_terms()
        )
        assert card.card_number == 1
        assert card.status == "pending"
        assert card.response_to_card_id is None
        assert card.negotiated_budget_range == {"min": 4000.0, "max": 5000.0, "currency": "USD"}

    def test_numbers_are_contiguous_along_a_chain(self, db, open_request):
        request = _lock(db, open_request.id)
        previous = proposal_store.create_card(
            db, request=request, author_id=ORGANIZER, terms=make_terms()
        )
        for i in range(4):
            author = PROVIDER if i % 2 == 0 else ORGANIZER
            card = proposal_store.create_card(
                db, request=request, author_id=author, terms=make_terms(), responds_to=previous.id
            )
            proposal_store.mark_status(db, previous, "countered")
            previous = card

        numbers = [c.card_number for c in crud_proposal_card.list_for_request(db, request.id)]
        assert numbers == [1, 2, 3, 4, 5]

    def test_new_chain_rejected_while_a_card_is_pending(self, db, open_request):
        request = _lock(db, open_request.id)
        pending = proposal_store.create_card(
            db, request=request, author_id=ORGANIZER, terms=make_terms()
        )
        with pytest.raises(StaleProposalError) as exc:
            proposal_store.create_card(db, request=request, author_id=PROVIDER, terms=make_terms())
        assert exc.value.details["current_card_id"] == pending.id

    def test_responding_to_a_non_current_card_is_stale(self, db, open_request):
        request = _lock(db, open_request.id)
        first = proposal_store.create_card(
            db, request=request, author_id=ORGANIZER, terms=make_terms()
        )
        proposal_store.create_card(
            db, request=request, author_id=PROVIDER, terms=make_terms(), responds_to=first.id
        )
        proposal_store.mark_status(db, first, "countered")

        with pytest.raises(StaleProposalError):
            proposal_store.create_card(
                db, request=request, author_id=ORGANIZER, terms=make_terms(), responds_to=first.id
            )

    def test_create_does_not_touch_predecessor(self, db, open_request):
        request = _lock(db, open_request.id)
        first = proposal_store.create_card(
            db, request=request, author_id=ORGANIZER, terms=make_terms()
        )
        proposal_store.create_card(
            db, request=request, author_id=PROVIDER, terms=make_terms(), responds_to=first.id
        )
        assert first.status == "pending"

    def test_locked_request_rejects_new_cards(self, db, open_request):
        request = _lock(db, open_request.id)
        request.is_agreement_locked = True
        db.flush()
        with pytest.raises(LockedRequestError):
            proposal_store.create_card(db, request=request, author_id=ORGANIZER, terms=make_terms())


class TestAllocateCardNumber:
    def test_sequence_advances(self, db, open_request):
        assert crud_service_request.allocate_card_number(db, open_request.id) == 1
        assert crud_service_request.allocate_card_number(db, open_request.id) == 2

    def test_returns_none_for_locked_request(self, db, open_request):
        request = _lock(db, open_request.id)
        request.is_agreement_locked = True
        db.flush()
        assert crud_service_request.allocate_card_number(db, open_request.id) is None

    def test_returns_none_for_unknown_request(self, db):
        assert crud_service_request.allocate_card_number(db, "srq_missing") is None


class TestMarkStatus:
    def test_pending_to_terminal(self, db, open_request):
        request = _lock(db, open_request.id)
        card = proposal_store.create_card(db, request=request, author_id=ORGANIZER, terms=make_terms())
        assert proposal_store.mark_status(db, card, "cancelled") is True
        assert card.status == "cancelled"

    def test_same_status_is_a_noop(self, db, open_request):
        request = _lock(db, open_request.id)
        card = proposal_store.create_card(db, request=request, author_id=ORGANIZER, terms=make_terms())
        proposal_store.mark_status(db, card, "accepted")
        assert proposal_store.mark_status(db, card, "accepted") is False

    @pytest.mark.parametrize("terminal,target", [
        ("accepted", "pending"),
        ("countered", "accepted"),
        ("cancelled", "countered"),
    ])
    def test_terminal_cards_never_move(self, db, open_request, terminal, target):
        request = _lock(db, open_request.id)
        card = proposal_store.create_card(db, request=request, author_id=ORGANIZER, terms=make_terms())
        proposal_store.mark_status(db, card, terminal)
        with pytest.raises(InvalidCardTransitionError):
            proposal_store.mark_status(db, card, target)
        assert card.status == terminal
