# negotiation_service/services/negotiation/service.py
"""
Negotiation Service

Entry point for every state-changing negotiation operation:
- Service requests (create, list, cancel)
- Proposals and responses (submit, accept / reject / counter / cancel)
- Agreement finalization
- Delivery lifecycle (start, deliverables, completion, decline)
- Comments and provider registration

Each operation runs in one transaction: the service request row is locked
with SELECT ... FOR UPDATE, every dependent write plus its audit and outbox
rows is flushed, and the session commits once. Any error rolls the whole
operation back. Domain events are published only after the commit.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.orm import Session

from negotiation_service.core.exceptions import (
    AlreadyLockedError,
    InvalidStatusTransitionError,
    LockedRequestError,
    MissingCounterTermsError,
    NotParticipantError,
    ProposalCardNotFoundError,
    ServiceProviderNotFoundError,
    ServiceRequestNotFoundError,
    StaleProposalError,
)
from negotiation_service.crud import (
    crud_audit_log,
    crud_project_completion,
    crud_proposal_card,
    crud_request_comment,
    crud_response_record,
    crud_service_provider,
    crud_service_request,
)
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.request_comment import RequestComment
from negotiation_service.models.service_provider import ServiceProvider
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.schemas.comment import CommentCreate
from negotiation_service.schemas.domain_event import NegotiationEventType
from negotiation_service.schemas.proposal_card import (
    CardStatus,
    FinalizeResult,
    NegotiationThreadOut,
    ProposalCardOut,
    ProposalTerms,
    RespondResult,
    ResponseRecordOut,
    ResponseType,
)
from negotiation_service.schemas.provider import ServiceProviderCreate
from negotiation_service.schemas.service_request import (
    RequestStatus,
    ServiceRequestCreate,
)
from negotiation_service.services.negotiation import (
    events,
    finalizer,
    participants,
    proposal_store,
    response_ledger,
    status_machine,
)
from negotiation_service.services.negotiation.mutual_acceptance import has_mutual_acceptance
from negotiation_service.services.negotiation.thread import build_thread

logger = logging.getLogger(__name__)


class NegotiationService:
    """Service for negotiating and delivering service engagements."""

    # ========================================
    # Transaction helpers
    # ========================================

    @contextmanager
    def _transaction(self, db: Session):
        """Commit once on success, roll back on any error, then publish events."""
        outbox = []
        try:
            yield outbox
            db.commit()
        except Exception:
            db.rollback()
            raise
        events.publish_committed(db, outbox)

    def _lock_request(self, db: Session, request_id: str) -> ServiceRequest:
        request = crud_service_request.get_for_update(db, request_id)
        if not request:
            raise ServiceRequestNotFoundError(request_id)
        return request

    def _get_card(self, db: Session, card_id: str) -> ProposalCard:
        card = crud_proposal_card.get(db, card_id)
        if not card:
            raise ProposalCardNotFoundError(card_id)
        return card

    def _change_status(
        self,
        db: Session,
        outbox: list,
        request: ServiceRequest,
        new_status: str,
        actor_id: str,
        event_type: NegotiationEventType = NegotiationEventType.REQUEST_STATUS_CHANGED,
        metadata: Optional[dict] = None,
    ) -> str:
        old_status = status_machine.transition(request, new_status)
        db.flush()

        crud_audit_log.create_audit_entry(
            db,
            request_id=request.id,
            user_id=actor_id,
            action="status_changed",
            old_state=old_status,
            new_state=new_status,
            metadata=metadata,
        )
        outbox.append(
            events.record(
                db,
                request_id=request.id,
                event_type=event_type,
                user_id=actor_id,
                data={"old_status": old_status, "new_status": new_status, **(metadata or {})},
            )
        )
        return old_status

    # ========================================
    # Service Requests
    # ========================================

    def register_provider(
        self, db: Session, *, actor_id: str, data: ServiceProviderCreate
    ) -> ServiceProvider:
        """Register the actor in the provider directory. Idempotent per actor."""
        existing = crud_service_provider.get_by_user_id(db, actor_id)
        if existing:
            return existing

        with self._transaction(db):
            provider = crud_service_provider.create(
                db, user_id=actor_id, business_name=data.business_name
            )
        logger.info(f"Registered provider {provider.id} for user {actor_id}")
        return provider

    def create_request(
        self, db: Session, *, organizer_id: str, data: ServiceRequestCreate
    ) -> ServiceRequest:
        if data.provider_id and not crud_service_provider.get(db, data.provider_id):
            raise ServiceProviderNotFoundError(data.provider_id)

        with self._transaction(db):
            request = crud_service_request.create(db, organizer_id=organizer_id, data=data)
            crud_audit_log.create_audit_entry(
                db,
                request_id=request.id,
                user_id=organizer_id,
                action="request_created",
                new_state=RequestStatus.PENDING.value,
                metadata={"provider_id": data.provider_id},
            )
        logger.info(f"Service request {request.id} created by {organizer_id}")
        return request

    def get_request(self, db: Session, request_id: str) -> ServiceRequest:
        request = crud_service_request.get(db, request_id)
        if not request:
            raise ServiceRequestNotFoundError(request_id)
        return request

    def list_requests_for_actor(
        self,
        db: Session,
        actor_id: str,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> dict:
        return crud_service_request.list_for_actor(
            db, actor_id, status=status, page=page, page_size=page_size
        )

    def get_thread(self, db: Session, request_id: str) -> NegotiationThreadOut:
        return build_thread(db, self.get_request(db, request_id))

    # ========================================
    # Proposals
    # ========================================

    def _append_card(
        self,
        db: Session,
        outbox: list,
        *,
        request: ServiceRequest,
        actor_id: str,
        terms: ProposalTerms,
        responds_to: Optional[str] = None,
    ) -> ProposalCard:
        card = proposal_store.create_card(
            db, request=request, author_id=actor_id, terms=terms, responds_to=responds_to
        )

        if request.status == RequestStatus.PENDING.value:
            self._change_status(db, outbox, request, RequestStatus.NEGOTIATING.value, actor_id)

        crud_audit_log.create_audit_entry(
            db,
            request_id=request.id,
            card_id=card.id,
            user_id=actor_id,
            action="proposal_submitted",
            new_state=card.status,
            metadata={"card_number": card.card_number, "responds_to": responds_to},
        )
        outbox.append(
            events.record(
                db,
                request_id=request.id,
                event_type=NegotiationEventType.PROPOSAL_CREATED,
                user_id=actor_id,
                data={
                    "card_id": card.id,
                    "card_number": card.card_number,
                    "response_to_card_id": responds_to,
                },
            )
        )
        return card

    def submit_proposal(
        self,
        db: Session,
        *,
        request_id: str,
        actor_id: str,
        terms: ProposalTerms,
        responds_to: Optional[str] = None,
    ) -> ProposalCard:
        """
        Submit a proposal on a request.

        With `responds_to` this is a counter proposal: the actor's `counter`
        response is recorded on the referenced card, which becomes `countered`.
        """
        if responds_to:
            result = self.respond(
                db,
                card_id=responds_to,
                actor_id=actor_id,
                response_type=ResponseType.COUNTER.value,
                counter_terms=terms,
                expected_request_id=request_id,
            )
            return crud_proposal_card.get(db, result.counter_card.id)

        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            status_machine.ensure_negotiable(request)
            participants.ensure_participant(db, request, actor_id, action="propose")
            card = self._append_card(
                db, outbox, request=request, actor_id=actor_id, terms=terms
            )
        return card

    # ========================================
    # Responses
    # ========================================

    def respond(
        self,
        db: Session,
        *,
        card_id: str,
        actor_id: str,
        response_type: str,
        notes: Optional[str] = None,
        counter_terms: Optional[ProposalTerms] = None,
        expected_request_id: Optional[str] = None,
    ) -> RespondResult:
        response_type = ResponseType(response_type)
        if response_type == ResponseType.COUNTER and counter_terms is None:
            raise MissingCounterTermsError(card_id)

        counter_card = None
        agreement_card = None

        with self._transaction(db) as outbox:
            card = self._get_card(db, card_id)
            if expected_request_id and card.request_id != expected_request_id:
                raise ProposalCardNotFoundError(card_id)

            request = self._lock_request(db, card.request_id)
            # Re-read under the request lock
            db.refresh(card)

            status_machine.ensure_negotiable(request)
            participants.ensure_participant(db, request, actor_id, card, action="respond")

            if card.status != CardStatus.PENDING.value:
                current = crud_proposal_card.get_pending_for_request(db, request.id)
                raise StaleProposalError(request.id, card.id, current.id if current else None)

            if response_type == ResponseType.CANCEL and actor_id != card.submitted_by:
                raise NotParticipantError(request.id, actor_id, action="withdraw this proposal")

            # On an open request only a known counterpart may end the chain
            if (
                response_type == ResponseType.REJECT
                and actor_id != request.organizer_id
                and participants.provider_actor_id(db, request, card) is None
            ):
                raise NotParticipantError(request.id, actor_id, action="reject this proposal")

            record = response_ledger.record_response(
                db,
                card=card,
                actor_id=actor_id,
                response_type=response_type.value,
                notes=notes,
            )
            crud_audit_log.create_audit_entry(
                db,
                request_id=request.id,
                card_id=card.id,
                user_id=actor_id,
                action="response_recorded",
                old_state=card.status,
                metadata={"response_type": response_type.value},
            )
            outbox.append(
                events.record(
                    db,
                    request_id=request.id,
                    event_type=NegotiationEventType.RESPONSE_RECORDED,
                    user_id=actor_id,
                    data={
                        "card_id": card.id,
                        "response_id": record.id,
                        "response_type": response_type.value,
                    },
                )
            )

            if response_type == ResponseType.ACCEPT:
                agreement_card = self._finalize_if_mutual(db, outbox, request, card, actor_id)

            elif response_type == ResponseType.COUNTER:
                counter_card = self._append_card(
                    db,
                    outbox,
                    request=request,
                    actor_id=actor_id,
                    terms=counter_terms,
                    responds_to=card.id,
                )
                proposal_store.mark_status(db, card, CardStatus.COUNTERED.value)

            elif response_type == ResponseType.REJECT:
                proposal_store.mark_status(db, card, CardStatus.CANCELLED.value)
                if crud_proposal_card.count_pending(db, request.id) == 0:
                    self._change_status(
                        db,
                        outbox,
                        request,
                        RequestStatus.DECLINED.value,
                        actor_id,
                        event_type=NegotiationEventType.REQUEST_DECLINED,
                        metadata={"card_id": card.id, "reason": notes},
                    )

            else:
                # Withdrawal: the request stays open for a fresh proposal
                proposal_store.mark_status(db, card, CardStatus.CANCELLED.value)

        return RespondResult(
            response=ResponseRecordOut.model_validate(record),
            card=ProposalCardOut.model_validate(card),
            counter_card=ProposalCardOut.model_validate(counter_card) if counter_card else None,
            agreement_card=ProposalCardOut.model_validate(agreement_card) if agreement_card else None,
            request_status=request.status,
        )

    # ========================================
    # Finalization
    # ========================================

    def _finalize_if_mutual(
        self,
        db: Session,
        outbox: list,
        request: ServiceRequest,
        card: ProposalCard,
        actor_id: str,
    ) -> Optional[ProposalCard]:
        responses = crud_response_record.list_for_card(db, card.id)
        provider_actor = participants.provider_actor_id(db, request, card)
        if not has_mutual_acceptance(responses, request.organizer_id, provider_actor):
            return None

        agreement, old_status = finalizer.apply(db, request=request, card=card, actor_id=actor_id)
        self._record_finalization(db, outbox, request, card, agreement, old_status, actor_id)
        return agreement

    def _record_finalization(
        self,
        db: Session,
        outbox: list,
        request: ServiceRequest,
        card: ProposalCard,
        agreement: ProposalCard,
        old_status: str,
        actor_id: str,
    ) -> None:
        crud_audit_log.create_audit_entry(
            db,
            request_id=request.id,
            card_id=agreement.id,
            user_id=actor_id,
            action="agreement_finalized",
            old_state=old_status,
            new_state=request.status,
            metadata={"original_card_id": card.id, "provider_id": request.provider_id},
        )
        outbox.append(
            events.record(
                db,
                request_id=request.id,
                event_type=NegotiationEventType.AGREEMENT_FINALIZED,
                user_id=actor_id,
                data={
                    "original_card_id": card.id,
                    "agreement_card_id": agreement.id,
                    "provider_id": request.provider_id,
                },
            )
        )

    def finalize(self, db: Session, *, card_id: str, actor_id: str) -> FinalizeResult:
        """
        Finalize a mutually accepted card. Calling it again on a finalized
        request returns the existing agreement.
        """
        already_finalized = False

        with self._transaction(db) as outbox:
            card = self._get_card(db, card_id)
            request = self._lock_request(db, card.request_id)
            db.refresh(card)
            participants.ensure_participant(db, request, actor_id, card, action="finalize")

            try:
                agreement, old_status = finalizer.apply(
                    db, request=request, card=card, actor_id=actor_id
                )
            except AlreadyLockedError:
                agreement = crud_proposal_card.get_agreement_for_request(db, request.id)
                if agreement is None:
                    raise LockedRequestError(request.id)
                already_finalized = True
                logger.info(f"Request {request.id} already finalized; returning agreement {agreement.id}")
            else:
                self._record_finalization(db, outbox, request, card, agreement, old_status, actor_id)

        return FinalizeResult(
            agreement_card=ProposalCardOut.model_validate(agreement),
            request_status=request.status,
            provider_id=request.provider_id,
            already_finalized=already_finalized,
        )

    # ========================================
    # Delivery lifecycle
    # ========================================

    def cancel_request(
        self, db: Session, *, request_id: str, actor_id: str, reason: Optional[str] = None
    ) -> ServiceRequest:
        """Organizer cancellation, allowed from any non-terminal status."""
        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            participants.ensure_organizer(request, actor_id, action="cancel")

            self._change_status(
                db,
                outbox,
                request,
                RequestStatus.CANCELLED.value,
                actor_id,
                event_type=NegotiationEventType.REQUEST_CANCELLED,
                metadata={"reason": reason},
            )
            pending = crud_proposal_card.get_pending_for_request(db, request.id)
            if pending:
                proposal_store.mark_status(db, pending, CardStatus.CANCELLED.value)
        return request

    def decline_assignment(
        self, db: Session, *, request_id: str, actor_id: str, reason: Optional[str] = None
    ) -> ServiceRequest:
        """The provider walks away from an agreed engagement before work starts."""
        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            participants.ensure_provider(db, request, actor_id, action="decline")
            if request.status != RequestStatus.AGREED.value:
                raise InvalidStatusTransitionError(
                    request.id, request.status, RequestStatus.DECLINED.value
                )
            self._change_status(
                db,
                outbox,
                request,
                RequestStatus.DECLINED.value,
                actor_id,
                event_type=NegotiationEventType.REQUEST_DECLINED,
                metadata={"reason": reason},
            )
        return request

    def start_work(self, db: Session, *, request_id: str, actor_id: str) -> ServiceRequest:
        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            if actor_id != request.organizer_id:
                participants.ensure_provider(db, request, actor_id, action="start work")
            self._change_status(db, outbox, request, RequestStatus.IN_PROGRESS.value, actor_id)
        return request

    def submit_deliverables(
        self,
        db: Session,
        *,
        request_id: str,
        actor_id: str,
        deliverables: List[str],
        notes: Optional[str] = None,
    ) -> ServiceRequest:
        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            participants.ensure_provider(db, request, actor_id, action="submit deliverables")
            self._change_status(
                db,
                outbox,
                request,
                RequestStatus.PENDING_REVIEW.value,
                actor_id,
                metadata={"deliverables": list(deliverables)},
            )
            crud_project_completion.create(
                db,
                request_id=request.id,
                submitted_by=actor_id,
                deliverables=deliverables,
                notes=notes,
            )
        return request

    def confirm_completion(self, db: Session, *, request_id: str, actor_id: str) -> ServiceRequest:
        with self._transaction(db) as outbox:
            request = self._lock_request(db, request_id)
            participants.ensure_organizer(request, actor_id, action="confirm completion")
            self._change_status(db, outbox, request, RequestStatus.COMPLETED.value, actor_id)

            completion = crud_project_completion.get_for_request(db, request.id)
            if completion:
                crud_project_completion.confirm(db, completion=completion, confirmed_by=actor_id)
            else:
                logger.warning(f"Request {request.id} completed without a deliverables record")
        return request

    # ========================================
    # Comments
    # ========================================

    def add_comment(
        self, db: Session, *, request_id: str, actor_id: str, data: CommentCreate
    ) -> RequestComment:
        """Free-text note on a request. Never part of the negotiation state."""
        request = self.get_request(db, request_id)
        participants.ensure_participant(db, request, actor_id, action="comment")

        with self._transaction(db):
            comment = crud_request_comment.create(
                db,
                request_id=request.id,
                author_id=actor_id,
                content=data.content,
                comment_type=data.comment_type.value,
            )
        return comment

    def list_comments(self, db: Session, request_id: str) -> List[RequestComment]:
        self.get_request(db, request_id)
        return crud_request_comment.list_for_request(db, request_id)


# Singleton instance
negotiation_engine = NegotiationService()
