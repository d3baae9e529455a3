# tests/services/test_outbox_relay.py
from unittest.mock import patch

from negotiation_service.background_tasks.outbox_tasks import relay_pending_events
from negotiation_service.crud import crud_domain_event
from negotiation_service.services.negotiation import negotiation_engine
from tests.conftest import ORGANIZER, make_terms


def _propose_while_broker_down(db, request):
    with patch("negotiation_service.utils.kafka_helpers.get_kafka_singleton", return_value=None):
        negotiation_engine.submit_proposal(
            db, request_id=request.id, actor_id=ORGANIZER, terms=make_terms()
        )


def test_relay_publishes_leftover_events(db, open_request, kafka_producer, redis_mock):
    _propose_while_broker_down(db, open_request)
    redis_mock.publish.reset_mock()

    published = relay_pending_events(session_factory=lambda: db)

    assert published == 2
    assert kafka_producer.send.call_count == 2
    assert redis_mock.publish.call_count == 2
    events = crud_domain_event.get_for_request(db, request_id=open_request.id)
    assert all(e.published_at is not None for e in events)
    assert all(e.publish_attempts == 2 for e in events)


def test_relay_with_nothing_pending(db, open_request, kafka_producer):
    negotiation_engine.submit_proposal(
        db, request_id=open_request.id, actor_id=ORGANIZER, terms=make_terms()
    )
    kafka_producer.send.reset_mock()

    assert relay_pending_events(session_factory=lambda: db) == 0
    kafka_producer.send.assert_not_called()


def test_relay_counts_failed_attempts(db, open_request):
    _propose_while_broker_down(db, open_request)

    with patch("negotiation_service.utils.kafka_helpers.get_kafka_singleton", return_value=None):
        published = relay_pending_events(session_factory=lambda: db)

    assert published == 0
    events = crud_domain_event.get_for_request(db, request_id=open_request.id)
    assert all(e.published_at is None for e in events)
    assert all(e.publish_attempts == 2 for e in events)


def test_relay_gives_up_after_max_attempts(db, open_request, kafka_producer):
    _propose_while_broker_down(db, open_request)
    for event in crud_domain_event.get_for_request(db, request_id=open_request.id):
        event.publish_attempts = 10
    db.commit()

    assert relay_pending_events(session_factory=lambda: db) == 0
    kafka_producer.send.assert_not_called()
