from fastapi.testclient import TestClient

from tests.conftest import ORGANIZER, PROVIDER
from tests.utils.auth import get_user_authentication_headers

organizer_headers = get_user_authentication_headers(ORGANIZER)
provider_headers = get_user_authentication_headers(PROVIDER)

SUBMIT_PROPOSAL = """
    mutation Submit($requestId: String!, $terms: ProposalTermsInput!, $respondsTo: String) {
        submitProposal(requestId: $requestId, terms: $terms, respondsTo: $respondsTo) {
            id
            cardNumber
            status
            responseToCardId
        }
    }
"""

RESPOND = """
    mutation Respond($cardId: String!, $responseType: ResponseTypeEnum!) {
        respondToProposal(cardId: $cardId, responseType: $responseType) {
            requestStatus
            card { id status }
            agreementCard { cardNumber status }
        }
    }
"""

THREAD = """
    query Thread($requestId: String!) {
        negotiationThread(requestId: $requestId) {
            requestStatus
            isAgreementLocked
            cards { cardNumber status responses { respondedBy responseType } }
            currentCard { cardNumber }
        }
    }
"""

TERMS = {"title": "Keynote AV", "budgetRange": {"min": 1200, "max": 1500}, "timeline": "1 week"}


def _gql(client: TestClient, query: str, variables: dict, headers=organizer_headers) -> dict:
    response = client.post("/graphql", json={"query": query, "variables": variables}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _create_request(client: TestClient) -> str:
    response = client.post(
        "/api/v1/service-requests", headers=organizer_headers, json={"title": "Keynote AV"}
    )
    return response.json()["id"]


def test_negotiation_over_graphql(client: TestClient) -> None:
    request_id = _create_request(client)

    first = _gql(client, SUBMIT_PROPOSAL, {"requestId": request_id, "terms": TERMS})
    first_card = first["data"]["submitProposal"]
    assert first_card["cardNumber"] == 1
    assert first_card["status"] == "PENDING"

    counter = _gql(
        client,
        SUBMIT_PROPOSAL,
        {"requestId": request_id, "terms": TERMS, "respondsTo": first_card["id"]},
        provider_headers,
    )
    counter_card = counter["data"]["submitProposal"]
    assert counter_card["responseToCardId"] == first_card["id"]

    _gql(client, RESPOND, {"cardId": counter_card["id"], "responseType": "ACCEPT"})
    result = _gql(
        client, RESPOND, {"cardId": counter_card["id"], "responseType": "ACCEPT"}, provider_headers
    )["data"]["respondToProposal"]

    assert result["requestStatus"] == "AGREED"
    assert result["card"]["status"] == "ACCEPTED"
    assert result["agreementCard"] == {"cardNumber": 3, "status": "AGREEMENT"}

    thread = _gql(client, THREAD, {"requestId": request_id})["data"]["negotiationThread"]
    assert thread["isAgreementLocked"] is True
    assert [c["status"] for c in thread["cards"]] == ["COUNTERED", "ACCEPTED", "AGREEMENT"]
    assert thread["currentCard"] is None
    assert {r["respondedBy"] for r in thread["cards"][1]["responses"]} == {ORGANIZER, PROVIDER}


def test_graphql_errors_carry_error_code(client: TestClient) -> None:
    request_id = _create_request(client)
    card = _gql(client, SUBMIT_PROPOSAL, {"requestId": request_id, "terms": TERMS})["data"]["submitProposal"]

    _gql(client, RESPOND, {"cardId": card["id"], "responseType": "ACCEPT"}, provider_headers)
    duplicate = _gql(client, RESPOND, {"cardId": card["id"], "responseType": "REJECT"}, provider_headers)

    assert duplicate["data"] is None
    assert duplicate["errors"][0]["extensions"]["code"] == "DUPLICATE_RESPONSE"


def test_graphql_requires_token(client: TestClient) -> None:
    request_id = _create_request(client)

    result = _gql(client, THREAD, {"requestId": request_id}, headers={})

    assert result["data"] is None
    assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"


def test_service_request_query(client: TestClient) -> None:
    request_id = _create_request(client)
    query = "query($id: String!) { serviceRequest(id: $id) { id status organizerId } }"

    found = _gql(client, query, {"id": request_id})["data"]["serviceRequest"]
    missing = _gql(client, query, {"id": "srq_missing"})["data"]["serviceRequest"]

    assert found == {"id": request_id, "status": "PENDING", "organizerId": ORGANIZER}
    assert missing is None


def test_cancel_over_graphql(client: TestClient) -> None:
    request_id = _create_request(client)
    mutation = "mutation($id: String!) { cancelServiceRequest(id: $id, reason: \"Venue fell through\") { status } }"

    result = _gql(client, mutation, {"id": request_id})

    assert result["data"]["cancelServiceRequest"]["status"] == "CANCELLED"
