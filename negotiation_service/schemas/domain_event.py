from enum import Enum


class NegotiationEventType(str, Enum):
    PROPOSAL_CREATED = "ProposalCreated"
    RESPONSE_RECORDED = "ResponseRecorded"
    AGREEMENT_FINALIZED = "AgreementFinalized"
    REQUEST_DECLINED = "RequestDeclined"
    REQUEST_CANCELLED = "RequestCancelled"
    REQUEST_STATUS_CHANGED = "RequestStatusChanged"
