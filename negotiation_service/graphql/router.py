# negotiation_service/graphql/router.py
from strawberry.fastapi import GraphQLRouter, BaseContext
from fastapi import Depends, Request
from jose import JWTError
from sqlalchemy.orm import Session

from .schema import schema
from ..api.deps import decode_token
from ..db.session import get_db
from ..schemas.token import TokenPayload


class CustomContext(BaseContext):
    def __init__(self, db: Session, user: TokenPayload | None = None):
        super().__init__()
        self.db = db
        self.user = user


# Reads the 'Authorization' header passed from the gateway and verifies the JWT.
def get_context(
    request: Request,
    db: Session = Depends(get_db),
) -> CustomContext:
    auth_header = request.headers.get("Authorization")
    user = None

    if auth_header:
        try:
            # The gateway passes the token in the format "Bearer <token>"
            token = auth_header.split(" ")[1]
            if token:
                user = decode_token(token)
        except (JWTError, ValueError, IndexError):
            # If the token is invalid or the header is malformed, user remains None
            user = None

    return CustomContext(db=db, user=user)


graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
)
