from jose import jwt

from negotiation_service.core.config import settings


def get_user_authentication_headers(user_id: str, org_id: str = "org_test_1") -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test user.
    """
    payload = {"sub": user_id, "orgId": org_id, "exp": 9999999999}  # High expiration for tests
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}
