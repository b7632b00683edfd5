import logging

from fastapi import Request, HTTPException

from app.core.security import decode_access_token

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization")
    if auth_header:
        return auth_header
    return request.cookies.get("access_token")


def get_current_user_id(request: Request) -> str:
    """
    Resolve the authenticated user id from a bearer token.

    Accepts "Authorization: Bearer <token>" or an access_token cookie
    (raw or "Bearer "-prefixed). The id is the token's "sub" claim.
    """
    token = _extract_token(request)

    if not token:
        logger.debug("[AUTH] reject reason=missing_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Not authenticated")

    if token.lower().startswith("bearer "):
        token = token[7:].strip()

    payload = decode_access_token(token)
    if not payload:
        logger.debug("[AUTH] reject reason=invalid_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.debug("[AUTH] reject reason=no_sub_in_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid token payload")

    return str(user_id)
