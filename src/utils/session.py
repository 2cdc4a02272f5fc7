"""Session helpers for requests authorized by the HTTP API JWT authorizer."""

from typing import Optional


def get_current_user(event: dict) -> Optional[dict]:
    """
    Return the caller's identity claims, or None for anonymous requests.

    Sign-out is a client concern: the UI discards its token and the API
    simply stops seeing claims.
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = (authorizer.get("jwt") or {}).get("claims")
    if not claims:
        return None
    return {
        "sub": claims.get("sub"),
        "email": claims.get("email"),
        "username": claims.get("cognito:username") or claims.get("username"),
    }
