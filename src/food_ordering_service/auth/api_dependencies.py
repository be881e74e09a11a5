"""FastAPI dependencies for bearer token authentication.

Provides dependency injection functions for FastAPI endpoints to validate
the Authorization header and expose the caller's identity claims.
"""

from typing import Annotated

from fastapi import Header, HTTPException

from food_ordering_service.auth.token_service import TokenClaims, TokenService

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_claims_from_header(
    authorization: Annotated[str | None, Header()] = None,
    token_service: TokenService | None = None,
) -> TokenClaims:
    """FastAPI dependency to extract and validate a bearer token.

    Args:
        authorization: Value of the Authorization header (injected by FastAPI)
        token_service: TokenService used to validate the token

    Returns:
        TokenClaims: Claims of the authenticated user

    Raises:
        HTTPException: 401 if the token is missing or invalid
        InvalidRequestError: If a correctly signed token has a non-numeric subject
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing bearer token", headers=BEARER_CHALLENGE)

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid bearer token", headers=BEARER_CHALLENGE)

    if token_service is None:
        raise HTTPException(status_code=401, detail="Invalid bearer token", headers=BEARER_CHALLENGE)

    claims = token_service.validate_token(token.strip())
    if claims is None:
        raise HTTPException(status_code=401, detail="Invalid bearer token", headers=BEARER_CHALLENGE)

    return claims
