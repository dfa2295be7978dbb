"""
Authentication dependencies for FastAPI
Provides JWT token validation for protected routes
"""

import jwt
from fastapi import Depends, Request

from nutrition_service.core.errors import InvalidTokenError, MissingTokenError
from nutrition_service.core.logger import logger
from nutrition_service.dependencies.context import ServiceContext, get_context
from nutrition_service.models.principal import Principal


def extract_token(header_value: str) -> str:
    """Accept either a raw token or the `Bearer <token>` form"""
    value = header_value.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer" and rest:
        return rest.strip()
    return value


def decode_token(token: str, secret: str, algorithm: str) -> dict:
    """
    Decode and validate JWT token

    Raises:
        InvalidTokenError: If the signature is invalid, the token is malformed or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise InvalidTokenError()


async def get_current_principal(
    request: Request,
    context: ServiceContext = Depends(get_context),
) -> Principal:
    """
    Dependency guarding protected routes.

    Usage:
        @router.post("/")
        async def create_item(principal: Principal = Depends(get_current_principal)):
            ...
    """
    header_value = request.headers.get(context.config.auth_header)
    if not header_value or not header_value.strip():
        logger.warning("Authentication required: No token provided")
        raise MissingTokenError()

    claims = decode_token(
        extract_token(header_value),
        context.config.jwt_secret,
        context.config.jwt_algorithm,
    )
    principal = Principal.from_claims(claims)
    request.state.principal = principal

    logger.debug("Authentication successful", user_id=principal.subject)
    return principal
