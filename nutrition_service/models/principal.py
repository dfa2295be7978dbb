"""
Authenticated principal built from JWT claims
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Principal(BaseModel):
    """Decoded token claims for the current request"""

    subject: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        # Tokens issued by the auth service put the user id under different keys
        subject = claims.get("sub") or claims.get("id") or claims.get("user_id")
        return cls(subject=str(subject) if subject is not None else None, claims=claims)
