"""Authentication provider protocol."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol


@dataclass
class TokenUser:
    """Identity extracted from a Cognito-style ID token.

    ``id`` is the token subject and doubles as the user record's primary key.
    """

    id: str
    email: str
    display_name: Optional[str] = None
    expires_at: Optional[datetime] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...
