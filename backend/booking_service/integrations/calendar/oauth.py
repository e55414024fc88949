"""Google Calendar OAuth 2.0 token handling"""

import logging
from typing import Optional, Tuple

import aiohttp
from cryptography.fernet import Fernet, InvalidToken

from booking_service.core.config import GoogleCalendarConfig
from booking_service.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"


class GoogleOAuthError(Exception):
    pass


class GoogleCalendarOAuth:
    """Refresh Google access tokens and protect refresh tokens at rest"""

    def __init__(self, config: GoogleCalendarConfig, encryption_key: Optional[str] = None):
        self.config = config
        self.cipher_suite = Fernet(encryption_key) if encryption_key else None

        if not config.configured:
            logger.warning("Google Calendar OAuth credentials not configured")

    async def refresh_access_token(self, refresh_token: str) -> Tuple[str, int]:
        """
        Use refresh token to get new access token

        Args:
            refresh_token: Refresh token from initial auth

        Returns:
            Tuple of (new_access_token, expires_in_seconds)
        """
        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(
                TOKEN_URL,
                data={
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                    "refresh_token": refresh_token,
                    "grant_type": "refresh_token",
                },
            ) as resp:
                if resp.status != 200:
                    error_text = await resp.text()
                    logger.error(f"Token refresh failed: {error_text}")
                    raise GoogleOAuthError(f"Failed to refresh token: {resp.status}")

                data = await resp.json()
                access_token = data.get("access_token")
                expires_in = data.get("expires_in", 3600)

                if not access_token:
                    raise GoogleOAuthError("No access token in response")

                logger.info("Successfully refreshed access token")
                return access_token, expires_in

    def encrypt_token(self, token: str) -> str:
        """Encrypt refresh token for storage"""
        if self.cipher_suite is None:
            raise ConfigurationError("ENCRYPTION_KEY is required to store refresh tokens")
        return self.cipher_suite.encrypt(token.encode()).decode()

    def decrypt_token(self, encrypted_token: str) -> str:
        """Decrypt stored refresh token"""
        if self.cipher_suite is None:
            raise ConfigurationError("ENCRYPTION_KEY is required to read refresh tokens")
        try:
            return self.cipher_suite.decrypt(encrypted_token.encode()).decode()
        except InvalidToken:
            raise GoogleOAuthError("Stored refresh token cannot be decrypted")
