"""Reversible encryption for vendor bank account numbers.

The key is owned by the deployment (``ACCOUNT_NUMBER_KEY``, a Fernet key).
Ciphertext is what gets stored in ``vendors.account_number_encrypted``.
"""

import logging

from cryptography.fernet import Fernet, InvalidToken

from app.core.config import Settings

logger = logging.getLogger(__name__)


class AccountNumberCipher:
    def __init__(self, key: str | bytes):
        self._fernet = Fernet(key)

    def encrypt(self, account_number: str) -> str:
        return self._fernet.encrypt(account_number.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError("Account number ciphertext is invalid for the configured key") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccountNumberCipher":
        if settings.account_number_key:
            return cls(settings.account_number_key)
        if settings.is_development:
            # Ephemeral key: data encrypted with it is unreadable after restart
            logger.warning("ACCOUNT_NUMBER_KEY not set; using an ephemeral development key")
            return cls(Fernet.generate_key())
        raise RuntimeError("ACCOUNT_NUMBER_KEY must be set outside development")
