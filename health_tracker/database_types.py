# health_tracker/database_types.py
"""
Column types for health data that must not be readable straight from the
database: the user's health profile is stored as a Fernet token.
"""

import json
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.types import LargeBinary, TypeDecorator

from health_tracker.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_cipher() -> Fernet:
    """The Fernet cipher built from ENCRYPTION_KEY; fails loudly when the key is missing or malformed."""
    if not settings.ENCRYPTION_KEY:
        raise ValueError("ENCRYPTION_KEY is not set in the environment.")
    return Fernet(settings.ENCRYPTION_KEY.encode())


class EncryptedJSON(TypeDecorator):
    """
    A JSON-serialisable value (the health profile dict) kept encrypted at rest.

    Keys are sorted before encryption so the same profile always serialises
    to the same plaintext. A token that cannot be decrypted with the current
    key (e.g. after a key rotation) is an error, not an empty profile.
    """
    impl = LargeBinary
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        plaintext = json.dumps(value, sort_keys=True, separators=(",", ":"))
        return get_cipher().encrypt(plaintext.encode("utf-8"))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        try:
            plaintext = get_cipher().decrypt(bytes(value))
        except InvalidToken:
            logger.error("Stored health profile could not be decrypted with the configured ENCRYPTION_KEY.")
            raise
        return json.loads(plaintext.decode("utf-8"))
