"""
Credential encryption for integrations.

Secure credential values are encrypted with Fernet symmetric encryption
before they reach the database. Non-secret values (sender names, regions,
hosts) are stored as-is so they stay readable for support staff.

Encrypted values carry a prefix so encryption is never applied twice:
- 'enc:'  string values
- 'encj:' structured values (JSON encoded before encryption)
"""

import base64
import functools
import json
import logging
from typing import Any, Dict

from django.conf import settings

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = 'enc:'
ENCRYPTED_JSON_PREFIX = 'encj:'

# Credential keys whose values must never be stored in plain text
SECURE_CREDENTIAL_KEYS = frozenset({
    'api_key', 'apiKey',
    'api_token', 'apiToken',
    'secret_key', 'secretKey',
    'auth_token', 'authToken',
    'token',
    'password',
    'service_account', 'serviceAccount',
    'webhook_url', 'webhookUrl',
})


def get_encryption_key() -> bytes:
    """
    Derive the Fernet key from settings.
    Uses PBKDF2 over CREDENTIALS_ENCRYPTION_KEY, or SECRET_KEY when unset.
    """
    secret = getattr(settings, 'CREDENTIALS_ENCRYPTION_KEY', '') or settings.SECRET_KEY
    return _derive_key(secret)


@functools.lru_cache(maxsize=4)
def _derive_key(secret: str) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=b'notifyhub_integrations_salt_v1',
        iterations=100000,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode()))


def get_fernet() -> Fernet:
    return Fernet(get_encryption_key())


def has_encrypted_prefix(value: Any) -> bool:
    return isinstance(value, str) and (
        value.startswith(ENCRYPTED_PREFIX) or value.startswith(ENCRYPTED_JSON_PREFIX)
    )


def _strip_prefix(value: str) -> str:
    if value.startswith(ENCRYPTED_JSON_PREFIX):
        return value[len(ENCRYPTED_JSON_PREFIX):]
    return value[len(ENCRYPTED_PREFIX):]


def is_encrypted(value: Any) -> bool:
    """
    True only for values this deployment encrypted.
    A plain secret that merely starts with a prefix, such as 'enc:hunter2',
    does not decrypt with the current key and is not treated as encrypted.
    """
    if not has_encrypted_prefix(value):
        return False
    try:
        get_fernet().decrypt(_strip_prefix(value).encode())
    except InvalidToken:
        return False
    return True


def encrypt_value(value: Any) -> Any:
    """Encrypt a single credential value, leaving empty or encrypted values untouched."""
    if value is None or value == '' or is_encrypted(value):
        return value

    fernet = get_fernet()
    if isinstance(value, str):
        return ENCRYPTED_PREFIX + fernet.encrypt(value.encode()).decode()
    payload = json.dumps(value, sort_keys=True).encode()
    return ENCRYPTED_JSON_PREFIX + fernet.encrypt(payload).decode()


def decrypt_value(value: Any) -> Any:
    if not has_encrypted_prefix(value):
        return value

    fernet = get_fernet()
    try:
        if value.startswith(ENCRYPTED_JSON_PREFIX):
            return json.loads(fernet.decrypt(_strip_prefix(value).encode()).decode())
        return fernet.decrypt(_strip_prefix(value).encode()).decode()
    except InvalidToken:
        # Key rotated or value written by another deployment
        logger.warning("Unable to decrypt credential value, returning stored value")
        return value


def encrypt_credentials(credentials: Dict[str, Any]) -> Dict[str, Any]:
    """
    Encrypt the secure values of a credentials mapping.

    Pure function: returns a new dict and performs no I/O.
    """
    return {
        key: encrypt_value(value) if key in SECURE_CREDENTIAL_KEYS else value
        for key, value in credentials.items()
    }


def decrypt_credentials(credentials: Dict[str, Any]) -> Dict[str, Any]:
    """Inverse of encrypt_credentials."""
    return {
        key: decrypt_value(value) if key in SECURE_CREDENTIAL_KEYS else value
        for key, value in credentials.items()
    }


def mask_credentials(credentials: Dict[str, Any]) -> Dict[str, Any]:
    """Hide secure values for API responses."""
    return {
        key: ('********' if value else value) if key in SECURE_CREDENTIAL_KEYS else value
        for key, value in credentials.items()
    }
