import base64
import hashlib
import hmac
from enum import Enum
from typing import Optional, Union


class NoPassword(Enum):
    """Tagged marker for "caller supplied no password".

    Distinct from the empty string and from ``hash_password("")`` so an
    unsecured join can never accidentally match a stored digest.
    """
    NO_PASSWORD = "NO_PASSWORD"


NO_PASSWORD = NoPassword.NO_PASSWORD

Credential = Union[str, NoPassword]


def hash_password(password: str) -> str:
    """base64(sha256(password)). Deterministic, so equal plaintexts store equal values."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def optional_hash(password: Optional[str]) -> Optional[str]:
    # Empty and missing passwords both mean "unsecured"
    if not password:
        return None
    return hash_password(password)


def password_credential(password: Optional[str]) -> Credential:
    if not password:
        return NO_PASSWORD
    return hash_password(password)


def credential_matches(stored_hash: Optional[str], credential: Credential) -> bool:
    """Check a join credential against a lobby's stored digest.

    Unsecured lobbies admit every credential; secured lobbies require the
    matching digest and reject NO_PASSWORD.
    """
    if not stored_hash:
        return True
    if credential is NO_PASSWORD:
        return False
    return hmac.compare_digest(stored_hash, credential)
