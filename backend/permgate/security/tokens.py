from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..errors import AuthError
from . import passwords


class TokenService:
    """Issues and verifies HS256 access tokens whose ``sub`` is the user id.

    Also satisfies ``CredentialPort`` by delegating password work to
    :mod:`permgate.security.passwords`.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue_token(self, subject_id: int, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def _parse_token_payload(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid token") from exc

    def verify_token(self, token: str) -> int:
        if not token or not isinstance(token, str):
            raise AuthError("Invalid token")
        payload = self._parse_token_payload(token)

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            raise AuthError("Invalid token payload")
        return int(subject)

    def hash_password(self, password: str) -> str:
        return passwords.hash_password(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        return passwords.verify_password(password, password_hash)
