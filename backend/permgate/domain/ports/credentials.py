from __future__ import annotations

from typing import Protocol


class CredentialPort(Protocol):
    """Boundary of the credential service consumed by the access gate.

    ``verify_token`` raises ``AuthError`` for anything it cannot vouch for.
    """

    def issue_token(self, subject_id: int) -> str:
        ...

    def verify_token(self, token: str) -> int:
        ...

    def hash_password(self, password: str) -> str:
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        ...
