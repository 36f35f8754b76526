from .credentials import CredentialPort

__all__ = ["CredentialPort"]
