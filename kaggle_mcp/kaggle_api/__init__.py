"""Kaggle API integration layer."""

from .client import KaggleClient, KAGGLE_API_BASE
from .credentials import CredentialStore, FileCredentialStore, MemoryCredentialStore
from .errors import (
    InvalidCredentialsFileError,
    KaggleApiError,
    KaggleAuthError,
    KaggleError,
    KaggleHttpError,
    KaggleInvalidParameterError,
    KaggleIOError,
    KaggleJsonError,
    KaggleNotAuthenticatedError,
)
from .models import (
    AuthenticationResponse,
    Competition,
    Dataset,
    KaggleCredentials,
    Kernel,
    Model,
)
from .state import ClientState, KaggleConfig

__all__ = [
    "KaggleClient",
    "KAGGLE_API_BASE",
    "KaggleConfig",
    "ClientState",
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "KaggleError",
    "KaggleAuthError",
    "KaggleApiError",
    "KaggleHttpError",
    "KaggleJsonError",
    "KaggleIOError",
    "KaggleInvalidParameterError",
    "KaggleNotAuthenticatedError",
    "InvalidCredentialsFileError",
    "AuthenticationResponse",
    "Competition",
    "Dataset",
    "KaggleCredentials",
    "Kernel",
    "Model",
]
