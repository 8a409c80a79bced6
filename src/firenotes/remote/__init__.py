"""REST gateways for the Fire Notes API."""

from firenotes.remote.auth import AuthGateway
from firenotes.remote.client import ApiClient
from firenotes.remote.notes import NotesGateway

__all__ = [
    "ApiClient",
    "AuthGateway",
    "NotesGateway",
]
