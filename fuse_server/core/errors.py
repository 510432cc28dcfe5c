# fuse_server/core/errors.py
from typing import Dict, Optional


class FuseError(Exception):
    """Base of every error the API reports to its callers.

    Each subclass carries the HTTP status it is rendered with; the message is
    returned to the client as ``{"error": message}``.
    """

    status_code = 500

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class NotFoundError(FuseError):
    status_code = 404


class InvalidError(FuseError):
    status_code = 400


class UnauthorizedError(FuseError):
    status_code = 401

    def __init__(self, message: str):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(FuseError):
    status_code = 403


class UpstreamError(FuseError):
    """An external collaborator (AI service, YouTube) failed."""

    status_code = 502


class InternalError(FuseError):
    status_code = 500
