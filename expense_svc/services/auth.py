from __future__ import annotations

"""Identity verification delegated to the external identity service.

Every request is checked with a fresh call; verdicts are never cached. Any
answer other than an explicit ``{"valid": true}`` with HTTP 200 is a Deny.
"""
import logging
from abc import ABC, abstractmethod

from expense_svc.services.http_client import HttpError, post_json

logger = logging.getLogger("expense_svc.auth")


class Authenticator(ABC):
    @abstractmethod
    def verify(self, identity_token: str, secret_token: str) -> bool:
        """Return True only when the credential pair is valid."""
        raise NotImplementedError


class HttpAuthenticator(Authenticator):
    """Calls ``POST /auth/validate`` on the identity service.

    The request body is ``{"userId": <identity>, "token": <secret>}``. A single
    attempt with a bounded timeout is made; errors and timeouts fail closed.
    """

    def __init__(self, validate_url: str, timeout: float = 5.0):
        self.validate_url = validate_url
        self.timeout = timeout

    def verify(self, identity_token: str, secret_token: str) -> bool:  # type: ignore[override]
        try:
            data = post_json(
                self.validate_url,
                {"userId": identity_token, "token": secret_token},
                timeout=self.timeout,
            )
        except HttpError as e:
            logger.warning("identity service unavailable for %s: %s", identity_token, e)
            return False
        if not isinstance(data, dict):
            logger.warning("malformed identity service response for %s", identity_token)
            return False
        # Strict identity check: "true", 1 and similar are not an Allow.
        valid = data.get("valid") is True
        if not valid:
            logger.info("identity service denied %s", identity_token)
        return valid
