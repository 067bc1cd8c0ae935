"""HTTP transport for the partner REST API.

This module provides a thin wrapper around ``requests.Session`` that binds the
partner base URL, the bearer token, and the timeout policy. It implements the
``PartnerTransport`` port consumed by ``BankRestAdapter``.

Dependencies:
    - ``requests`` for network I/O.
    - ``bankbridge.adapters.api_errors`` for typed transport failures.

Call context:
    - Constructed by ``BankRestAdapter.from_config`` at composition time.
    - Status-code handling stays with the caller; this class only turns
      connectivity failures into ``ApiTimeoutError``/``ApiError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from requests import exceptions as req_exc

from bankbridge.adapters.api_errors import ApiError, ApiTimeoutError
from bankbridge.adapters.partner_config import PartnerConfig


@dataclass
class HttpConfig:
    """Timeout and retry configuration for partner calls.

    Attributes:
        request_timeout_s: Timeout in seconds for every call.
        get_retries: Extra attempts for GET requests after a connect/timeout
            failure. Mutating methods are always sent exactly once.
    """
    request_timeout_s: float = 30.0
    get_retries: int = 0


class PartnerSession:
    """Shared requests wrapper with bearer authorization and JSON bodies."""

    def __init__(self, base_url: str, token: str, cfg: HttpConfig) -> None:
        """Create a session bound to one partner environment.

        Args:
            base_url: Partner API root URL.
            token: Bearer token placed in the ``Authorization`` header.
            cfg: Timeout and retry settings.

        Side Effects:
            Creates a persistent ``requests.Session`` object.
        """
        self._log = logging.getLogger(__name__)
        self.session = requests.Session()
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.token = token
        self.cfg = cfg

    @classmethod
    def from_config(cls, config: PartnerConfig) -> "PartnerSession":
        return cls(
            config.base_url,
            config.token,
            HttpConfig(
                request_timeout_s=config.request_timeout_s,
                get_retries=config.get_retries,
            ),
        )

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.token}",
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def make_url(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """Send one partner request.

        Args:
            method: HTTP verb (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Endpoint path relative to the base URL.
            json_body: Optional payload serialized as JSON.
            params: Optional query parameters.

        Returns:
            ``requests.Response`` whatever its status code.

        Raises:
            ApiTimeoutError: If every attempt fails with a timeout/connection error.
            ApiError: For any other ``requests`` failure.
        """
        verb = method.upper()
        url = self.make_url(path)
        context = f"{verb} {path}"
        attempts = 1 + (self.cfg.get_retries if verb == "GET" else 0)
        last_err: Optional[ApiError] = None
        for attempt in range(1, attempts + 1):
            try:
                resp = self.session.request(
                    verb,
                    url,
                    json=json_body,
                    params=dict(params) if params else None,
                    headers=self._headers(json_body=json_body is not None),
                    timeout=self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                self._log.warning(
                    "%s failed (attempt %d/%d): %s", context, attempt, attempts, exc
                )
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
                continue
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
            # Bodies may carry PINs or KYC data; only the status line is logged.
            self._log.debug("%s -> HTTP %s", context, resp.status_code)
            return resp
        raise last_err


__all__ = ["HttpConfig", "PartnerSession"]
