from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol
import logging

from ..errors import RequesterError
from ..models.env_cfg import DEFAULT_BASE_URL, EnvCfg
from .transport import RequestsTransport

_LOG_BODY_LIMIT = 4000


def _clip(text: Optional[str], limit: int = _LOG_BODY_LIMIT) -> Optional[str]:
    if text and len(text) > limit:
        return text[:limit] + "..."
    return text


class ShippingRequester(Protocol):
    def post(self, path: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    def get_bytes(self, url: str) -> bytes:
        ...


class Requester:
    """Authenticated requester for the EasyPost REST API.

    - post(path, body): form-encodes `body`, POSTs it to base_url + path and
      returns the decoded JSON object.
    - get_bytes(url): downloads an absolute URL (label files).

    The API key travels as the basic-auth username with an empty password.
    Every failure surfaces as RequesterError; nothing is retried here beyond
    what the transport's Retry policy does.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[RequestsTransport] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self.base_url = base_url.rstrip("/")
        self.transport = transport or RequestsTransport(auth=(api_key, ""))
        self.logger: logging.Logger = logger or logging.getLogger(
            "easypost_shipping.api.requester"
        )

    @classmethod
    def from_env(cls, cfg: EnvCfg, *, logger: Optional[logging.Logger] = None) -> "Requester":
        transport = RequestsTransport(
            timeout=cfg.EASYPOST_TIMEOUT, auth=(cfg.EASYPOST_API_KEY, ""))
        return cls(cfg.EASYPOST_API_KEY, cfg.EASYPOST_BASE_URL, transport, logger=logger)

    def _url(self, path: str) -> str:
        return self.base_url + "/" + path.lstrip("/")

    def post(self, path: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        url = self._url(path)
        self.logger.debug("POST %s request_body=%s", url, dict(body))

        try:
            resp = self.transport.post(url, data=dict(body))
        except Exception as ex:
            self.logger.warning("Transport POST failed for %s: %s", url, ex)
            raise RequesterError(f"POST {path} failed: {ex}") from ex

        status = resp.status_code
        text = resp.text
        if not 200 <= status < 300:
            self.logger.warning(
                "POST %s returned error status=%s response_body=%s", url, status, _clip(text))
            raise RequesterError(
                f"POST {path} returned HTTP {status}", status=status, body=text)

        try:
            decoded = resp.json()
        except ValueError as ex:
            self.logger.warning(
                "POST %s returned a non-JSON body status=%s response_body=%s", url, status, _clip(text))
            raise RequesterError(
                f"POST {path} returned a non-JSON body", status=status, body=text) from ex

        if not isinstance(decoded, dict):
            raise RequesterError(
                f"POST {path} returned {type(decoded).__name__}, expected an object",
                status=status,
                body=text,
            )

        self.logger.debug("POST %s status=%s response_body=%s", url, status, _clip(text))
        return decoded

    def get_bytes(self, url: str) -> bytes:
        self.logger.debug("GET %s", url)
        try:
            resp = self.transport.get(url)
        except Exception as ex:
            self.logger.warning("Transport GET failed for %s: %s", url, ex)
            raise RequesterError(f"GET {url} failed: {ex}") from ex

        if not 200 <= resp.status_code < 300:
            self.logger.warning("GET %s returned error status=%s", url, resp.status_code)
            raise RequesterError(
                f"GET {url} returned HTTP {resp.status_code}",
                status=resp.status_code,
                body=resp.text,
            )
        return resp.content
