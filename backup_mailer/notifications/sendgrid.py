from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..config import DEFAULT_SENDGRID_URL
from ..errors import NotifyError

logger = logging.getLogger(__name__)


class SendGridClient:
    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_SENDGRID_URL,
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {api_key}"})

    def send(self, payload: dict, response_file: Path) -> int:
        """POST ``payload`` and persist the raw response body.

        Returns the HTTP status. Raises NotifyError for transport failures
        and for any status outside 2xx.
        """
        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NotifyError(f"SendGrid request failed: {exc}") from exc

        response_file.write_bytes(response.content or b"")
        status = response.status_code
        logger.info("SendGrid HTTP status: %d", status)
        logger.info("SendGrid raw response saved to: %s", response_file)

        if not 200 <= status < 300:
            raise NotifyError(
                f"SendGrid API returned non-2xx status {status}. "
                f"See {response_file} for details.",
                status_code=status,
                response_file=response_file,
            )
        return status
