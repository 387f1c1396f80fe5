import uuid
from abc import ABC, abstractmethod

import httpx
import structlog

from app.core.exceptions import EmailDeliveryError

logger = structlog.get_logger()


class EmailBackend(ABC):
    @abstractmethod
    async def send(self, to: str, subject: str, html: str, sender: str) -> str | None:
        """Deliver one HTML email and return the provider's message id."""
        ...

    async def close(self) -> None:
        return None


class ResendBackend(EmailBackend):
    """Sends through the Resend HTTP API."""

    def __init__(self, api_key: str, base_url: str = "https://api.resend.com", http_client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=30.0, write=5.0, pool=5.0)
        )

    async def send(self, to: str, subject: str, html: str, sender: str) -> str | None:
        payload = {"from": sender, "to": [to], "subject": subject, "html": html}
        try:
            response = await self._client.post(f"{self.base_url}/emails", json=payload, headers=self._headers)
            response.raise_for_status()
        except httpx.ConnectError as e:
            raise EmailDeliveryError(f"Cannot connect to email provider at {self.base_url}: {e}")
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(
                f"Email provider returned error: {e.response.status_code}",
                details=e.response.text[:500] or None,
            )
        except httpx.TimeoutException:
            raise EmailDeliveryError("Email provider request timed out.")
        except httpx.RequestError as e:
            raise EmailDeliveryError(f"Email provider request failed: {e}")

        try:
            body = response.json()
        except ValueError:
            raise EmailDeliveryError(
                "Email provider returned an unreadable response.",
                details=response.text[:500] or None,
            )
        return body.get("id") if isinstance(body, dict) else None

    async def close(self) -> None:
        await self._client.aclose()


class LoggingEmailBackend(EmailBackend):
    """Development backend: logs the message instead of delivering it."""

    async def send(self, to: str, subject: str, html: str, sender: str) -> str | None:
        message_id = f"local-{uuid.uuid4().hex[:12]}"
        logger.info("email_not_sent", reason="no provider configured", to=to, subject=subject, id=message_id)
        return message_id
