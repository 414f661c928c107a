import asyncio
import aiohttp
from typing import List, Optional

from wrapcommand.core.config import settings
from wrapcommand.core.errors import EmailDeliveryError
from wrapcommand.core.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER_DOMAIN = "@capture.local"
PLACEHOLDER_PREFIX = "pending-"


def is_deliverable_email(email: Optional[str]) -> bool:
    """False for missing addresses and the placeholders used for unidentified leads."""
    if not email or not email.strip():
        return False
    lowered = email.strip().lower()
    return PLACEHOLDER_DOMAIN not in lowered and not lowered.startswith(PLACEHOLDER_PREFIX)


class ResendMailer:
    def __init__(self, api_key: Optional[str], api_url: str, from_address: str, timeout: float = 15.0):
        self.api_key = api_key
        self.api_url = api_url
        self.from_address = from_address
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def send(self, to: List[str], subject: str, html: str) -> Optional[str]:
        """Send one HTML email. Returns the provider message id; raises EmailDeliveryError on refusal."""
        payload = {
            "from": self.from_address,
            "to": to,
            "subject": subject,
            "html": html,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.info(f"Sending email '{subject}' to {to}")

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.api_url, json=payload, headers=headers) as res:
                    text = await res.text()
                    if res.status >= 400:
                        raise EmailDeliveryError(f"Mail provider returned {res.status}: {text}")
                    try:
                        body = await res.json(content_type=None)
                    except ValueError:
                        body = {}
        except asyncio.TimeoutError as e:
            raise EmailDeliveryError(f"Mail provider timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise EmailDeliveryError(f"Mail provider unreachable: {e}") from e

        message_id = (body or {}).get("id")
        logger.info(f"Email accepted by provider: {message_id}")
        return message_id


def get_mailer() -> ResendMailer:
    return ResendMailer(
        settings.RESEND_API_KEY,
        settings.RESEND_API_URL,
        settings.QUOTE_FROM_EMAIL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
