"""SMS notification adapter.

Messages are handed to an SMS provider bridge over a signed HTTP webhook;
the bridge owns the provider credentials.
"""

import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
import structlog

logger = structlog.get_logger()


@dataclass
class SmsConfig:
    """SMS webhook configuration."""

    url: str
    secret: str | None = None
    sender_id: str = "MedSync"
    timeout_seconds: int = 10


class SmsNotifier:
    """Delivers text messages via an SMS webhook."""

    def __init__(self, config: SmsConfig):
        """Initialize the SMS notifier.

        Args:
            config: SMS webhook configuration settings.
        """
        self.config = config

    async def send(self, to_phone: str, text: str) -> bool:
        """Send a text message.

        Returns True if the bridge accepted the message (2xx response).
        """
        body = json.dumps(
            {
                "to": to_phone,
                "from": self.config.sender_id,
                "text": text,
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )

        headers = {
            "Content-Type": "application/json",
            "User-Agent": "MedSync-SMS/1.0",
        }

        if self.config.secret:
            signature = hmac.new(
                self.config.secret.encode(),
                body.encode(),
                hashlib.sha256,
            ).hexdigest()
            headers["X-Webhook-Signature"] = f"sha256={signature}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.config.url,
                    content=body,
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                )

                success = response.is_success

                logger.info(
                    "sms_sent",
                    status_code=response.status_code,
                    success=success,
                )

                return success

        except httpx.TimeoutException:
            logger.warning("sms_timeout", url=self.config.url)
            return False

        except httpx.RequestError as e:
            logger.error("sms_error", url=self.config.url, error=str(e))
            return False

    async def send_otp_code(self, to_phone: str, code: str, expires_in_minutes: int) -> bool:
        """Send a one-time code by SMS."""
        text = (
            f"Your MedSync code is {code}. It expires in {expires_in_minutes} minutes. "
            "Don't share it with anyone."
        )
        return await self.send(to_phone, text)
