import requests
from requests.exceptions import RequestException

from relay.config import DELIVERY_TIMEOUT_SECONDS
from relay.discord.models import DiscordWebhook
from relay.logging_config import DeliveryContext, get_logger

logger = get_logger(__name__)


class DeliveryError(Exception):
    """Raised when a notification could not be delivered to Discord."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def mask_url(url: str) -> str:
    '''Keeps only the tail of a webhook URL so the token never reaches the logs'''
    return f"...{url[-12:]}" if len(url) > 12 else url


class DiscordAPI:
    """Discord webhook connection layer utilizing a requests session.

    One attempt per notification: failures are raised as DeliveryError and
    never retried, the calling CI server owns any retry policy.
    """

    def __init__(self, webhook_url: str, timeout: float = DELIVERY_TIMEOUT_SECONDS):
        if not webhook_url:
            raise ValueError("Missing Discord webhook URL")

        self.webhook_url = webhook_url
        self.timeout = timeout

        # Reusable HTTP session
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def send(self, payload: DiscordWebhook) -> None:
        """
        POST a notification to the configured webhook.

        Raises:
            DeliveryError: on connection errors, timeouts and any non-2xx status
        """
        url_tail = mask_url(self.webhook_url)

        with DeliveryContext("discord", url_tail=url_tail):
            try:
                r = self.session.post(self.webhook_url, json=payload.to_dict(), timeout=self.timeout)
            except RequestException as e:
                logger.error("Discord request failed", error=str(e), url_tail=url_tail)
                raise DeliveryError(f"error sending request: {e}") from e

            if r.status_code < 200 or r.status_code >= 300:
                logger.error(
                    "Discord returned non-success status",
                    status_code=r.status_code,
                    body=r.text[:500],
                    url_tail=url_tail,
                )
                raise DeliveryError(f"discord API returned status: {r.status_code}", status_code=r.status_code)

        logger.info("Successfully sent webhook to Discord", status_code=r.status_code)
