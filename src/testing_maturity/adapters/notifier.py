"""Report e-mail notification adapters.

Implements the INotifier interface. ``ResendEmailNotifier`` posts the
message to the Resend HTTP API; ``LogNotifier`` only logs it and is used
when no API key is configured (local development).
"""

import httpx

from testing_maturity.core.lead import LeadContact
from testing_maturity.core.services.assessment_service import NotifyFailedError
from testing_maturity.observability import get_logger
from testing_maturity.settings import Settings

logger = get_logger(__name__)


def report_url(public_base_url: str, report_token: str) -> str:
    """Build the public link to a report."""
    return f"{public_base_url.rstrip('/')}/report/{report_token}"


def build_report_email(
    lead: LeadContact,
    report_link: str,
    overall_score: float,
    overall_level: int,
    level_name: str,
) -> tuple[str, str]:
    """Compose the subject and plain-text body of the results e-mail.

    Args:
        lead: Recipient contact.
        report_link: Public report URL.
        overall_score: Overall score 1-5.
        overall_level: Overall maturity level 1-5.
        level_name: Short name of the level.

    Returns:
        Tuple of (subject, body).
    """
    subject = (
        f"{lead.first_name}, Your AI Testing Maturity: "
        f"Level {overall_level} - {level_name}"
    )
    body = "\n".join(
        [
            f"Hi {lead.first_name},",
            "",
            "Thank you for completing the AI Testing Maturity Assessment!",
            "",
            "YOUR RESULTS",
            f"Overall Score: {overall_score:.1f} out of 5.0",
            f"Maturity Level: Level {overall_level} - {level_name}",
            "",
            "VIEW YOUR FULL REPORT",
            "Your personalized report includes:",
            "- A breakdown across every testing area",
            "- Analysis of each testing dimension",
            "- Your top 3 improvement opportunities",
            "- Specific next-level recommendations",
            "",
            "Access your report here:",
            report_link,
            "",
            "This link is unique to you and will remain active for future reference.",
            "",
            "Best regards,",
            "AI Testing Maturity Assessment Team",
        ]
    )
    return subject, body


class ResendEmailNotifier:
    """Sends the results e-mail through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        email_from: str,
        public_base_url: str,
        api_url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the notifier.

        Args:
            api_key: Resend API key.
            email_from: Sender address.
            public_base_url: Base URL used to build report links.
            api_url: Resend e-mail endpoint.
            timeout_seconds: Request timeout.
            client: Optional shared HTTP client; one is created per call otherwise.
        """
        self._api_key = api_key
        self._email_from = email_from
        self._public_base_url = public_base_url
        self._api_url = api_url
        self._timeout = timeout_seconds
        self._client = client

    async def notify(
        self,
        lead: LeadContact,
        report_token: str,
        overall_score: float,
        overall_level: int,
        level_name: str,
    ) -> None:
        """Send the results e-mail.

        Raises:
            NotifyFailedError: On a transport error or a non-2xx answer.
        """
        subject, body = build_report_email(
            lead,
            report_url(self._public_base_url, report_token),
            overall_score,
            overall_level,
            level_name,
        )
        payload = {
            "from": self._email_from,
            "to": [str(lead.email)],
            "subject": subject,
            "text": body,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            if self._client is not None:
                response = await self._client.post(self._api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise NotifyFailedError(f"E-mail request failed: {exc}") from exc

        if response.is_error:
            raise NotifyFailedError(
                f"E-mail API returned {response.status_code}: {response.text[:200]}"
            )

        logger.info("Report e-mail sent", status_code=response.status_code)


class LogNotifier:
    """Development notifier that logs the e-mail instead of sending it."""

    def __init__(self, public_base_url: str) -> None:
        self._public_base_url = public_base_url

    async def notify(
        self,
        lead: LeadContact,
        report_token: str,
        overall_score: float,
        overall_level: int,
        level_name: str,
    ) -> None:
        link = report_url(self._public_base_url, report_token)
        subject, body = build_report_email(lead, link, overall_score, overall_level, level_name)
        logger.info(
            "Report e-mail (dev mode, not sent)",
            to=str(lead.email),
            subject=subject,
            body=body,
        )


def build_notifier(settings: Settings) -> ResendEmailNotifier | LogNotifier:
    """Pick the notifier for the configured environment.

    Args:
        settings: Service settings.

    Returns:
        ResendEmailNotifier when an API key is configured, LogNotifier otherwise.
    """
    if settings.resend_api_key:
        return ResendEmailNotifier(
            api_key=settings.resend_api_key,
            email_from=settings.email_from,
            public_base_url=settings.public_base_url,
            api_url=settings.resend_api_url,
            timeout_seconds=settings.notify_timeout_seconds,
        )
    return LogNotifier(public_base_url=settings.public_base_url)
