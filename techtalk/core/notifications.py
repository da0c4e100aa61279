"""
Notification delivery for contact form submissions.

Every validated submission is pushed to the team's Slack channel through an
incoming webhook, and optionally to extra JSON webhooks. One POST per sink,
no retries: a failed delivery comes back as Failed(reason) so the caller can
decide what to do with it.

Webhook URLs carry their credential in the path, so they are never logged and
never copied into a Failed reason.
"""

import asyncio
import httpx
import json
import logging
from typing import Any, Dict, List, Optional

from techtalk.core.config import Settings, get_settings
from techtalk.core.errors import ConfigurationError
from techtalk.models.contact import (
    CONTACT_FIELDS,
    Delivered,
    DispatchOutcome,
    Failed,
    ValidatedSubmission,
)

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


def submission_fields(submission: ValidatedSubmission) -> Dict[str, str]:
    """All contact fields, in form order"""
    data = submission.model_dump()
    return {field: data[field] for field in CONTACT_FIELDS}


class WebhookSink:
    """Generic JSON webhook: the body is the submission itself."""

    name = "webhook"

    def __init__(self, url: str):
        if not url or not url.strip():
            raise ConfigurationError(f"{self.name} sink needs a destination URL")
        self._url = url.strip()

    def build_payload(self, submission: ValidatedSubmission) -> Dict[str, Any]:
        return submission_fields(submission)

    def redact(self, text: str) -> str:
        return text.replace(self._url, "<webhook-url>")

    async def deliver(self, client: httpx.AsyncClient, submission: ValidatedSubmission) -> DispatchOutcome:
        payload = self.build_payload(submission)

        try:
            response = await client.post(self._url, json=payload)
        except httpx.TimeoutException:
            logger.warning(f"⏱️ {self.name} notification timed out")
            return Failed(reason=TIMEOUT_REASON)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            reason = self.redact(f"{type(e).__name__}: {e}")
            logger.error(f"❌ {self.name} notification failed: {reason}")
            return Failed(reason=reason)

        if not response.is_success:
            logger.error(f"❌ {self.name} notification rejected ({response.status_code})")
            return Failed(reason=f"HTTP {response.status_code}")

        logger.info(f"✅ {self.name} notification delivered")
        return Delivered()


class SlackWebhookSink(WebhookSink):
    """Slack incoming webhook: the submission goes out as a JSON blob in `text`."""

    name = "slack"

    def build_payload(self, submission: ValidatedSubmission) -> Dict[str, Any]:
        return {"text": json.dumps(submission_fields(submission), ensure_ascii=False)}


class NotificationDispatcher:
    def __init__(self, sinks: List[WebhookSink], timeout: float = 10.0):
        if not sinks:
            raise ConfigurationError("At least one notification sink must be configured")
        self._sinks = list(sinks)
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NotificationDispatcher":
        """
        Build the dispatcher from environment configuration.

        Raises:
            ConfigurationError: SLACK_WEBHOOK is missing or blank
        """
        if settings is None:
            settings = get_settings()

        sinks: List[WebhookSink] = [SlackWebhookSink(settings.effective_webhook_url)]
        sinks.extend(WebhookSink(url) for url in settings.extra_webhook_url_list)

        logger.info(f"Notification dispatcher configured with {len(sinks)} sink(s): {', '.join(s.name for s in sinks)}")
        return cls(sinks, timeout=settings.webhook_timeout_seconds)

    @property
    def sinks(self) -> List[WebhookSink]:
        return list(self._sinks)

    async def dispatch(self, submission: ValidatedSubmission) -> DispatchOutcome:
        """
        Deliver a submission to every configured sink, one attempt each.

        Returns Delivered only when all sinks accepted it. Cancellation of the
        surrounding request while a call is in flight is reported as a timeout.
        """
        failures: List[str] = []

        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                for sink in self._sinks:
                    outcome = await sink.deliver(client, submission)
                    if isinstance(outcome, Failed):
                        failures.append(outcome.reason)
        except asyncio.CancelledError:
            logger.warning("⏱️ Notification dispatch cancelled before completion")
            return Failed(reason=TIMEOUT_REASON)

        if failures:
            return Failed(reason="; ".join(failures))
        return Delivered()
