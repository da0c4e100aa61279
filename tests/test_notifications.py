"""Tests for webhook notification delivery."""

import asyncio
import json

import httpx
import pytest

from techtalk.core.config import Settings
from techtalk.core.errors import ConfigurationError
from techtalk.core.notifications import NotificationDispatcher, SlackWebhookSink, WebhookSink
from techtalk.models.contact import Delivered, Failed, ValidatedSubmission

from .conftest import SLACK_URL


@pytest.fixture
def submission(taro_form):
    return ValidatedSubmission(**taro_form)


def test_slack_payload_carries_all_fields_as_json(submission, taro_form):
    payload = SlackWebhookSink(SLACK_URL).build_payload(submission)

    assert list(payload) == ["text"]
    assert json.loads(payload["text"]) == taro_form


def test_slack_payload_keeps_non_ascii_readable(taro_form):
    submission = ValidatedSubmission(**dict(taro_form, name="山田太郎"))

    payload = SlackWebhookSink(SLACK_URL).build_payload(submission)

    assert "山田太郎" in payload["text"]


def test_json_webhook_payload_is_the_submission(submission, taro_form):
    assert WebhookSink("https://example.com/hook").build_payload(submission) == taro_form


def test_missing_webhook_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("SLACK_WEBHOOK", raising=False)

    with pytest.raises(ConfigurationError):
        NotificationDispatcher.from_settings(Settings(_env_file=None))


def test_blank_webhook_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        NotificationDispatcher.from_settings(Settings(_env_file=None, slack_webhook="   "))


def test_dispatcher_needs_a_sink():
    with pytest.raises(ConfigurationError):
        NotificationDispatcher([])


def test_extra_webhooks_become_json_sinks():
    settings = Settings(
        _env_file=None,
        slack_webhook=SLACK_URL,
        extra_webhook_urls="https://example.com/a, ,https://example.com/b",
    )

    dispatcher = NotificationDispatcher.from_settings(settings)

    assert [type(sink) for sink in dispatcher.sinks] == [SlackWebhookSink, WebhookSink, WebhookSink]


@pytest.mark.asyncio
async def test_dispatch_delivers_once(settings, submission, taro_form, recording_client):
    client = recording_client()
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert outcome == Delivered()
    assert len(client.posts) == 1
    url, kwargs = client.posts[0]
    assert url == SLACK_URL
    assert json.loads(kwargs["json"]["text"]) == taro_form


@pytest.mark.asyncio
async def test_dispatch_reports_http_errors(settings, submission, recording_client):
    recording_client(response=httpx.Response(500, text="internal error"))
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert outcome == Failed(reason="HTTP 500")


@pytest.mark.asyncio
async def test_dispatch_reports_timeouts(settings, submission, recording_client):
    recording_client(error=httpx.ReadTimeout("timed out"))
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert outcome == Failed(reason="timeout")


@pytest.mark.asyncio
async def test_dispatch_failure_does_not_leak_webhook_url(settings, submission, recording_client):
    recording_client(error=httpx.ConnectError(f"could not reach {SLACK_URL}"))
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert isinstance(outcome, Failed)
    assert outcome.reason.startswith("ConnectError")
    assert SLACK_URL not in outcome.reason
    assert "secret-token" not in outcome.reason


@pytest.mark.asyncio
async def test_cancelled_dispatch_is_a_timeout(settings, submission, recording_client):
    recording_client(error=asyncio.CancelledError())
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert outcome == Failed(reason="timeout")


@pytest.mark.asyncio
async def test_every_sink_gets_one_attempt(submission, taro_form, recording_client):
    client = recording_client(response=httpx.Response(404))
    settings = Settings(_env_file=None, slack_webhook=SLACK_URL, extra_webhook_urls="https://example.com/hook")
    dispatcher = NotificationDispatcher.from_settings(settings)

    outcome = await dispatcher.dispatch(submission)

    assert outcome == Failed(reason="HTTP 404; HTTP 404")
    assert [url for url, _ in client.posts] == [SLACK_URL, "https://example.com/hook"]
    assert client.posts[1][1]["json"] == taro_form
