"""Tests for report notifications."""

import requests

from repokeeper.config import Settings
from repokeeper.notify import (
    DISCORD_MAX_CONTENT,
    DiscordNotifier,
    Notifier,
    build_notifiers,
    notify_all,
)


class FakeResponse:
    def __init__(self, status_code=204):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.posts = []

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_discord_posts_title_and_markdown():
    session = FakeSession()
    notifier = DiscordNotifier("https://discord.test/hook", session=session)

    assert notifier.send("Repo sanitize: acme/widget (dry_run=True)", "# Report")

    url, kwargs = session.posts[0]
    assert url == "https://discord.test/hook"
    assert kwargs["json"] == {"content": "**Repo sanitize: acme/widget (dry_run=True)**\n# Report"}
    assert kwargs["timeout"] == 10.0


def test_discord_truncates_long_reports():
    session = FakeSession()
    notifier = DiscordNotifier("https://discord.test/hook", session=session)

    notifier.send("title", "x" * 5000)

    content = session.posts[0][1]["json"]["content"]
    assert len(content) == DISCORD_MAX_CONTENT
    assert content.endswith("...")


def test_discord_without_webhook_sends_nothing():
    session = FakeSession()

    assert not DiscordNotifier("", session=session).send("title", "text")
    assert session.posts == []


def test_discord_failures_are_reported_not_raised():
    timeout = DiscordNotifier("https://discord.test/hook", session=FakeSession(error=requests.Timeout("slow")))
    rejected = DiscordNotifier("https://discord.test/hook", session=FakeSession(FakeResponse(429)))

    assert timeout.send("title", "text") is False
    assert rejected.send("title", "text") is False


def test_notify_all_continues_after_a_broken_notifier():
    class Broken(Notifier):
        def send(self, title, text):
            raise RuntimeError("bad template")

    session = FakeSession()
    notifiers = [Broken(), DiscordNotifier("https://discord.test/hook", session=session)]

    assert notify_all(notifiers, "title", "text") == 1
    assert len(session.posts) == 1


def test_build_notifiers_from_settings(monkeypatch):
    monkeypatch.delenv("DISCORD_WEBHOOK", raising=False)

    assert build_notifiers(Settings(_env_file=None)) == []
    notifiers = build_notifiers(Settings(_env_file=None, DISCORD_WEBHOOK="https://discord.test/hook"))
    assert [type(n) for n in notifiers] == [DiscordNotifier]
