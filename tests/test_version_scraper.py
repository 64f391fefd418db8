import subprocess

import pytest
import requests

from opencode_model_sync.config.model_config import ModelConfig, ModelEntry
from opencode_model_sync.errors import FetchError
from opencode_model_sync.model_updater import version_scraper as vs
from opencode_model_sync.model_updater.report import UpdateReport

DOCS_HTML = """
<table>
  <tr><td>Claude Sonnet 4.5</td><td>claude-sonnet-4-5</td><td>claude-sonnet-4-5-20250929</td></tr>
  <tr><td>Claude Opus 4.1</td><td>claude-opus-4-1</td><td>claude-opus-4-1-20250805</td></tr>
</table>
"""


class StubFetcher(vs.Fetcher):
    def __init__(self, name, result=None, error=None, available=True):
        self.name = name
        self.result = result
        self.error = error
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def fetch(self, url, timeout):
        self.calls.append((url, timeout))
        if self.error:
            raise FetchError(self.error)
        return self.result


def test_extract_prefers_alias_over_dated_variant():
    html = """
    <p>The latest model is claude-sonnet-4-5 released on...</p>
    <p>Previous version: claude-sonnet-4-5-20250514</p>
    """

    assert vs.extract_model_version(html, "sonnet") == "4-5"


def test_extract_prefers_shorter_version_regardless_of_order():
    html = "<p>claude-haiku-4-20250514</p><p>claude-haiku-4-5</p>"

    assert vs.extract_model_version(html, "haiku") == "4-5"


def test_extract_tie_goes_to_first_match():
    html = "claude-opus-4-1 and later claude-opus-5-0"

    assert vs.extract_model_version(html, "opus") == "4-1"


def test_extract_missing_family_returns_none():
    assert vs.extract_model_version("<p>No models here</p>", "sonnet") is None


def test_scrape_latest_models():
    latest = vs.scrape_latest_models(DOCS_HTML)

    assert latest == {
        "sonnet": "anthropic/claude-sonnet-4-5",
        "opus": "anthropic/claude-opus-4-1",
    }


def test_compare_with_config():
    config = ModelConfig(
        models={
            "sonnet": ModelEntry("sonnet", "anthropic/claude-sonnet-4-5", 0.2),
            "opus": ModelEntry("opus", "anthropic/claude-opus-4", 0.1),
        }
    )
    latest = {
        "sonnet": "anthropic/claude-sonnet-4-5",
        "opus": "anthropic/claude-opus-4-1",
        "haiku": "anthropic/claude-haiku-4-5",
    }

    statuses = {c.family: c.status for c in vs.compare_with_config(latest, config)}

    assert statuses == {"sonnet": "equal", "opus": "different", "haiku": "not-configured"}


def test_fetch_uses_first_successful_fetcher():
    first = StubFetcher("first", result=DOCS_HTML)
    second = StubFetcher("second", result="unused")

    assert vs.fetch_documentation("https://example.test", timeout=5, fetchers=[first, second]) == DOCS_HTML
    assert second.calls == []


def test_fetch_falls_back_on_error_and_empty_output():
    failing = StubFetcher("failing", error="boom")
    empty = StubFetcher("empty", result="  \n")
    working = StubFetcher("working", result=DOCS_HTML)

    text = vs.fetch_documentation("https://example.test", timeout=5, fetchers=[failing, empty, working])

    assert text == DOCS_HTML
    assert len(failing.calls) == len(empty.calls) == len(working.calls) == 1


def test_fetch_skips_unavailable_fetchers():
    missing = StubFetcher("missing", result="unused", available=False)
    working = StubFetcher("working", result=DOCS_HTML)

    assert vs.fetch_documentation("https://example.test", fetchers=[missing, working]) == DOCS_HTML
    assert missing.calls == []


def test_fetch_shares_timeout_budget():
    first = StubFetcher("first", error="slow")
    second = StubFetcher("second", result=DOCS_HTML)

    vs.fetch_documentation("https://example.test", timeout=2.0, fetchers=[first, second])

    assert first.calls[0][1] <= 2.0
    assert second.calls[0][1] <= first.calls[0][1]


def test_fetch_returns_none_when_everything_fails():
    fetchers = [StubFetcher("a", error="down"), StubFetcher("b", error="down")]

    assert vs.fetch_documentation("https://example.test", fetchers=fetchers) is None


def test_curl_fetcher_runs_curl(monkeypatch):
    captured = {}

    def fake_run(cmd, **kwargs):
        captured["cmd"] = cmd
        captured["timeout"] = kwargs["timeout"]
        return subprocess.CompletedProcess(cmd, 0, stdout=DOCS_HTML.encode("utf-8"), stderr=b"")

    monkeypatch.setattr(vs.subprocess, "run", fake_run)

    assert vs.CurlFetcher().fetch("https://example.test", 4.0) == DOCS_HTML
    assert captured["cmd"][0] == "curl"
    assert captured["cmd"][-1] == "https://example.test"
    assert "--fail" in captured["cmd"]
    assert captured["timeout"] == 4.0


def test_curl_fetcher_nonzero_exit(monkeypatch):
    monkeypatch.setattr(
        vs.subprocess,
        "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 22, stdout=b"", stderr=b"curl: (22) 404"),
    )

    with pytest.raises(FetchError):
        vs.CurlFetcher().fetch("https://example.test", 4.0)


def test_curl_fetcher_tolerates_invalid_utf8(monkeypatch):
    monkeypatch.setattr(vs.shutil, "which", lambda name: "/usr/bin/curl")
    monkeypatch.setattr(
        vs.subprocess,
        "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout=b"claude-sonnet-4-5 \377\376", stderr=b""),
    )

    text = vs.fetch_documentation("https://example.test", fetchers=[vs.CurlFetcher()])

    assert text is not None
    assert vs.extract_model_version(text, "sonnet") == "4-5"
    assert "\ufffd" in text


def test_fetch_survives_unexpected_fetcher_exception():
    class BrokenFetcher(vs.Fetcher):
        name = "broken"

        def fetch(self, url, timeout):
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    working = StubFetcher("working", result=DOCS_HTML)

    assert vs.fetch_documentation("https://example.test", fetchers=[BrokenFetcher(), working]) == DOCS_HTML


def test_curl_fetcher_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(vs.subprocess, "run", fake_run)

    with pytest.raises(FetchError):
        vs.CurlFetcher().fetch("https://example.test", 1.0)


def test_curl_fetcher_unavailable(monkeypatch):
    monkeypatch.setattr(vs.shutil, "which", lambda name: None)

    assert not vs.CurlFetcher().is_available()


class FakeResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_requests_fetcher_sends_user_agent(monkeypatch):
    captured = {}

    def fake_get(url, headers=None, timeout=None):
        captured.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(200, DOCS_HTML)

    monkeypatch.setattr(vs.requests, "get", fake_get)

    assert vs.RequestsFetcher().fetch("https://example.test", 3.0) == DOCS_HTML
    assert captured["headers"]["User-Agent"].startswith("opencode-model-sync/")
    assert captured["timeout"] == 3.0


def test_requests_fetcher_http_error(monkeypatch):
    monkeypatch.setattr(vs.requests, "get", lambda url, **kwargs: FakeResponse(503, "down"))

    with pytest.raises(FetchError):
        vs.RequestsFetcher().fetch("https://example.test", 3.0)


def test_requests_fetcher_connection_error(monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(vs.requests, "get", fake_get)

    with pytest.raises(FetchError):
        vs.RequestsFetcher().fetch("https://example.test", 3.0)


def test_check_latest_models_reports_comparison(capsys):
    config = ModelConfig(models={"sonnet": ModelEntry("sonnet", "anthropic/claude-sonnet-4", 0.2)})
    report = UpdateReport()

    comparisons = vs.check_latest_models(config, report, fetchers=[StubFetcher("stub", result=DOCS_HTML)])

    out = capsys.readouterr().out
    assert "SONNET: anthropic/claude-sonnet-4-5 (configured: anthropic/claude-sonnet-4)" in out
    assert "OPUS: anthropic/claude-opus-4-1 (not configured)" in out
    assert [c.status for c in comparisons] == ["different", "not-configured"]
    assert config.models["sonnet"].id == "anthropic/claude-sonnet-4"
    assert report.warnings == []
    assert report.errors == []


def test_check_latest_models_fetch_failure_is_a_warning():
    report = UpdateReport()

    comparisons = vs.check_latest_models(ModelConfig(), report, fetchers=[StubFetcher("stub", error="offline")])

    assert comparisons == []
    assert len(report.warnings) == 1
    assert report.errors == []


def test_check_latest_models_without_matches_is_a_warning():
    report = UpdateReport()

    vs.check_latest_models(ModelConfig(), report, fetchers=[StubFetcher("stub", result="<html></html>")])

    assert report.warnings == ["No Claude model identifiers found in the documentation page"]
