import io
import json

import pytest
import requests

from proffinder.core import llm_client
from proffinder.core.extractor import extract
from proffinder.core.llm_client import LlmError, stream_chat
from proffinder.models.schema import Query

from helpers import ADA, BOSE

pytestmark = pytest.mark.anyio


def sse(*fragments, done=True):
    lines = [": keep-alive", ""]
    for fragment in fragments:
        event = {"choices": [{"index": 0, "delta": {"content": fragment}}]}
        lines += ["data: " + json.dumps(event), ""]
    if done:
        lines.append("data: [DONE]")
    return lines


class FakeResponse:
    def __init__(self, lines, status_code=200, fail_after=None):
        self.lines = lines
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_lines(self):
        for i, line in enumerate(self.lines):
            if self.fail_after is not None and i == self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("Connection broken")
            yield line.encode("utf-8")

    def close(self):
        self.closed = True


@pytest.fixture
def fake_post(monkeypatch, llm_env):
    state = {"response": FakeResponse(sse()), "calls": []}

    def post(url, headers=None, data=None, stream=False, timeout=None):
        state["calls"].append({
            "url": url,
            "headers": headers,
            "payload": json.loads(data),
            "stream": stream,
            "timeout": timeout,
        })
        return state["response"]

    monkeypatch.setattr(llm_client.requests, "post", post)
    return state


async def collect(prompt="hello", model=None):
    return [piece async for piece in stream_chat(prompt, model=model)]


async def test_stream_chat_yields_delta_fragments(fake_post):
    fake_post["response"] = FakeResponse(sse("{\"Na", "me\": 1}", ""))
    assert await collect() == ["{\"Na", "me\": 1}"]

    call = fake_post["calls"][0]
    assert call["url"] == "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer test-key"
    assert call["payload"] == {
        "model": "gemini-2.5-flash",
        "messages": [{"role": "user", "content": "hello"}],
        "stream": True,
    }
    assert call["stream"] is True
    assert call["timeout"] == (10.0, None)
    assert fake_post["response"].closed


async def test_stream_chat_stops_at_done(fake_post):
    lines = sse("a") + ["data: " + json.dumps({"choices": [{"delta": {"content": "late"}}]})]
    fake_post["response"] = FakeResponse(lines)
    assert await collect() == ["a"]


async def test_model_override_and_custom_base(fake_post, monkeypatch):
    monkeypatch.setenv("LLM_API_BASE", "http://localhost:8080/v1/")
    monkeypatch.setenv("LLM_CONNECT_TIMEOUT", "0.2")
    await collect(model="other-model")
    call = fake_post["calls"][0]
    assert call["url"] == "http://localhost:8080/v1/chat/completions"
    assert call["payload"]["model"] == "other-model"
    assert call["timeout"] == (1.0, None)


async def test_missing_api_key_raises(fake_post, monkeypatch):
    monkeypatch.delenv("LLM_API_KEY")
    with pytest.raises(LlmError, match="LLM_API_KEY"):
        await collect()
    assert fake_post["calls"] == []


async def test_unknown_provider_raises(fake_post, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "nope")
    with pytest.raises(LlmError, match="Unknown provider"):
        await collect()


async def test_http_error_raises_llm_error(fake_post):
    fake_post["response"] = FakeResponse([], status_code=503)
    with pytest.raises(LlmError, match="LLM request failed"):
        await collect()
    assert fake_post["response"].closed


async def test_broken_stream_raises_llm_error(fake_post):
    fake_post["response"] = FakeResponse(sse("a", "b"), fail_after=4)
    pieces = []
    with pytest.raises(LlmError, match="interrupted"):
        async for piece in stream_chat("hello"):
            pieces.append(piece)
    assert pieces == ["a"]
    assert fake_post["response"].closed


async def test_error_event_raises_llm_error(fake_post):
    fake_post["response"] = FakeResponse(["data: " + json.dumps({"error": {"message": "quota"}})])
    with pytest.raises(LlmError, match="quota"):
        await collect()


async def test_extract_over_sse_stream(fake_post):
    text = json.dumps(ADA) + "\n" + json.dumps(BOSE)
    fake_post["response"] = FakeResponse(sse(text[:25], text[25:60], text[60:]))
    records, errors = [], []
    stats = await extract(Query(keyword="physics"), records.append, errors.append)

    assert [r["Name"] for r in records] == ["Dr. Ada Rao", "Dr. S. Bose"]
    assert errors == []
    assert "Research Keyword/Topic: physics" in fake_post["calls"][0]["payload"]["messages"][0]["content"]
    assert stats.emitted == 2


async def test_extract_reports_broken_sse_stream_once(fake_post):
    text = json.dumps(ADA) + "\n" + json.dumps(BOSE) + "\n"
    fake_post["response"] = FakeResponse(sse(text[:70], text[70:]), fail_after=4)
    records, errors = [], []
    stats = await extract(Query(keyword="physics"), records.append, errors.append)

    assert [r["Name"] for r in records] == ["Dr. Ada Rao"]
    assert len(errors) == 1
    assert stats.failed


def real_response(lines):
    resp = requests.Response()
    resp.status_code = 200
    resp.raw = io.BytesIO("\n".join(lines).encode("utf-8") + b"\n")
    return resp


async def test_line_separator_inside_a_record_survives_sse_splitting(fake_post):
    prof = {"Name": "Dr. A", "Designation": "Prof", "Summary": "x\u2028y\u2029z\x85w"}
    text = json.dumps(prof, ensure_ascii=False) + "\n" + json.dumps(ADA) + "\n"
    lines = [": keep-alive", ""]
    for fragment in (text[:30], text[30:]):
        event = {"choices": [{"delta": {"content": fragment}}]}
        lines += ["data: " + json.dumps(event, ensure_ascii=False), ""]
    lines.append("data: [DONE]")
    fake_post["response"] = real_response(lines)

    records, errors = [], []
    stats = await extract(Query(keyword="physics"), records.append, errors.append)

    assert errors == []
    assert [r["Name"] for r in records] == ["Dr. A", "Dr. Ada Rao"]
    assert records[0]["Summary"] == "x\u2028y\u2029z\x85w"
    assert not stats.failed
