from __future__ import annotations

import pytest

import app.observability.client as opik_client
from app.observability.tracing import trace


class RecordingTrace:
    def __init__(self, name, metadata):
        self.name = name
        self.metadata = dict(metadata)
        self.ended_with = None

    def update(self, metadata=None, **kwargs):
        self.metadata.update(metadata or {})

    def end(self, **kwargs):
        self.ended_with = kwargs


class RecordingClient:
    def __init__(self):
        self.traces = []

    def trace(self, name, metadata=None, **kwargs):
        created = RecordingTrace(name, metadata or {})
        self.traces.append(created)
        return created


def test_trace_yields_none_without_client(monkeypatch):
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: None)
    with trace("task.parse", metadata={"text_length": 4}) as span:
        assert span is None


def test_trace_opens_and_ends_opik_trace(monkeypatch):
    client = RecordingClient()
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: client)

    with trace("task.parse", metadata={"text_length": 4}, request_id="req-1") as span:
        span.update(metadata={"priority": "P1"})

    recorded = client.traces[0]
    assert recorded.name == "task.parse"
    assert recorded.metadata == {"text_length": 4, "request_id": "req-1", "priority": "P1"}
    assert "latency_ms" in recorded.ended_with["output"]


def test_trace_records_error_and_reraises(monkeypatch):
    client = RecordingClient()
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: client)

    with pytest.raises(RuntimeError):
        with trace("task.delete"):
            raise RuntimeError("boom")

    assert client.traces[0].ended_with["output"]["error"] == "RuntimeError"


def test_client_is_disabled_by_default():
    assert opik_client.settings.opik_enabled is False
    assert opik_client.get_opik_client() is None
