import pytest

from dune_runner.tracing import trace_api_operation, trace_enabled


def test_trace_disabled_by_default(monkeypatch):
    """Without explicit opt-in or exporter config, tracing stays off."""
    monkeypatch.delenv("OTEL_DISABLE_EXPORTER", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", raising=False)
    assert trace_enabled() is False


def test_trace_follows_exporter_config(monkeypatch):
    """A configured OTLP endpoint enables tracing unless overridden."""
    monkeypatch.delenv("OTEL_DISABLE_EXPORTER", raising=False)
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317")
    assert trace_enabled() is True

    monkeypatch.setenv("DUNE_TRACE_REQUESTS", "false")
    assert trace_enabled() is False


def test_invalid_override_disables_tracing(monkeypatch, caplog):
    """Unparseable overrides are logged and treated as disabled."""
    monkeypatch.setenv("DUNE_TRACE_REQUESTS", "sometimes")
    assert trace_enabled() is False
    assert any("Invalid DUNE_TRACE_REQUESTS" in r.message for r in caplog.records)


@pytest.mark.asyncio
async def test_traced_operation_returns_and_raises(monkeypatch):
    """Spans wrap the operation without changing its outcome."""
    monkeypatch.setenv("DUNE_TRACE_REQUESTS", "true")

    async def _ok():
        return 7

    async def _boom():
        raise ValueError("boom")

    assert await trace_api_operation("dune.test", _ok(), method="GET", url=None) == 7
    with pytest.raises(ValueError, match="boom"):
        await trace_api_operation("dune.test", _boom())
