"""Tests for the polling loop and engine wiring. Sleep is injected; nothing waits."""

import http.client
import io
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cli.scheduler import EventRouter, build_engine, build_risk, build_settings, run_loop, run_tick
from cli.structured_log import StructuredEventLogger
from config.loader import AppConfig
from data.price_source import BinancePriceSource, SequencePriceSource, StaticPriceSource
from journal import JournalWriter


def _events(buf: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in buf.getvalue().splitlines()]


def test_build_from_config(app_config: AppConfig) -> None:
    settings = build_settings(app_config)
    assert settings.symbol == "ETHUSDT"
    assert settings.order_quantity == 0.01
    risk = build_risk(app_config)
    assert risk.current_equity == 1000.0
    assert risk.max_drawdown == pytest.approx(100.0)


def test_run_loop_skips_failed_tick_and_keeps_going(app_config: AppConfig, capsys) -> None:
    buf = io.StringIO()
    events = StructuredEventLogger(app_config.symbol, stream=buf)
    engine = build_engine(app_config, SequencePriceSource([100.5, "bad", 109.5]), events=events)
    sleeps: list[float] = []

    cycles = run_loop(app_config, engine, events=events, max_ticks=3, sleep=sleeps.append)

    assert cycles == 3
    assert sleeps == [5, 5]
    assert engine.ticks == 2
    assert engine.position.total_realized == pytest.approx(0.09)
    records = _events(buf)
    kinds = [r["event"] for r in records]
    assert kinds.count("order_placed") == 2
    assert kinds.count("error") == 1
    assert records[-1] == {**records[-1], "event": "shutdown", "ticks": 3}
    out = capsys.readouterr().out
    assert "Starting trading for ETHUSDT..." in out
    assert "Grid mode: Limited" in out
    assert "=== Trading Statistics ===" in out


def test_run_loop_ctrl_c(app_config: AppConfig, capsys) -> None:
    def interrupt(_seconds: float) -> None:
        raise KeyboardInterrupt

    buf = io.StringIO()
    events = StructuredEventLogger(app_config.symbol, stream=buf)
    engine = build_engine(app_config, StaticPriceSource(105.0))
    cycles = run_loop(app_config, engine, events=events, sleep=interrupt)
    assert cycles == 1
    assert "Shutting down after 1 tick(s)" in capsys.readouterr().out
    assert _events(buf)[-1]["event"] == "shutdown"


def test_run_tick_returns_none_on_error(app_config: AppConfig) -> None:
    buf = io.StringIO()
    events = StructuredEventLogger(app_config.symbol, stream=buf)
    engine = build_engine(app_config, SequencePriceSource([]))
    assert run_tick(engine, events) is None
    (record,) = _events(buf)
    assert record["event"] == "error"
    assert record["detail"] == "PriceFetchError"


def test_router_writes_journal(app_config: AppConfig, tmp_path: Path) -> None:
    path = tmp_path / "journal.jsonl"
    engine = build_engine(app_config, StaticPriceSource(100.5), journal=JournalWriter(path))
    engine.tick()
    records = [json.loads(line) for line in path.read_text().splitlines()]
    assert [r["event"] for r in records] == ["order_placed", "snapshot"]
    assert records[0]["realized_pnl"] == 0.0
    assert records[1]["active_orders"][0]["id"] == "ORDER_1"


def test_router_ignores_unknown_events() -> None:
    EventRouter("ETHUSDT")("something_new", {"x": 1})


def test_run_loop_survives_truncated_http_body(app_config: AppConfig) -> None:
    resp = MagicMock()
    resp.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"")
    buf = io.StringIO()
    events = StructuredEventLogger(app_config.symbol, stream=buf)
    engine = build_engine(app_config, BinancePriceSource(), events=events)

    with patch("data.price_source.urllib.request.urlopen", return_value=resp):
        cycles = run_loop(app_config, engine, events=events, max_ticks=2, sleep=lambda _s: None)

    assert cycles == 2
    errors = [r for r in _events(buf) if r["event"] == "error"]
    assert [e["detail"] for e in errors] == ["PriceFetchError", "PriceFetchError"]


def test_run_loop_survives_journal_failure(app_config: AppConfig, caplog: pytest.LogCaptureFixture) -> None:
    journal = MagicMock()
    journal.snapshot.side_effect = OSError("No space left on device")
    buf = io.StringIO()
    events = StructuredEventLogger(app_config.symbol, stream=buf)
    engine = build_engine(app_config, SequencePriceSource([100.5, 109.5]), events=events, journal=journal)

    cycles = run_loop(app_config, engine, events=events, max_ticks=2, sleep=lambda _s: None)

    assert cycles == 2
    assert engine.ticks == 2
    assert engine.risk.current_equity == pytest.approx(1000.09)
    errors = [r for r in _events(buf) if r["event"] == "error"]
    assert [e["detail"] for e in errors] == ["OSError", "OSError"]
    assert "Tick failed unexpectedly" in caplog.text
