from __future__ import annotations

import logging

import app


def test_try_prints_response(capsys) -> None:
    code = app.main(["try", "mailto", "WebDevBot, mailto a@b"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "you, &#x61;&#x40;&#x62;"


def test_try_private_message_has_no_prefix(capsys) -> None:
    code = app.main(["try", "mailto", "mailto a@b", "--type", "private"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "&#x61;&#x40;&#x62;"


def test_try_reports_dropped_message(capsys) -> None:
    code = app.main(["try", "mailto", "mailto a@b"])
    assert code == 1
    assert "no response" in capsys.readouterr().out


def test_plugins_lists_every_plugin(capsys) -> None:
    assert app.main(["plugins"]) == 0
    out = capsys.readouterr().out
    for name in ("mailto", "doctype", "cssminifier", "lipsum"):
        assert name in out


def test_redacting_formatter_masks_secrets() -> None:
    formatter = app._RedactingFormatter(["hunter2"], fmt="%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "password is hunter2", None, None)
    assert formatter.format(record) == "password is ***"


def test_collect_redaction_values(monkeypatch) -> None:
    monkeypatch.setenv("SASL_PASSWORD", "secret")
    monkeypatch.delenv("MISSING_VAR", raising=False)
    config = {"redact": {"enabled": True, "patterns": ["SASL_PASSWORD", "MISSING_VAR"]}}
    assert app._collect_redaction_values(config) == ["secret"]
    assert app._collect_redaction_values({}) == []
