"""Unit tests for input sanitization and output redaction."""

from __future__ import annotations

from services.action.shortcut_gate.redaction import (
    REDACTED,
    dangerous_matches,
    filter_output,
    sanitize_input,
)


def test_filter_output_redacts_credential_assignments() -> None:
    output = filter_output("user=bob password: hunter2 TOKEN=abc")

    assert output == f"user=bob password: {REDACTED} TOKEN={REDACTED}"


def test_filter_output_is_idempotent() -> None:
    already = "password: [REDACTED]"

    assert filter_output(already) == already
    once = filter_output("secret=xyz")
    assert filter_output(once) == once


def test_filter_output_redacts_sensitive_keys_recursively() -> None:
    output = filter_output(
        {
            "apiKey": "abc",
            "items": [{"note": "ok", "password": "p"}, "token: t1"],
            "count": 3,
        }
    )

    assert output == {
        "apiKey": REDACTED,
        "items": [{"note": "ok", "password": REDACTED}, f"token: {REDACTED}"],
        "count": 3,
    }


def test_filter_output_matches_whole_key_segments_only() -> None:
    output = filter_output(
        {
            "keyboard": "qwerty",
            "monkey": "george",
            "API_KEY": "k1",
            "access-token": "t1",
            "clientSecret": "s1",
        }
    )

    assert output == {
        "keyboard": "qwerty",
        "monkey": "george",
        "API_KEY": REDACTED,
        "access-token": REDACTED,
        "clientSecret": REDACTED,
    }


def test_sanitize_input_strips_script_content() -> None:
    text = 'hi <script>alert("x")</script><a href="javascript:run()" onclick = "x">'

    assert sanitize_input(text) == 'hi <a href="run()"  "x">'


def test_sanitize_input_recurses_and_keeps_scalars() -> None:
    value = {"a": ["VBScript:go", 3], "b": None, "c": True}

    assert sanitize_input(value) == {"a": ["go", 3], "b": None, "c": True}


def test_dangerous_matches_flags_known_patterns() -> None:
    assert dangerous_matches("please rm -rf / and DROP TABLE users") == [
        "recursive delete command",
        "SQL drop statement",
    ]
    assert dangerous_matches("San Francisco") == []
