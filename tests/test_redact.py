from __future__ import annotations

from pyvesseldash._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "vessels": [{"id": "A", "name": "Alpha"}],
        "Authorization": "Bearer abc",
        "X-Tenant-Id": "tenant-7",
        "meta": {"apiKey": "k", "token": "t"},
    }

    redacted = redact_for_log(payload)
    assert redacted["vessels"] == [{"id": "A", "name": "Alpha"}]
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["X-Tenant-Id"] == "<redacted>"
    assert redacted["meta"] == {"apiKey": "<redacted>", "token": "<redacted>"}


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_cuts_long_lists() -> None:
    redacted = redact_for_log([{"id": str(i)} for i in range(120)], max_items=50)
    assert len(redacted) == 51
    assert redacted[-1] == "<70 more>"
