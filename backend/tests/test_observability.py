"""
Log formatting tests.
"""

import json
import logging

from backend.app.core.observability import ConsoleFormatter, JsonFormatter, build_formatter


def make_record(**extra):
    record = logging.LogRecord("ledger.audit", logging.WARNING, __file__, 1, "ENTRY_DATE_DEFAULTED", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_console_line_renders_extras():
    record = make_record(audit={"entry_id": "rec-42", "party_name": "Ramesh"})
    line = ConsoleFormatter().format(record)

    assert "WARNING ledger.audit ENTRY_DATE_DEFAULTED" in line
    assert '"entry_id": "rec-42"' in line
    assert '"party_name": "Ramesh"' in line


def test_console_line_without_extras_is_plain():
    line = ConsoleFormatter().format(make_record())
    assert line.endswith("ENTRY_DATE_DEFAULTED")


def test_json_line_carries_extras():
    record = make_record(owner_id="owner-1", status_code=422)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "ledger.audit"
    assert payload["message"] == "ENTRY_DATE_DEFAULTED"
    assert payload["extra"] == {"owner_id": "owner-1", "status_code": 422}


def test_format_selected_by_name():
    assert isinstance(build_formatter("json"), JsonFormatter)
    assert isinstance(build_formatter("console"), ConsoleFormatter)
