# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.
"""Unit tests for StructuredFormatter."""

import json
import logging

from mise_os.core.logging import StructuredFormatter


def _record(**extra):
    record = logging.LogRecord(
        "mise.tenancy", logging.INFO, __file__, 1, "Resolved restaurant %s", (9,), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_json_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["module"] == "mise.tenancy"
        assert entry["message"] == "Resolved restaurant 9"

    def test_context_keys(self):
        entry = json.loads(
            StructuredFormatter().format(
                _record(trace_id="t-1", tenant_id=9, principal_id=1, resolution="header")
            )
        )
        assert entry["trace_id"] == "t-1"
        assert entry["tenant_id"] == 9
        assert entry["principal_id"] == 1
        assert entry["resolution"] == "header"

    def test_missing_context_omitted(self):
        entry = json.loads(StructuredFormatter().format(_record(tenant_id=None)))
        assert "tenant_id" not in entry
