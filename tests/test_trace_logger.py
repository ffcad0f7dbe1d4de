"""TraceLogger 测试"""

import json
from pathlib import Path

import pytest

from skilldocs.observability import TraceLogger


class TestTraceLogger:
    """测试 JSONL Trace"""

    def test_log_event(self, tmp_path):
        with TraceLogger(output_dir=str(tmp_path)) as trace:
            trace.log_event("manifest_loaded", {"skill": "rest-api-design", "tokens": 120})
            trace.log_event("reference_resolved", {"skill": "rest-api-design"}, step=7)

        records = [json.loads(line) for line in trace.jsonl_path.read_text(encoding="utf-8").splitlines()]

        assert [r["event"] for r in records] == ["manifest_loaded", "reference_resolved"]
        assert [r["step"] for r in records] == [1, 7]
        assert records[0]["session_id"] == trace.session_id
        assert records[0]["payload"]["tokens"] == 120
        assert trace.jsonl_path.name == f"trace-{trace.session_id}.jsonl"

    def test_sanitize_paths(self, tmp_path):
        trace = TraceLogger(output_dir=str(tmp_path))
        trace.log_event("manifest_loaded", {"path": Path("/home/alice/docs/skills/x/SKILL.md")})
        trace.finalize()

        assert trace.events[0]["payload"]["path"] == "/home/***/docs/skills/x/SKILL.md"

    def test_closed_logger_rejects_events(self, tmp_path):
        trace = TraceLogger(output_dir=str(tmp_path))
        trace.finalize()
        trace.finalize()

        with pytest.raises(ValueError):
            trace.log_event("session_end", {})
