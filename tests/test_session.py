"""SkillSession 测试：会话内加载、上下文预算、Trace"""

import json

import pytest

from skilldocs import Config, SkillSession
from skilldocs.core.exceptions import ContextBudgetExceeded, ReferenceNotFound, SkillNotFound
from skilldocs.observability import TraceLogger
from skilldocs.skills import ExactNameMatcher, ViolationKind

from conftest import OBSERVABILITY_DESCRIPTION, REST_DESCRIPTION, write_registry


class TestSkillSession:
    """测试会话接口"""

    def test_rank_and_load(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir)

        candidates = session.rank("add tracing to a service")
        manifest = session.load_manifest(candidates[0])

        assert candidates == ["api-observability"]
        assert manifest.name == "api-observability"
        assert list(session.loaded_manifests) == ["api-observability"]

    def test_custom_matcher(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir, matcher=ExactNameMatcher())

        assert session.rank("use rest-api-design") == ["rest-api-design"]
        assert session.rank("design a REST endpoint") == []

    def test_manifest_counted_once(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir)

        session.load_manifest("rest-api-design")
        tokens = session.context_tokens
        session.load_manifest("rest-api-design")

        assert tokens > 0
        assert session.context_tokens == tokens

    def test_reference_loads_owning_manifest(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir)

        document = session.resolve_reference("api-observability", "references/java-spring.md")

        assert "Actuator" in document.content
        assert "api-observability" in session.loaded_manifests
        assert ("api-observability", "references/java-spring.md") in session.loaded_references

    def test_load_failures_propagate(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir)

        with pytest.raises(SkillNotFound):
            session.load_manifest("codegen-helper")
        with pytest.raises(ReferenceNotFound):
            session.resolve_reference("api-observability", "references/kotlin-spring.md")

    def test_skills_dir_from_config(self, skills_dir):
        session = SkillSession(config=Config(skills_dir=str(skills_dir)))

        assert session.load_manifest("rest-api-design").name == "rest-api-design"

    def test_check_consistency_uses_config_policy(self, skills_dir):
        write_registry(skills_dir, {
            "rest-api-design": REST_DESCRIPTION,
            "api-observability": OBSERVABILITY_DESCRIPTION,
            "codegen-helper": "x",
        })
        session = SkillSession(skills_dir=skills_dir, config=Config(registry_drift_severity="warning"))

        report = session.check_consistency()

        assert report.ok
        assert [v.kind for v in report.warnings] == [ViolationKind.MISSING_MANIFEST]


class TestContextBudget:
    """测试上下文 Token 预算"""

    def test_budget_exceeded(self, skills_dir):
        session = SkillSession(skills_dir=skills_dir, config=Config(max_context_tokens=1))

        with pytest.raises(ContextBudgetExceeded) as exc_info:
            session.load_manifest("rest-api-design")

        assert exc_info.value.budget == 1
        assert session.loaded_manifests == {}

    def test_budget_exact_fit(self, skills_dir):
        sizing = SkillSession(skills_dir=skills_dir)
        manifest = sizing.load_manifest("api-observability")
        budget = sizing.token_counter.count_document(manifest.content)

        session = SkillSession(skills_dir=skills_dir, config=Config(max_context_tokens=budget))
        session.load_manifest("api-observability")

        assert session.context_tokens == budget
        with pytest.raises(ContextBudgetExceeded):
            session.resolve_reference("api-observability", "references/java-spring.md")
        assert session.loaded_references == {}


class TestSessionTrace:
    """测试 Trace 记录"""

    def test_trace_events(self, skills_dir, tmp_path):
        trace = TraceLogger(output_dir=str(tmp_path / "traces"))

        with SkillSession(skills_dir=skills_dir, trace_logger=trace) as session:
            session.rank("pagination for REST collections")
            session.load_manifest("rest-api-design")
            session.resolve_reference("rest-api-design", "references/pagination.md")
            with pytest.raises(SkillNotFound):
                session.load_manifest("codegen-helper")

        lines = trace.jsonl_path.read_text(encoding="utf-8").splitlines()
        events = [json.loads(line)["event"] for line in lines]

        assert events == [
            "session_start",
            "skill_ranked",
            "manifest_loaded",
            "reference_resolved",
            "load_failed",
            "session_end",
        ]
        assert trace.closed
        assert trace.summary()["events"]["manifest_loaded"] == 1

    def test_trace_enabled_by_config(self, skills_dir, tmp_path):
        config = Config(trace_enabled=True, trace_dir=str(tmp_path / "traces"))

        session = SkillSession(skills_dir=skills_dir, config=config)
        session.close()

        assert session.trace_logger is not None
        assert session.trace_logger.jsonl_path.exists()
