"""配置测试"""

import logging

import pytest

from skilldocs import Config
from skilldocs.skills import Severity, ViolationKind


class TestConfig:
    """测试 Config"""

    def test_defaults(self, monkeypatch):
        for key in ("SKILLDOCS_SKILLS_DIR", "SKILLDOCS_ORPHAN_SEVERITY",
                    "SKILLDOCS_REGISTRY_DRIFT_SEVERITY", "SKILLDOCS_MAX_CONTEXT_TOKENS"):
            monkeypatch.delenv(key, raising=False)

        config = Config()

        assert config.skills_dir == "skills"
        assert config.registry_filename == "README.md"
        assert config.strict_references is True
        assert config.max_context_tokens is None
        assert config.policy().severity_for(ViolationKind.ORPHAN_REFERENCE) == Severity.WARNING
        assert config.policy().severity_for(ViolationKind.MISSING_MANIFEST) == Severity.ERROR

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SKILLDOCS_SKILLS_DIR", "/srv/docs/skills")
        monkeypatch.setenv("SKILLDOCS_ORPHAN_SEVERITY", "error")
        monkeypatch.setenv("SKILLDOCS_REGISTRY_DRIFT_SEVERITY", "warning")
        monkeypatch.setenv("SKILLDOCS_MAX_CONTEXT_TOKENS", "8000")

        config = Config.from_env()

        assert config.skills_dir == "/srv/docs/skills"
        assert config.max_context_tokens == 8000
        policy = config.policy()
        assert policy.severity_for(ViolationKind.ORPHAN_REFERENCE) == Severity.ERROR
        assert policy.severity_for(ViolationKind.UNREGISTERED_SKILL) == Severity.WARNING
        assert policy.severity_for(ViolationKind.REFERENCE_NOT_FOUND) == Severity.ERROR

    def test_invalid_max_context_tokens(self, monkeypatch):
        monkeypatch.setenv("SKILLDOCS_MAX_CONTEXT_TOKENS", "8k")

        with pytest.raises(ValueError, match="SKILLDOCS_MAX_CONTEXT_TOKENS"):
            Config()

    def test_severity_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("SKILLDOCS_ORPHAN_SEVERITY", "Error")

        policy = Config().policy()

        assert policy.severity_for(ViolationKind.ORPHAN_REFERENCE) == Severity.ERROR

    def test_get_set(self):
        config = Config()

        config.set("strict_references", False)
        config.set("team", "platform")

        assert config.get("strict_references") is False
        assert config.get("team") == "platform"
        assert config.get("missing", "default") == "default"


def test_setup_logging_is_idempotent():
    from skilldocs.core.logging import setup_logging

    logger = setup_logging("debug")
    setup_logging("info")

    marked = [h for h in logger.handlers if getattr(h, "_skilldocs", False)]
    assert len(marked) == 1
    assert logger.level == logging.INFO
