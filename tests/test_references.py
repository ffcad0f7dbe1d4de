"""参考文档按需加载测试"""

import os

import pytest

from skilldocs import resolve_reference
from skilldocs.core.exceptions import (
    PathEscape,
    ReferenceNotFound,
    SkillNotFound,
    UndeclaredReference,
)
from skilldocs.skills import ManifestLoader, ReferenceResolver, normalize_reference_path

from conftest import JAVA_SPRING_CONTENT, write_skill


@pytest.fixture
def resolver(skills_dir):
    return ReferenceResolver(ManifestLoader(skills_dir))


class TestResolveReference:
    """测试 ReferenceResolver"""

    def test_resolve_declared_reference(self, resolver):
        document = resolver.resolve_reference("api-observability", "references/java-spring.md")

        assert document.skill == "api-observability"
        assert document.path == "references/java-spring.md"
        assert document.content == JAVA_SPRING_CONTENT
        assert "Actuator" in document.content

    def test_module_level_function(self, skills_dir):
        document = resolve_reference("api-observability", "references/java-spring.md", skills_dir=skills_dir)

        assert document.content == JAVA_SPRING_CONTENT

    def test_missing_reference(self, resolver):
        with pytest.raises(ReferenceNotFound) as exc_info:
            resolver.resolve_reference("api-observability", "references/kotlin-spring.md")

        assert exc_info.value.name == "api-observability"
        assert exc_info.value.path == "references/kotlin-spring.md"
        assert "kotlin-spring.md" in str(exc_info.value)

    def test_unknown_skill(self, resolver):
        with pytest.raises(SkillNotFound):
            resolver.resolve_reference("codegen-helper", "references/java-spring.md")

    def test_normalized_path(self, resolver):
        document = resolver.resolve_reference("api-observability", "./references//java-spring.md")

        assert document.path == "references/java-spring.md"

    def test_cached(self, resolver):
        first = resolver.resolve_reference("api-observability", "references/java-spring.md")
        second = resolver.resolve_reference("api-observability", "references/java-spring.md")

        assert first is second

    def test_declared_references(self, resolver):
        assert resolver.declared_references("rest-api-design") == ["references/pagination.md"]


class TestLoadOnDemand:
    """清单未提到的参考文档不允许加载"""

    def test_undeclared_reference_rejected(self, skills_dir, resolver):
        (skills_dir / "api-observability" / "references" / "internal.md").write_text("secret", encoding="utf-8")

        with pytest.raises(UndeclaredReference) as exc_info:
            resolver.resolve_reference("api-observability", "references/internal.md")

        assert exc_info.value.declared == ["references/java-spring.md"]

    def test_non_strict_allows_undeclared(self, skills_dir):
        (skills_dir / "api-observability" / "references" / "internal.md").write_text("notes", encoding="utf-8")
        resolver = ReferenceResolver(ManifestLoader(skills_dir), strict=False)

        assert resolver.resolve_reference("api-observability", "references/internal.md").content == "notes"

    def test_see_also_declares_reference(self, skills_dir, resolver):
        write_skill(
            skills_dir,
            "api-testing",
            "Contract and integration testing for APIs",
            body="# API Testing\n",
            references={"references/contracts.md": "# Contracts\n"},
            extra_frontmatter="see_also:\n  - references/contracts.md\n",
        )

        assert resolver.resolve_reference("api-testing", "references/contracts.md").content == "# Contracts\n"


class TestPathEscape:
    """测试路径越界防护"""

    @pytest.mark.parametrize("path", [
        "../rest-api-design/SKILL.md",
        "references/../SKILL.md",
        "references/../../rest-api-design/references/pagination.md",
        "..\\..\\etc\\passwd",
        "/etc/passwd",
        "C:/Windows/win.ini",
        "SKILL.md",
        "scripts/run.sh",
        "references",
        "",
    ])
    def test_rejected(self, resolver, path):
        with pytest.raises(PathEscape):
            resolver.resolve_reference("api-observability", path)

    def test_dot_dot_rejected_before_filesystem(self):
        with pytest.raises(PathEscape, match=r"\.\."):
            normalize_reference_path("any-skill", "references/../x.md")

    def test_symlink_escape(self, skills_dir, resolver):
        link = skills_dir / "api-observability" / "references" / "linked.md"
        try:
            os.symlink(skills_dir / "rest-api-design" / "SKILL.md", link)
        except (OSError, NotImplementedError):
            pytest.skip("当前平台不支持符号链接")

        with pytest.raises(PathEscape):
            resolver.resolve_reference("api-observability", "references/linked.md")
