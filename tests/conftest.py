"""pytest 共享 fixture：临时技能语料"""

from pathlib import Path
from typing import Dict, Optional

import pytest

REST_DESCRIPTION = (
    "Design REST APIs with consistent resource naming, HTTP methods, status codes, "
    "pagination and error responses. Use when designing or reviewing HTTP endpoints."
)
OBSERVABILITY_DESCRIPTION = (
    "Add health checks, metrics, structured logging and distributed tracing to APIs. "
    "Use when instrumenting a service or defining monitoring standards."
)

JAVA_SPRING_CONTENT = """# Spring Boot Actuator

Expose `/actuator/health/liveness` and `/actuator/health/readiness`.
"""


def write_registry(skills_dir: Path, rows: Dict[str, str]) -> Path:
    """写入 skills/README.md 注册表"""
    lines = ["# Skills", "", "| Skill | Description |", "|-------|-------------|"]
    for name, description in rows.items():
        lines.append(f"| [{name}]({name}/SKILL.md) | {description} |")
    path = skills_dir / "README.md"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_skill(
    skills_dir: Path,
    name: str,
    description: str,
    body: str = "",
    references: Optional[Dict[str, str]] = None,
    extra_frontmatter: str = "",
) -> Path:
    """写入 skills/<name>/SKILL.md 以及 references/ 下的文件"""
    skill_dir = skills_dir / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(
        f"---\nname: {name}\ndescription: {description}\n{extra_frontmatter}---\n\n{body}",
        encoding="utf-8",
    )
    for relative, content in (references or {}).items():
        file = skill_dir / relative
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(content, encoding="utf-8")
    return skill_dir


@pytest.fixture
def skills_dir(tmp_path) -> Path:
    """一致的两技能语料（无孤儿文件、无漂移）"""
    root = tmp_path / "skills"
    root.mkdir()

    write_registry(root, {
        "rest-api-design": REST_DESCRIPTION,
        "api-observability": OBSERVABILITY_DESCRIPTION,
    })
    write_skill(
        root,
        "rest-api-design",
        REST_DESCRIPTION,
        body="# REST API Design\n\nUse plural nouns for collections.\n\n"
             "Load `references/pagination.md` for cursor pagination details.\n",
        references={"references/pagination.md": "# Pagination\n\nPrefer cursors.\n"},
    )
    write_skill(
        root,
        "api-observability",
        OBSERVABILITY_DESCRIPTION,
        body="# API Observability\n\nExpose liveness and readiness probes.\n\n"
             "For Spring Boot, load `references/java-spring.md`.\n",
        references={"references/java-spring.md": JAVA_SPRING_CONTENT},
    )
    return root
