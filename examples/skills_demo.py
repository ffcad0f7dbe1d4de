"""Skills 渐进式披露使用示例

演示如何在宿主 Agent 中使用 skilldocs：
- 注册表排序（仅元数据）
- 按需加载技能清单
- 按需加载参考文档
- 一致性检查
"""

from pathlib import Path

from dotenv import load_dotenv

from skilldocs import Config, SkillSession, check_consistency
from skilldocs.core import setup_logging
from skilldocs.analysis import ReadingLevelAnalyzer
from skilldocs.tools import SkillTool, ReferenceTool

load_dotenv()

SKILLS_DIR = Path(__file__).parent / "skills"


def demo_lookup():
    """演示注册表排序与清单加载"""
    print("=" * 60)
    print("示例 1: 注册表排序与清单加载")
    print("=" * 60)

    with SkillSession(skills_dir=SKILLS_DIR) as session:
        print("\n可用技能:")
        print(session.registry.describe())

        intent = "add readiness health checks and tracing to a Spring Boot service"
        candidates = session.rank(intent)
        print(f"\n意图: {intent}")
        print(f"候选技能: {candidates}")

        if candidates:
            manifest = session.load_manifest(candidates[0])
            print(f"\n已加载 {manifest.name}，声明的参考文档: {manifest.references}")
            print(f"上下文占用: {session.context_tokens} tokens")


def demo_tools():
    """演示宿主 Agent 工具"""
    print("\n" + "=" * 60)
    print("示例 2: Skill / Reference 工具")
    print("=" * 60)

    session = SkillSession(skills_dir=SKILLS_DIR, config=Config(max_context_tokens=4000))
    skill_tool = SkillTool(session)
    reference_tool = ReferenceTool(session)

    response = skill_tool.run({"skill": "api-observability"})
    print(response.text)
    print(f"状态: {response.status.value}，阅读时间: {response.data['reading_minutes']} 分钟")

    response = reference_tool.run({"skill": "api-observability", "path": "references/java-spring.md"})
    print(response.text)

    response = reference_tool.run({"skill": "api-observability", "path": "../rest-api-design/SKILL.md"})
    print(f"越界访问: {response.error_info}")

    session.close()


def demo_consistency():
    """演示一致性检查"""
    print("\n" + "=" * 60)
    print("示例 3: 一致性检查")
    print("=" * 60)

    report = check_consistency(SKILLS_DIR)
    print(report.format())

    analyzer = ReadingLevelAnalyzer()
    analysis = analyzer.analyze_file(SKILLS_DIR / "rest-api-design" / "SKILL.md")
    print()
    print(analyzer.info_box(analysis))


if __name__ == "__main__":
    setup_logging("INFO")
    demo_lookup()
    demo_tools()
    demo_consistency()
