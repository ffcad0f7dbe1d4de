"""Skill / Reference 工具

宿主 Agent 通过这两个工具按需拉取领域知识：
- Skill: 加载完整 SKILL.md，只提示可用的参考文档，不主动读取
- Reference: 读取清单中提到的 references/*.md

内容以 tool_result 的形式注入，不修改 system_prompt。

使用示例：
    >>> session = SkillSession(skills_dir="skills")
    >>> tool = SkillTool(session)
    >>> response = tool.run({"skill": "rest-api-design"})
"""

import logging
from typing import Any, Dict, List

from ...analysis.reading_level import ReadingLevelAnalyzer
from ...core.exceptions import PathEscape, RegistryException, SkillDocsException
from ...session import SkillSession
from ...skills.references import normalize_reference_path
from ..base import Tool, ToolParameter
from ..errors import ToolErrorCode
from ..response import ToolResponse

logger = logging.getLogger(__name__)


def _registry_descriptions(session: SkillSession) -> str:
    try:
        return session.registry.describe()
    except RegistryException as e:
        logger.warning(f"技能注册表不可用: {e}")
        return "（技能注册表不可用）"


class SkillTool(Tool):
    """技能工具"""

    def __init__(self, session: SkillSession):
        super().__init__(
            name="Skill",
            description=f"""加载技能获取专业知识。

可用技能：
{_registry_descriptions(session)}

何时使用：
- 任务明确匹配某个技能描述时，立即使用
- 开始领域特定工作之前

加载后如需更深入的说明，再用 Reference 工具读取技能提到的参考文档。""",
        )
        self.session = session
        self.analyzer = ReadingLevelAnalyzer()

    def get_parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(name="skill", type="string", description="要加载的技能名称"),
            ToolParameter(
                name="args",
                type="string",
                description="可选参数，将替换 SKILL.md 中的 $ARGUMENTS 占位符",
                required=False,
                default="",
            ),
        ]

    def run(self, parameters: Dict[str, Any]) -> ToolResponse:
        skill_name = (parameters.get("skill") or "").strip()
        args = parameters.get("args") or ""

        if not skill_name:
            return ToolResponse.error(
                code=ToolErrorCode.INVALID_PARAM,
                message="必须指定技能名称",
                context={"params_input": parameters},
            )

        try:
            manifest = self.session.load_manifest(skill_name)
        except SkillDocsException as e:
            return ToolResponse.error(
                code=ToolErrorCode.from_exception(e),
                message=str(e),
                context={"params_input": parameters, "available_skills": self.session.loader.list_skills()},
            )
        except Exception as e:
            return ToolResponse.error(
                code=ToolErrorCode.INTERNAL_ERROR,
                message=f"加载技能失败：{e}",
                context={"params_input": parameters},
            )

        content = manifest.body.replace("$ARGUMENTS", args)
        references = self.session.resolver.declared_references(manifest.name)
        invalid = self._escaping_references(manifest)
        missing = [p for p in references if not (manifest.dir / p).is_file()]
        analysis = self.analyzer.analyze(manifest.body, filename=str(manifest.path.name))

        text = f"""<skill-loaded name="{manifest.name}">
{content}
{self._references_hint(references)}
</skill-loaded>

技能已加载：{manifest.name}
描述：{manifest.description}"""

        data = {
            "name": manifest.name,
            "description": manifest.description,
            "loaded": True,
            "references": references,
            "token_estimate": self.session.loaded_manifests.get(manifest.name, 0),
            "reading_minutes": analysis.reading_time.total_minutes,
            "reading_level": analysis.level,
        }
        if missing:
            data["missing_references"] = missing
        if invalid:
            data["invalid_references"] = invalid
        if missing or invalid:
            return ToolResponse.partial(text=text, data=data)
        return ToolResponse.success(text=text, data=data)

    @staticmethod
    def _escaping_references(manifest) -> List[str]:
        """清单中越出 references/ 的声明（不会提示给 Agent）"""
        invalid = []
        for item in manifest.references:
            try:
                normalize_reference_path(manifest.name, item)
            except PathEscape:
                invalid.append(item)
        return invalid

    @staticmethod
    def _references_hint(references: List[str]) -> str:
        if not references:
            return ""
        lines = "\n".join(f"  - {p}" for p in references)
        return f"\n**参考文档**（需要时用 Reference 工具加载）：\n{lines}"


class ReferenceTool(Tool):
    """参考文档工具"""

    def __init__(self, session: SkillSession):
        super().__init__(
            name="Reference",
            description="读取已加载技能在 SKILL.md 中提到的参考文档（references/*.md）。",
        )
        self.session = session

    def get_parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(name="skill", type="string", description="所属技能名称"),
            ToolParameter(name="path", type="string", description="参考文档路径，如 references/java-spring.md"),
        ]

    def run(self, parameters: Dict[str, Any]) -> ToolResponse:
        skill_name = (parameters.get("skill") or "").strip()
        path = (parameters.get("path") or "").strip()

        if not skill_name or not path:
            return ToolResponse.error(
                code=ToolErrorCode.INVALID_PARAM,
                message="必须同时指定 skill 和 path",
                context={"params_input": parameters},
            )

        try:
            document = self.session.resolve_reference(skill_name, path)
        except SkillDocsException as e:
            return ToolResponse.error(
                code=ToolErrorCode.from_exception(e),
                message=str(e),
                context={"params_input": parameters},
            )
        except Exception as e:
            return ToolResponse.error(
                code=ToolErrorCode.INTERNAL_ERROR,
                message=f"加载参考文档失败：{e}",
                context={"params_input": parameters},
            )

        text = f"""<reference-loaded skill="{document.skill}" path="{document.path}">
{document.content.strip()}
</reference-loaded>"""

        return ToolResponse.success(
            text=text,
            data={
                "skill": document.skill,
                "path": document.path,
                "token_estimate": self.session.loaded_references.get((document.skill, document.path), 0),
            },
        )
