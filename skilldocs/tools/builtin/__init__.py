"""内置工具"""

from .skill_tool import SkillTool, ReferenceTool

__all__ = ["SkillTool", "ReferenceTool"]
