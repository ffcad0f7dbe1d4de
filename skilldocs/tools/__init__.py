"""宿主 Agent 工具协议"""

from .base import Tool, ToolParameter
from .response import ToolResponse, ToolStatus
from .errors import ToolErrorCode
from .builtin.skill_tool import SkillTool, ReferenceTool

__all__ = [
    "Tool",
    "ToolParameter",
    "ToolResponse",
    "ToolStatus",
    "ToolErrorCode",
    "SkillTool",
    "ReferenceTool",
]
