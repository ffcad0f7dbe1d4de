"""工具错误码

把 skilldocs 异常映射为宿主 Agent 可识别的标准错误码。
"""

from ..core.exceptions import (
    ContextBudgetExceeded,
    MalformedManifest,
    PathEscape,
    ReferenceNotFound,
    SkillNotFound,
    UndeclaredReference,
)


class ToolErrorCode:
    """工具错误码"""

    NOT_FOUND = "NOT_FOUND"                                # 技能或参考文档不存在
    ACCESS_DENIED = "ACCESS_DENIED"                        # 路径越界或未声明的参考文档
    INVALID_PARAM = "INVALID_PARAM"                        # 参数无效或缺失
    INVALID_FORMAT = "INVALID_FORMAT"                      # SKILL.md front matter 无效
    CONTEXT_BUDGET_EXCEEDED = "CONTEXT_BUDGET_EXCEEDED"    # 超出会话上下文预算
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @classmethod
    def get_all_codes(cls) -> list:
        return [
            value for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str)
        ]

    @classmethod
    def from_exception(cls, error: Exception) -> str:
        """异常 -> 错误码"""
        if isinstance(error, (SkillNotFound, ReferenceNotFound)):
            return cls.NOT_FOUND
        if isinstance(error, (PathEscape, UndeclaredReference)):
            return cls.ACCESS_DENIED
        if isinstance(error, MalformedManifest):
            return cls.INVALID_FORMAT
        if isinstance(error, ContextBudgetExceeded):
            return cls.CONTEXT_BUDGET_EXCEEDED
        return cls.INTERNAL_ERROR
