"""异常体系

所有异常都携带结构化字段（name / path），消息中总会给出缺失的路径，
便于运行时快速失败、CI 中定位文档漂移。
"""

from typing import List, Optional


class SkillDocsException(Exception):
    """skilldocs 基础异常类"""
    pass


# ---------------------------------------------------------------- 注册表

class RegistryException(SkillDocsException):
    """注册表相关异常"""
    pass


class RegistryNotFound(RegistryException):
    """注册表文件（skills/README.md）不存在"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"技能注册表不存在: {path}")


class MalformedRegistry(RegistryException):
    """注册表中找不到可解析的 markdown 表格"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"技能注册表格式错误 ({path}): {reason}")


class MissingManifest(RegistryException):
    """注册表列出的技能没有对应的 SKILL.md"""

    def __init__(self, name: str, path=None):
        self.name = name
        self.path = path
        where = f": {path}" if path else ""
        super().__init__(f"注册表条目 '{name}' 缺少技能清单{where}")


# ---------------------------------------------------------------- 技能清单

class ManifestException(SkillDocsException):
    """技能清单相关异常"""
    pass


class SkillNotFound(ManifestException):
    """skills/<name>/SKILL.md 不存在"""

    def __init__(self, name: str, path=None):
        self.name = name
        self.path = path
        where = f": {path}" if path else ""
        super().__init__(f"技能 '{name}' 不存在{where}")


class InvalidSkillName(SkillNotFound):
    """技能名称不符合 ^[a-z0-9-]+$"""

    def __init__(self, name: str):
        self.name = name
        self.path = None
        super(SkillNotFound, self).__init__(
            f"非法技能名称 {name!r}: 只允许小写字母、数字和连字符"
        )


class MalformedManifest(ManifestException):
    """SKILL.md 缺少或包含无效的 front matter"""

    def __init__(self, name: str, path, reason: str):
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"技能清单格式错误 ({path}): {reason}")


# ---------------------------------------------------------------- 参考文档

class ReferenceException(SkillDocsException):
    """参考文档相关异常"""
    pass


class ReferenceNotFound(ReferenceException):
    """参考文档不存在"""

    def __init__(self, name: str, path: str, file=None):
        self.name = name
        self.path = path
        self.file = file
        super().__init__(f"技能 '{name}' 的参考文档不存在: {file or path}")


class PathEscape(ReferenceException):
    """参考路径试图离开技能的 references/ 目录"""

    def __init__(self, name: str, path: str, reason: str = ""):
        self.name = name
        self.path = path
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"技能 '{name}' 的参考路径越界: {path}{detail}")


class UndeclaredReference(ReferenceException):
    """技能清单未声明该参考文档，拒绝按需加载"""

    def __init__(self, name: str, path: str, declared: Optional[List[str]] = None):
        self.name = name
        self.path = path
        self.declared = list(declared or [])
        super().__init__(
            f"技能 '{name}' 的清单未引用 {path}；已声明: {', '.join(self.declared) or '无'}"
        )


# ---------------------------------------------------------------- 其他

class ContextBudgetExceeded(SkillDocsException):
    """加载内容会超出会话的上下文 Token 预算"""

    def __init__(self, path, requested: int, used: int, budget: int):
        self.path = path
        self.requested = requested
        self.used = used
        self.budget = budget
        super().__init__(
            f"加载 {path} 需要 {requested} tokens，已用 {used}/{budget}，超出上下文预算"
        )


class ConsistencyError(SkillDocsException):
    """一致性检查发现错误（汇总全部违规项）"""

    def __init__(self, violations: list):
        self.violations = list(violations)
        lines = [f"一致性检查失败，共 {len(self.violations)} 个错误:"]
        lines.extend(f"  - {v}" for v in self.violations)
        super().__init__("\n".join(lines))
