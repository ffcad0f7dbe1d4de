"""
skilldocs - 技能文档的发现与按需加载

为文档语料中的 skills/ 目录提供：
- 注册表（skills/README.md）解析与可插拔的意图匹配
- 技能清单（SKILL.md）加载与校验
- 参考文档（references/*.md）按需、安全地解析
- 注册表 / 清单 / 参考文档的一致性检查
"""

from pathlib import Path
from typing import Optional

from .version import __version__

from .core.config import Config
from .core.exceptions import (
    SkillDocsException,
    MissingManifest,
    SkillNotFound,
    InvalidSkillName,
    MalformedManifest,
    ReferenceNotFound,
    PathEscape,
    UndeclaredReference,
    ContextBudgetExceeded,
    ConsistencyError,
)
from .skills import (
    SkillManifest,
    SkillRegistryEntry,
    ReferenceDocument,
    SkillRegistry,
    ManifestLoader,
    ReferenceResolver,
    ConsistencyChecker,
    ConsistencyPolicy,
    ConsistencyReport,
    Severity,
    ViolationKind,
    Matcher,
    KeywordMatcher,
)
from .session import SkillSession


def _skills_dir(skills_dir) -> Path:
    return Path(skills_dir if skills_dir is not None else Config().skills_dir)


def load_manifest(name: str, skills_dir: Optional[Path] = None) -> SkillManifest:
    """加载 skills/<name>/SKILL.md"""
    return ManifestLoader(_skills_dir(skills_dir)).load_manifest(name)


def resolve_reference(name: str, path: str, skills_dir: Optional[Path] = None) -> ReferenceDocument:
    """加载技能清单中提到的参考文档"""
    return ReferenceResolver(ManifestLoader(_skills_dir(skills_dir))).resolve_reference(name, path)


def check_consistency(skills_dir: Optional[Path] = None,
                      policy: Optional[ConsistencyPolicy] = None) -> ConsistencyReport:
    """检查注册表、清单与参考文档是否一致"""
    if policy is None:
        policy = Config().policy()
    return ConsistencyChecker(_skills_dir(skills_dir), policy=policy).check()


__all__ = [
    "__version__",
    # 接口
    "load_manifest", "resolve_reference", "check_consistency", "SkillSession",
    # 核心组件
    "Config", "SkillRegistry", "ManifestLoader", "ReferenceResolver",
    "ConsistencyChecker", "ConsistencyPolicy", "ConsistencyReport", "Severity", "ViolationKind",
    "Matcher", "KeywordMatcher",
    # 数据模型
    "SkillManifest", "SkillRegistryEntry", "ReferenceDocument",
    # 异常
    "SkillDocsException", "MissingManifest", "SkillNotFound", "InvalidSkillName",
    "MalformedManifest", "ReferenceNotFound", "PathEscape", "UndeclaredReference",
    "ContextBudgetExceeded", "ConsistencyError",
]
