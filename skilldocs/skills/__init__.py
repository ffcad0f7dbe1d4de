"""Skills 渐进式披露协议

- Layer 1: 注册表（skills/README.md 表格，用于挑选候选技能）
- Layer 2: 技能清单（SKILL.md，命中后完整加载）
- Layer 3: 参考文档（references/*.md，仅在清单提到时按需加载）

使用示例：
    >>> from skilldocs.skills import SkillRegistry, ManifestLoader, ReferenceResolver
    >>> registry = SkillRegistry.from_readme(Path("skills"))
    >>> candidates = registry.rank("add health checks to a Spring service")
    >>> loader = ManifestLoader(Path("skills"))
    >>> manifest = loader.load_manifest(candidates[0])
"""

from .models import SkillManifest, SkillRegistryEntry, ReferenceDocument, is_valid_skill_name
from .loader import ManifestLoader, parse_manifest
from .matcher import Matcher, KeywordMatcher, ExactNameMatcher, TfidfMatcher
from .registry import SkillRegistry, parse_registry_table
from .references import ReferenceResolver, normalize_reference_path
from .consistency import (
    ConsistencyChecker,
    ConsistencyPolicy,
    ConsistencyReport,
    Severity,
    Violation,
    ViolationKind,
)

__all__ = [
    "SkillManifest",
    "SkillRegistryEntry",
    "ReferenceDocument",
    "is_valid_skill_name",
    "ManifestLoader",
    "parse_manifest",
    "Matcher",
    "KeywordMatcher",
    "ExactNameMatcher",
    "TfidfMatcher",
    "SkillRegistry",
    "parse_registry_table",
    "ReferenceResolver",
    "normalize_reference_path",
    "ConsistencyChecker",
    "ConsistencyPolicy",
    "ConsistencyReport",
    "Severity",
    "Violation",
    "ViolationKind",
]
