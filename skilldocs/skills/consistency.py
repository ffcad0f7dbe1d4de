"""一致性检查

CI / 构建期使用：确认注册表、技能清单与参考文档三者相互一致。
检查会汇总全部违规项，一次运行即可看到所有文档漂移。

违规严重度由 ConsistencyPolicy 决定，默认：
- ORPHAN_REFERENCE -> WARNING
- 其他 -> ERROR
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from ..core.exceptions import (
    ConsistencyError,
    MalformedManifest,
    MalformedRegistry,
    PathEscape,
    RegistryNotFound,
)
from .loader import ManifestLoader
from .models import is_valid_skill_name
from .references import is_within, normalize_reference_path
from .registry import REGISTRY_FILENAME, SkillRegistry

logger = logging.getLogger(__name__)


class Severity(Enum):
    """违规严重度"""
    ERROR = "error"
    WARNING = "warning"
    IGNORE = "ignore"


class ViolationKind(Enum):
    """违规类型"""
    MISSING_MANIFEST = "missing_manifest"        # 注册表有条目，磁盘无 SKILL.md
    UNREGISTERED_SKILL = "unregistered_skill"    # 磁盘有 SKILL.md，注册表无条目
    DUPLICATE_ENTRY = "duplicate_entry"          # 注册表重复条目
    MALFORMED_REGISTRY = "malformed_registry"    # README 缺失或无表格
    MALFORMED_MANIFEST = "malformed_manifest"    # front matter 无效
    REFERENCE_NOT_FOUND = "reference_not_found"  # 清单提到的参考文档不存在
    PATH_ESCAPE = "path_escape"                  # 清单提到的路径越界
    ORPHAN_REFERENCE = "orphan_reference"        # references/ 中无人引用的文件


REGISTRY_DRIFT_KINDS = (
    ViolationKind.MISSING_MANIFEST,
    ViolationKind.UNREGISTERED_SKILL,
    ViolationKind.DUPLICATE_ENTRY,
)


@dataclass(frozen=True)
class Violation:
    """单个违规项"""
    kind: ViolationKind
    severity: Severity
    message: str
    skill: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "skill": self.skill,
            "path": self.path,
            "message": self.message,
        }

    def __str__(self) -> str:
        subject = f"({self.skill})" if self.skill else ""
        return f"[{self.severity.value}] {self.kind.name}{subject}: {self.message}"


def _parse_severity(value: Union[str, Severity]) -> Severity:
    if isinstance(value, Severity):
        return value
    try:
        return Severity(str(value).strip().lower())
    except ValueError:
        allowed = " / ".join(s.value for s in Severity)
        raise ValueError(f"无效的严重度 {value!r}，可选值: {allowed}") from None


def _default_severities() -> Dict[ViolationKind, Severity]:
    severities = {kind: Severity.ERROR for kind in ViolationKind}
    severities[ViolationKind.ORPHAN_REFERENCE] = Severity.WARNING
    return severities


@dataclass
class ConsistencyPolicy:
    """违规类型 -> 严重度"""
    severities: Dict[ViolationKind, Severity] = field(default_factory=_default_severities)

    @classmethod
    def from_settings(
        cls,
        orphan: Union[str, Severity] = Severity.WARNING,
        registry_drift: Union[str, Severity] = Severity.ERROR,
    ) -> "ConsistencyPolicy":
        """由配置字符串构造策略（error / warning / ignore）"""
        policy = cls()
        policy.severities[ViolationKind.ORPHAN_REFERENCE] = _parse_severity(orphan)
        drift = _parse_severity(registry_drift)
        for kind in REGISTRY_DRIFT_KINDS:
            policy.severities[kind] = drift
        return policy

    @classmethod
    def strict(cls) -> "ConsistencyPolicy":
        """所有违规都视为错误"""
        return cls(severities={kind: Severity.ERROR for kind in ViolationKind})

    def severity_for(self, kind: ViolationKind) -> Severity:
        return self.severities.get(kind, Severity.ERROR)


class ConsistencyReport:
    """一致性检查结果"""

    def __init__(self, skills_dir: Path, violations: List[Violation]):
        self.skills_dir = Path(skills_dir)
        self.violations = list(violations)

    @property
    def errors(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        """没有错误（警告不影响结果）"""
        return not self.errors

    def by_kind(self, kind: ViolationKind) -> List[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def raise_for_errors(self) -> None:
        """存在错误时抛出 ConsistencyError（包含全部错误）"""
        if self.errors:
            raise ConsistencyError(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skills_dir": str(self.skills_dir),
            "ok": self.ok,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "violations": [v.to_dict() for v in self.violations],
        }

    def format(self) -> str:
        """人类可读的汇总"""
        if not self.violations:
            return f"✅ {self.skills_dir}: 注册表、技能清单与参考文档一致"
        status = "✅" if self.ok else "❌"
        lines = [
            f"{status} {self.skills_dir}: {len(self.errors)} 个错误, {len(self.warnings)} 个警告"
        ]
        lines.extend(f"  - {v}" for v in self.violations)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ConsistencyReport(errors={len(self.errors)}, warnings={len(self.warnings)})"


class ConsistencyChecker:
    """
    一致性检查器

    使用示例：
        >>> report = ConsistencyChecker(Path("skills")).check()
        >>> print(report.format())
        >>> report.raise_for_errors()
    """

    def __init__(
        self,
        skills_dir: Path,
        policy: Optional[ConsistencyPolicy] = None,
        registry_filename: str = REGISTRY_FILENAME,
    ):
        self.skills_dir = Path(skills_dir)
        self.policy = policy or ConsistencyPolicy()
        self.registry_filename = registry_filename
        self._violations: List[Violation] = []

    def check(self) -> ConsistencyReport:
        """执行完整检查"""
        self._violations = []
        loader = ManifestLoader(self.skills_dir)

        registry = self._load_registry()
        on_disk = loader.list_skills()

        if registry is not None:
            self._check_registry(registry, loader, on_disk)

        for name in on_disk:
            self._check_manifest(name, loader)

        report = ConsistencyReport(self.skills_dir, self._violations)
        if report.errors:
            logger.warning(
                f"一致性检查 {self.skills_dir}: {len(report.errors)} 个错误, {len(report.warnings)} 个警告"
            )
        else:
            logger.info(f"一致性检查 {self.skills_dir} 通过 ({len(report.warnings)} 个警告)")
        return report

    def _add(self, kind: ViolationKind, message: str, skill: Optional[str] = None, path=None):
        severity = self.policy.severity_for(kind)
        if severity == Severity.IGNORE:
            return
        self._violations.append(Violation(
            kind=kind,
            severity=severity,
            message=message,
            skill=skill,
            path=str(path) if path is not None else None,
        ))

    def _load_registry(self) -> Optional[SkillRegistry]:
        try:
            return SkillRegistry.from_readme(self.skills_dir, self.registry_filename)
        except (RegistryNotFound, MalformedRegistry) as e:
            self._add(ViolationKind.MALFORMED_REGISTRY, str(e), path=e.path)
            return None

    def _check_registry(self, registry: SkillRegistry, loader: ManifestLoader, on_disk: List[str]):
        for name in registry.duplicates():
            self._add(
                ViolationKind.DUPLICATE_ENTRY,
                f"注册表中 '{name}' 出现多次",
                skill=name,
                path=registry.source,
            )

        seen: Set[str] = set()
        for entry in registry:
            if entry.name in seen:
                continue
            seen.add(entry.name)
            if not loader.exists(entry.name):
                self._add(
                    ViolationKind.MISSING_MANIFEST,
                    f"注册表第 {entry.line} 行列出的技能缺少 {loader.manifest_path(entry.name)}",
                    skill=entry.name,
                    path=loader.manifest_path(entry.name),
                )

        for name in on_disk:
            if name not in seen:
                self._add(
                    ViolationKind.UNREGISTERED_SKILL,
                    f"技能目录存在但注册表 {registry.source} 中没有对应条目",
                    skill=name,
                    path=loader.manifest_path(name),
                )

    def _check_manifest(self, name: str, loader: ManifestLoader):
        if not is_valid_skill_name(name):
            self._add(
                ViolationKind.MALFORMED_MANIFEST,
                f"技能目录名 '{name}' 不符合 ^[a-z0-9-]+$",
                skill=name,
                path=loader.manifest_path(name),
            )
            return

        try:
            manifest = loader.load_manifest(name)
        except MalformedManifest as e:
            self._add(ViolationKind.MALFORMED_MANIFEST, e.reason, skill=name, path=e.path)
            return

        mentioned: Set[str] = set()
        for ref in manifest.references:
            try:
                normalized = normalize_reference_path(name, ref)
            except PathEscape as e:
                self._add(ViolationKind.PATH_ESCAPE, str(e), skill=name, path=ref)
                continue

            mentioned.add(normalized)
            file = manifest.dir / normalized
            if not is_within(file, manifest.references_dir):
                self._add(
                    ViolationKind.PATH_ESCAPE,
                    f"{normalized} 解析后位于技能目录之外",
                    skill=name,
                    path=normalized,
                )
            elif not file.is_file():
                self._add(
                    ViolationKind.REFERENCE_NOT_FOUND,
                    f"清单引用的 {normalized} 不存在",
                    skill=name,
                    path=normalized,
                )

        for file in manifest.reference_files:
            relative = file.relative_to(manifest.dir).as_posix()
            if relative not in mentioned:
                self._add(
                    ViolationKind.ORPHAN_REFERENCE,
                    f"{relative} 未被 SKILL.md 引用",
                    skill=name,
                    path=relative,
                )
