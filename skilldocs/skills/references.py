"""参考文档解析器

渐进式披露的第三层：只有当技能清单明确提到某个 references/*.md 时才读取它，
从而限制每个任务拉入的上下文量。
"""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Dict, List, Tuple

from ..core.exceptions import PathEscape, ReferenceNotFound, UndeclaredReference
from .loader import ManifestLoader
from .models import ReferenceDocument

logger = logging.getLogger(__name__)

REFERENCES_DIRNAME = "references"

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


def normalize_reference_path(name: str, path: str) -> str:
    """规范化参考路径为 references/<...> 的 POSIX 形式

    Raises:
        PathEscape: 绝对路径、包含 .. 段，或不在 references/ 下
    """
    raw = str(path).strip().replace("\\", "/")
    if not raw:
        raise PathEscape(name, str(path), "路径为空")
    if raw.startswith("/") or _DRIVE_PATTERN.match(raw):
        raise PathEscape(name, str(path), "不允许绝对路径")

    parts = [p for p in raw.split("/") if p not in ("", ".")]
    if ".." in parts:
        raise PathEscape(name, str(path), "不允许 .. 路径段")
    if len(parts) < 2 or parts[0] != REFERENCES_DIRNAME:
        raise PathEscape(name, str(path), "参考文档必须位于 references/ 目录下")

    return str(PurePosixPath(*parts))


def is_within(path: Path, root: Path) -> bool:
    """解析符号链接后 path 是否仍在 root 内"""
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


class ReferenceResolver:
    """
    参考文档解析器

    检查顺序：
    1. 路径规范化（越界 -> PathEscape）
    2. 加载所属技能清单（不存在 -> SkillNotFound）
    3. 符号链接越界 -> PathEscape
    4. 文件不存在 -> ReferenceNotFound
    5. strict 模式下清单未声明 -> UndeclaredReference

    使用示例：
        >>> resolver = ReferenceResolver(ManifestLoader(Path("skills")))
        >>> doc = resolver.resolve_reference("api-observability", "references/java-spring.md")
    """

    def __init__(self, loader: ManifestLoader, strict: bool = True):
        self.loader = loader
        self.strict = strict
        self._cache: Dict[Tuple[str, str], ReferenceDocument] = {}

    def declared_references(self, name: str) -> List[str]:
        """技能清单声明的参考路径（规范化后，越界的声明被忽略）"""
        manifest = self.loader.load_manifest(name)
        declared = []
        for item in manifest.references:
            try:
                normalized = normalize_reference_path(name, item)
            except PathEscape:
                logger.warning(f"技能 {name} 声明了越界的参考路径: {item}")
                continue
            if normalized not in declared:
                declared.append(normalized)
        return declared

    def resolve_reference(self, name: str, path: str) -> ReferenceDocument:
        """按需加载参考文档

        Args:
            name: 所属技能名称
            path: 相对技能目录的路径，如 references/java-spring.md

        Returns:
            ReferenceDocument 对象
        """
        normalized = normalize_reference_path(name, path)
        key = (name, normalized)
        if key in self._cache:
            return self._cache[key]

        manifest = self.loader.load_manifest(name)
        file = manifest.dir / normalized

        if not is_within(file, manifest.references_dir):
            raise PathEscape(name, str(path), "解析后位于技能目录之外")
        if not file.is_file():
            raise ReferenceNotFound(name, normalized, file)

        if self.strict:
            declared = self.declared_references(name)
            if normalized not in declared:
                raise UndeclaredReference(name, normalized, declared)

        document = ReferenceDocument(
            skill=name,
            path=normalized,
            content=file.read_text(encoding="utf-8"),
            file=file,
        )
        self._cache[key] = document
        logger.debug(f"已加载参考文档 {name}/{normalized}")
        return document

    def clear(self):
        self._cache.clear()
