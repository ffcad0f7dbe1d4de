"""技能清单加载器

渐进式披露的第二层：把技能名称解析为完整的 SKILL.md 内容。
- 每个加载器实例（即一次消费会话）对同一技能只读取一次
- 加载失败立即抛出，异常消息中包含缺失的路径
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.exceptions import InvalidSkillName, MalformedManifest, SkillNotFound
from .frontmatter import FrontMatterError, parse_frontmatter, read_field
from .models import SkillManifest, is_valid_skill_name

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "SKILL.md"


def parse_manifest(path: Path, expected_name: Optional[str] = None) -> SkillManifest:
    """解析单个 SKILL.md

    Args:
        path: SKILL.md 文件路径
        expected_name: 期望的技能名称（默认取所在目录名）

    Returns:
        SkillManifest 对象

    Raises:
        MalformedManifest: 文件无法按 UTF-8 读取，或 front matter 缺失、无效、与目录名不一致
    """
    path = Path(path)
    expected_name = expected_name or path.parent.name
    try:
        content = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise MalformedManifest(expected_name, path, f"无法读取文件: {e}") from e

    try:
        metadata, body = parse_frontmatter(content)
    except FrontMatterError as e:
        raise MalformedManifest(expected_name, path, str(e)) from e

    name = read_field(metadata, "name")
    description = read_field(metadata, "description")

    if name is None:
        raise MalformedManifest(expected_name, path, "front matter 缺少 name 字段")
    if description is None:
        raise MalformedManifest(expected_name, path, "front matter 缺少 description 字段")
    if name != expected_name:
        raise MalformedManifest(
            expected_name, path, f"name '{name}' 与目录名 '{expected_name}' 不一致"
        )

    return SkillManifest(
        name=name,
        description=description,
        body=body.strip(),
        content=content,
        path=path,
        dir=path.parent,
        see_also=_parse_see_also(metadata, expected_name, path),
    )


def _parse_see_also(metadata: Dict, name: str, path: Path) -> Tuple[str, ...]:
    raw = metadata.get("see_also")
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise MalformedManifest(name, path, "see_also 必须是字符串列表")

    result = []
    for item in raw:
        item = item.strip()
        if item and item not in result:
            result.append(item)
    return tuple(result)


class ManifestLoader:
    """
    技能清单加载器

    特性：
    - 名称校验（^[a-z0-9-]+$）
    - 按需读取，单实例内缓存
    - 失败快速抛出（SkillNotFound / MalformedManifest）

    使用示例：
        >>> loader = ManifestLoader(skills_dir=Path("skills"))
        >>> manifest = loader.load_manifest("rest-api-design")
        >>> print(manifest.body)
    """

    def __init__(self, skills_dir: Path):
        """初始化加载器

        Args:
            skills_dir: 技能目录路径（包含 README.md 与各技能子目录）
        """
        self.skills_dir = Path(skills_dir)

        # 已加载清单缓存
        self._cache: Dict[str, SkillManifest] = {}

    def manifest_path(self, name: str) -> Path:
        """技能清单的约定路径 skills/<name>/SKILL.md"""
        return self.skills_dir / name / MANIFEST_FILENAME

    def exists(self, name: str) -> bool:
        """检查技能清单是否存在（不校验内容）"""
        if not is_valid_skill_name(name):
            return False
        return self.manifest_path(name).is_file()

    def list_skills(self) -> List[str]:
        """列出磁盘上所有包含 SKILL.md 的技能目录"""
        if not self.skills_dir.is_dir():
            return []
        return sorted(
            d.name for d in self.skills_dir.iterdir()
            if d.is_dir() and (d / MANIFEST_FILENAME).is_file()
        )

    def load_manifest(self, name: str) -> SkillManifest:
        """
        加载完整技能清单

        Args:
            name: 技能名称

        Returns:
            SkillManifest 对象

        Raises:
            InvalidSkillName: 名称不合法
            SkillNotFound: SKILL.md 不存在
            MalformedManifest: front matter 无效
        """
        if name in self._cache:
            return self._cache[name]

        if not is_valid_skill_name(name):
            raise InvalidSkillName(name)

        path = self.manifest_path(name)
        if not path.is_file():
            logger.debug(f"技能清单不存在: {path}")
            raise SkillNotFound(name, path)

        manifest = parse_manifest(path, expected_name=name)
        self._cache[name] = manifest
        logger.debug(f"已加载技能清单 {name} ({len(manifest.content)} 字符)")

        return manifest

    def reload(self):
        """清空缓存（下次访问重新读取）"""
        self._cache.clear()
