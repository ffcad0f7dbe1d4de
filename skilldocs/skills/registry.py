"""技能注册表

把 skills/README.md 中的 markdown 表格解析为不可变快照，
显式传入消费方，而不是在任意调用点读取全局状态。
"""

import logging
import re
from collections import Counter
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from ..core.exceptions import MalformedRegistry, MissingManifest, RegistryNotFound
from .loader import MANIFEST_FILENAME
from .matcher import KeywordMatcher, Matcher
from .models import SkillRegistryEntry, is_valid_skill_name

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "README.md"

_SEPARATOR_CELL = re.compile(r"^:?-{3,}:?$")
_LINK_CELL = re.compile(r"^\[([^\]]+)\]\([^)]*\)$")
_NAME_HEADERS = ("skill", "name", "skill name", "id")
_DESCRIPTION_HEADERS = ("description", "summary", "when to use", "trigger")


def split_row(line: str) -> List[str]:
    """拆分 markdown 表格行，保留转义的 \\|"""
    text = line.strip()
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    cells = re.split(r"(?<!\\)\|", text)
    return [c.strip().replace("\\|", "|") for c in cells]


def clean_name_cell(cell: str) -> str:
    """提取名称单元格中显示的标识（去掉链接、反引号、粗体）"""
    text = cell.strip()
    link = _LINK_CELL.match(text)
    if link:
        text = link.group(1)
    return text.strip("`*_ ").strip()


def _is_separator(cells: Sequence[str]) -> bool:
    filled = [c.replace(" ", "") for c in cells if c.strip()]
    return bool(filled) and all(_SEPARATOR_CELL.match(c) for c in filled)


def _pick_columns(header: Sequence[str]) -> Optional[Tuple[int, int]]:
    lowered = [h.lower().strip("`*_ ") for h in header]
    name_col = next((i for i, h in enumerate(lowered) if h in _NAME_HEADERS), None)
    desc_col = next(
        (i for i, h in enumerate(lowered) if any(k in h for k in _DESCRIPTION_HEADERS)),
        None,
    )
    if name_col is None or desc_col is None:
        return None
    return name_col, desc_col


def parse_registry_table(text: str, source="README.md") -> Tuple[SkillRegistryEntry, ...]:
    """解析注册表 markdown

    选择第一个表头同时包含名称列和描述列的表格；
    若没有任何表头匹配，则退回到第一个表格的前两列。

    Raises:
        MalformedRegistry: 找不到表格
    """
    lines = text.splitlines()
    tables = []
    i = 0
    while i < len(lines) - 1:
        header = lines[i]
        if header.strip().startswith("|") and _is_separator(split_row(lines[i + 1])):
            rows = []
            j = i + 2
            while j < len(lines) and lines[j].strip().startswith("|"):
                rows.append((j + 1, split_row(lines[j])))
                j += 1
            tables.append((split_row(header), rows))
            i = j
        else:
            i += 1

    if not tables:
        raise MalformedRegistry(source, "未找到技能表格")

    chosen = None
    for header, rows in tables:
        columns = _pick_columns(header)
        if columns:
            chosen = (columns, rows)
            break
    if chosen is None:
        header, rows = tables[0]
        if len(header) < 2:
            raise MalformedRegistry(source, "技能表格至少需要名称与描述两列")
        chosen = ((0, 1), rows)

    (name_col, desc_col), rows = chosen
    entries = []
    for line_no, cells in rows:
        if len(cells) <= max(name_col, desc_col):
            logger.warning(f"{source}:{line_no} 列数不足，已跳过")
            continue
        name = clean_name_cell(cells[name_col])
        if not name:
            continue
        entries.append(SkillRegistryEntry(
            name=name,
            description=cells[desc_col].strip(),
            line=line_no,
        ))
    return tuple(entries)


class SkillRegistry:
    """
    技能注册表快照

    使用示例：
        >>> registry = SkillRegistry.from_readme(Path("skills"))
        >>> registry.rank("design a paginated REST endpoint")
        ['rest-api-design']
    """

    def __init__(self, entries: Sequence[SkillRegistryEntry], skills_dir: Path, source: Optional[Path] = None):
        self._entries: Tuple[SkillRegistryEntry, ...] = tuple(entries)
        self.skills_dir = Path(skills_dir)
        self.source = source

    @classmethod
    def from_readme(cls, skills_dir: Path, filename: str = REGISTRY_FILENAME) -> "SkillRegistry":
        """读取 skills/README.md 构造快照

        Raises:
            RegistryNotFound: README 不存在
            MalformedRegistry: README 中没有技能表格，或不是有效的 UTF-8 文本
        """
        skills_dir = Path(skills_dir)
        path = skills_dir / filename
        if not path.is_file():
            raise RegistryNotFound(path)

        try:
            content = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise MalformedRegistry(path, f"无法读取文件: {e}") from e

        entries = parse_registry_table(content, source=path)
        logger.debug(f"注册表 {path} 共 {len(entries)} 个技能")
        return cls(entries, skills_dir=skills_dir, source=path)

    @property
    def entries(self) -> Tuple[SkillRegistryEntry, ...]:
        return self._entries

    def names(self) -> List[str]:
        return [e.name for e in self._entries]

    def get(self, name: str) -> Optional[SkillRegistryEntry]:
        return next((e for e in self._entries if e.name == name), None)

    def duplicates(self) -> List[str]:
        """注册表中出现多次的技能名"""
        counts = Counter(self.names())
        return [name for name, count in counts.items() if count > 1]

    def has_manifest(self, name: str) -> bool:
        return is_valid_skill_name(name) and (self.skills_dir / name / MANIFEST_FILENAME).is_file()

    def rank(self, intent: str, matcher: Optional[Matcher] = None, limit: Optional[int] = None) -> List[str]:
        """按意图排序候选技能

        Args:
            intent: 任务意图
            matcher: 匹配器（默认 KeywordMatcher）
            limit: 最多返回多少个候选

        Returns:
            候选技能名称；空列表表示没有适用技能

        Raises:
            MissingManifest: 注册表中任一技能没有对应的 SKILL.md（不论是否匹配意图）
        """
        for entry in self._entries:
            if not self.has_manifest(entry.name):
                raise MissingManifest(entry.name, self.skills_dir / entry.name / MANIFEST_FILENAME)

        matcher = matcher or KeywordMatcher()
        names = matcher.rank(intent, self._entries)
        if limit is not None:
            names = names[:limit]
        return names

    def describe(self) -> str:
        """格式化所有技能描述（用于系统提示词）"""
        if not self._entries:
            return "（暂无可用技能）"
        return "\n".join(f"- {e.name}: {e.description}" for e in self._entries)

    def __iter__(self) -> Iterator[SkillRegistryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name) -> bool:
        return any(e.name == name for e in self._entries)

    def __repr__(self) -> str:
        return f"SkillRegistry(skills={self.names()})"
