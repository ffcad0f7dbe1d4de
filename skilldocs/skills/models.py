"""技能数据模型

三类实体都是只读快照：由人工编写、提交到仓库，消费时原样读取。
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

SKILL_NAME_PATTERN = re.compile(r"[a-z0-9-]+")

# 技能正文中形如 references/xxx.md 的引用
REFERENCE_MENTION_PATTERN = re.compile(r"(?<![\w./-])(references/[A-Za-z0-9_./-]+?\.md)\b")


def is_valid_skill_name(name: str) -> bool:
    """检查技能名称是否为 kebab-case 标识"""
    return isinstance(name, str) and bool(SKILL_NAME_PATTERN.fullmatch(name))


def find_reference_mentions(text: str) -> List[str]:
    """按出现顺序提取正文中提到的 references/*.md 路径（去重）"""
    seen = []
    for match in REFERENCE_MENTION_PATTERN.finditer(text):
        path = match.group(1)
        if path not in seen:
            seen.append(path)
    return seen


@dataclass(frozen=True)
class SkillRegistryEntry:
    """注册表（skills/README.md 表格）中的一行"""
    name: str
    description: str
    line: int = 0


@dataclass(frozen=True)
class SkillManifest:
    """技能清单（SKILL.md）"""
    name: str
    description: str
    body: str
    content: str
    path: Path
    dir: Path
    see_also: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def references(self) -> List[str]:
        """清单声明的参考文档：先 see_also，再正文提及，去重保序"""
        declared = list(self.see_also)
        for path in find_reference_mentions(self.body):
            if path not in declared:
                declared.append(path)
        return declared

    @property
    def references_dir(self) -> Path:
        return self.dir / "references"

    @property
    def reference_files(self) -> List[Path]:
        """references/ 目录下实际存在的文件"""
        if not self.references_dir.is_dir():
            return []
        return sorted(f for f in self.references_dir.rglob("*") if f.is_file())


@dataclass(frozen=True)
class ReferenceDocument:
    """按需加载的参考文档"""
    skill: str
    path: str
    content: str
    file: Path
