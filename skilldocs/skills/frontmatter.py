"""SKILL.md front matter 解析"""

import re
from typing import Any, Dict, Optional, Tuple

import yaml

# 匹配 --- 分隔符之间的内容（正文可以为空）
FRONTMATTER_PATTERN = re.compile(r"^\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?$", re.DOTALL)


class FrontMatterError(ValueError):
    """front matter 不存在或无法解析"""
    pass


def split_frontmatter(content: str) -> Tuple[str, str]:
    """拆分 front matter 与正文

    Returns:
        (yaml 文本, markdown 正文)

    Raises:
        FrontMatterError: 文件开头没有 --- 元数据块
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        raise FrontMatterError("缺少开头的 --- front matter 元数据块")
    yaml_str, body = match.groups()
    return yaml_str, body or ""


def parse_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """解析 front matter 为字典

    Raises:
        FrontMatterError: 缺少元数据块、YAML 无效或不是映射
    """
    yaml_str, body = split_frontmatter(content)

    try:
        metadata = yaml.safe_load(yaml_str) or {}
    except yaml.YAMLError as e:
        raise FrontMatterError(f"front matter 不是有效的 YAML: {e}") from e

    if not isinstance(metadata, dict):
        raise FrontMatterError("front matter 必须是键值映射")

    return metadata, body


def read_field(metadata: Dict[str, Any], key: str) -> Optional[str]:
    """读取字符串字段，空白视为缺失"""
    value = metadata.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
