"""TokenCounter - 文档 Token 计数器

职责：
- 本地预估技能清单与参考文档的 Token 数（无需 API 调用）
- 按内容哈希缓存（同一文档不重复编码）
- 降级方案（tiktoken 不可用时使用字符估算）
"""

import hashlib
from typing import Dict

import tiktoken


class TokenCounter:
    """Token 计数器

    用法示例：
    ```python
    counter = TokenCounter(model="gpt-4")
    tokens = counter.count_document(manifest.content)
    ```
    """

    def __init__(self, model: str = "gpt-4"):
        """初始化 Token 计数器

        Args:
            model: 模型名称（用于选择 tiktoken 编码器）
        """
        self.model = model
        self._encoding = self._get_encoding()
        self._cache: Dict[str, int] = {}  # 内容哈希 -> Token 数

    def _get_encoding(self):
        """获取 tiktoken 编码器，失败时返回 None"""
        try:
            return tiktoken.encoding_for_model(self.model)
        except KeyError:
            # 未知模型，降级到通用编码器
            try:
                return tiktoken.get_encoding("cl100k_base")
            except Exception:
                return None
        except Exception:
            # 编码表无法获取（如离线环境）
            return None

    @property
    def exact(self) -> bool:
        """是否使用 tiktoken 精确计数"""
        return self._encoding is not None

    def count_document(self, content: str) -> int:
        """计算文档的 Token 数（带缓存）"""
        key = hashlib.sha256(content.encode("utf-8")).hexdigest()
        if key not in self._cache:
            self._cache[key] = self.count_text(content)
        return self._cache[key]

    def count_text(self, text: str) -> int:
        """计算文本的 Token 数（无缓存）"""
        if not text:
            return 0
        if self._encoding:
            try:
                return len(self._encoding.encode(text))
            except Exception:
                return max(1, len(text) // 4)
        # 粗略估算（1 token ≈ 4 字符）
        return max(1, len(text) // 4)

    def clear_cache(self):
        """清空缓存"""
        self._cache.clear()

    def get_cache_stats(self) -> Dict[str, int]:
        """获取缓存统计信息"""
        return {
            "cached_documents": len(self._cache),
            "total_cached_tokens": sum(self._cache.values()),
        }
