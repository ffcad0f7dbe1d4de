"""技能匹配器

把任务意图与注册表中的描述进行匹配。匹配策略可插拔，
注册表查找逻辑只依赖 Matcher.rank() 这一稳定接口。
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Set

from .models import SkillRegistryEntry

_WORD_PATTERN = re.compile(r"[a-z0-9]+")
_PHRASE_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)+")

STOP_WORDS: Set[str] = {
    "a", "an", "and", "are", "as", "at", "be", "by", "can", "do", "for",
    "from", "how", "i", "in", "into", "is", "it", "me", "my", "need", "of",
    "on", "or", "our", "please", "should", "so", "that", "the", "this",
    "to", "use", "when", "with", "we", "what", "you", "your",
}


def tokenize(text: str) -> List[str]:
    """小写分词并去除停用词"""
    return [t for t in _WORD_PATTERN.findall(text.lower()) if t not in STOP_WORDS]


class Matcher(ABC):
    """匹配器基类"""

    @abstractmethod
    def rank(self, intent: str, entries: Sequence[SkillRegistryEntry]) -> List[str]:
        """按相关度排序技能名称

        Args:
            intent: 任务意图（任意长度的自然语言）
            entries: 注册表条目（有序）

        Returns:
            候选技能名称；空列表表示没有适用技能
        """
        pass


class KeywordMatcher(Matcher):
    """关键词匹配器

    评分规则：
    - 意图中的词命中技能名称：每个 name_weight 分
    - 命中描述：每个 1 分
    - 意图中出现完整的连字符技能名：额外 10 分

    分数相同按注册表顺序，结果确定可测。
    """

    DIRECT_HIT_BONUS = 10

    def __init__(self, min_score: int = 1, name_weight: int = 2):
        self.min_score = min_score
        self.name_weight = name_weight

    def score(self, intent: str, entry: SkillRegistryEntry) -> int:
        intent_tokens = set(tokenize(intent))
        name_tokens = set(tokenize(entry.name.replace("-", " ")))
        desc_tokens = set(tokenize(entry.description))

        score = self.name_weight * len(intent_tokens & name_tokens)
        score += len(intent_tokens & desc_tokens)

        if entry.name in _PHRASE_PATTERN.findall(intent.lower()):
            score += self.DIRECT_HIT_BONUS
        return score

    def rank(self, intent: str, entries: Sequence[SkillRegistryEntry]) -> List[str]:
        scored = []
        for position, entry in enumerate(entries):
            score = self.score(intent, entry)
            if score >= self.min_score:
                scored.append((-score, position, entry.name))
        scored.sort()
        return _unique(name for _, _, name in scored)


class ExactNameMatcher(Matcher):
    """仅当意图中逐字出现技能名时命中"""

    def rank(self, intent: str, entries: Sequence[SkillRegistryEntry]) -> List[str]:
        text = intent.lower()
        return _unique(
            e.name for e in entries
            if re.search(rf"(?<![a-z0-9-]){re.escape(e.name)}(?![a-z0-9-])", text)
        )


class TfidfMatcher(Matcher):
    """TF-IDF 余弦相似度匹配器（需要 scikit-learn）"""

    def __init__(self, min_similarity: float = 0.05):
        self.min_similarity = min_similarity
        self._init_vectorizer()

    def _init_vectorizer(self):
        try:
            from sklearn.feature_extraction.text import TfidfVectorizer
            from sklearn.metrics.pairwise import cosine_similarity
        except ImportError:
            raise ImportError("请安装 scikit-learn: pip install 'skilldocs[tfidf]'")
        self._vectorizer_cls = TfidfVectorizer
        self._cosine_similarity = cosine_similarity

    def rank(self, intent: str, entries: Sequence[SkillRegistryEntry]) -> List[str]:
        if not entries or not tokenize(intent):
            return []

        documents = [f"{e.name.replace('-', ' ')} {e.description}" for e in entries]
        vectorizer = self._vectorizer_cls(stop_words="english", ngram_range=(1, 2))
        try:
            matrix = vectorizer.fit_transform(documents)
        except ValueError:
            # 词表为空（描述全是停用词）
            return []

        query = vectorizer.transform([intent])
        similarities = self._cosine_similarity(query, matrix)[0]

        scored = [
            (-float(sim), position, entries[position].name)
            for position, sim in enumerate(similarities)
            if sim >= self.min_similarity
        ]
        scored.sort()
        return _unique(name for _, _, name in scored)


def _unique(names) -> List[str]:
    seen: Dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)
