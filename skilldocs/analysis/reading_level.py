"""文档阅读难度分析

为技能清单与参考文档估算阅读时间、复杂度和阅读等级，
并生成可以贴在文档开头的 "Reading Guide" 信息框。
"""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

# 阅读速度（词/分钟）
READING_SPEEDS = {
    "text": 250,
    "code": 100,
    "json": 180,
    "lists": 300,
    "headers": 400,
}

STRUCTURED_LANGUAGES = ("json", "yaml", "yml")
SIMPLE_CODE_LANGUAGES = ("json", "yaml", "yml", "http")

TECHNICAL_TERMS = (
    "oauth", "jwt", "cors", "hateoas", "crud", "rest", "api", "http", "json",
    "microservice", "endpoint", "middleware", "authentication", "authorization",
    "pagination", "idempotent", "webhook", "async", "reactive", "streaming",
    "schema", "openapi", "rfc", "ssl", "tls", "cdn", "load balancer",
    "circuit breaker", "retry", "backoff", "timeout", "cache", "redis",
    "database", "transaction", "acid", "nosql", "sql", "index", "query",
)

ADVANCED_TERMS = ("hateoas", "oauth", "jwt", "circuit breaker", "reactive")

TOPIC_MAPPING = {
    "oauth": "Authentication",
    "jwt": "Authentication",
    "cors": "Security",
    "hateoas": "REST",
    "pagination": "Data",
    "reactive": "Architecture",
    "streaming": "Architecture",
    "microservice": "Architecture",
    "openapi": "Documentation",
    "testing": "Quality",
    "monitoring": "Observability",
}

LEVELS = ("Beginner", "Intermediate", "Advanced")
LEVEL_EMOJI = {"Beginner": "🟢", "Intermediate": "🟡", "Advanced": "🔴"}

_WORD = re.compile(r"\b\w+\b")
_ALPHA_WORD = re.compile(r"\b[a-z]+\b")
_VOWEL_GROUP = re.compile(r"[aeiouy]+")
_LIST_ITEM = re.compile(r"^([-*+]|\d+\.)\s")


def count_words(text: str) -> int:
    return len(_WORD.findall(text))


def count_syllables(text: str) -> int:
    """简化的音节计数：元音组数，词尾 e 不计，每词至少 1"""
    total = 0
    for word in _ALPHA_WORD.findall(text.lower()):
        groups = _VOWEL_GROUP.findall(word)
        if word.endswith("e") and groups:
            groups.pop()
        total += max(1, len(groups))
    return total


@dataclass
class CodeBlock:
    language: str
    content: str

    @property
    def word_count(self) -> int:
        return count_words(self.content)


@dataclass
class ContentBreakdown:
    """markdown 按内容类型拆分"""
    text: List[str] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)
    lists: List[str] = field(default_factory=list)
    tables: List[str] = field(default_factory=list)


@dataclass
class ReadingTime:
    total_minutes: int
    text_minutes: int
    code_minutes: int
    other_minutes: int


@dataclass
class Complexity:
    total_words: int
    sentences: int
    avg_words_per_sentence: float
    technical_density: float
    technical_terms: List[str]
    flesch_score: float
    grade_level: float
    code_blocks: int
    has_complex_code: bool


@dataclass
class ReadingAnalysis:
    filename: str
    reading_time: ReadingTime
    complexity: Complexity
    level: str
    reasoning: List[str]
    flesch_interpretation: str
    breakdown: ContentBreakdown = field(repr=False, default_factory=ContentBreakdown)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "reading_minutes": self.reading_time.total_minutes,
            "level": self.level,
            "reasoning": list(self.reasoning),
            "grade_level": self.complexity.grade_level,
            "flesch_score": self.complexity.flesch_score,
            "flesch_interpretation": self.flesch_interpretation,
            "technical_density": self.complexity.technical_density,
            "total_words": self.complexity.total_words,
            "code_blocks": self.complexity.code_blocks,
        }


class ReadingLevelAnalyzer:
    """
    阅读难度分析器

    使用示例：
        >>> analyzer = ReadingLevelAnalyzer()
        >>> analysis = analyzer.analyze(manifest.body, filename="SKILL.md")
        >>> print(analyzer.info_box(analysis))
    """

    def analyze(self, text: str, filename: str = "") -> ReadingAnalysis:
        breakdown = self.parse_content(text)
        reading_time = self.reading_time(breakdown)
        complexity = self.complexity(breakdown)
        level, reasoning = self.reading_level(complexity)
        return ReadingAnalysis(
            filename=filename,
            reading_time=reading_time,
            complexity=complexity,
            level=level,
            reasoning=reasoning,
            flesch_interpretation=self.interpret_flesch(complexity.flesch_score),
            breakdown=breakdown,
        )

    def analyze_file(self, path: Path) -> ReadingAnalysis:
        path = Path(path)
        return self.analyze(path.read_text(encoding="utf-8"), filename=path.name)

    def analyze_directory(self, path: Path) -> List[ReadingAnalysis]:
        """递归分析目录下的所有 .md 文件（跳过隐藏文件；读不了的文件记日志后跳过）"""
        results = []
        for file in sorted(Path(path).rglob("*.md")):
            if file.name.startswith(".") or not file.is_file():
                continue
            try:
                results.append(self.analyze_file(file))
            except (UnicodeDecodeError, OSError) as e:
                logger.warning(f"分析 {file} 失败: {e}")
        return results

    def parse_content(self, text: str) -> ContentBreakdown:
        """按行拆分为正文、代码块、标题、列表、表格"""
        breakdown = ContentBreakdown()
        current = None

        for line in text.splitlines():
            stripped = line.strip()

            if stripped.startswith("```"):
                if current is not None:
                    breakdown.code_blocks.append(current)
                    current = None
                else:
                    current = CodeBlock(language=stripped[3:].strip().lower(), content="")
                continue

            if current is not None:
                current.content += line + "\n"
                continue

            if stripped.startswith("#"):
                breakdown.headers.append(stripped)
            elif _LIST_ITEM.match(stripped):
                breakdown.lists.append(stripped)
            elif "|" in line:
                breakdown.tables.append(stripped)
            elif stripped:
                breakdown.text.append(stripped)

        # 未闭合的代码块仍计入
        if current is not None:
            breakdown.code_blocks.append(current)
        return breakdown

    def reading_time(self, breakdown: ContentBreakdown) -> ReadingTime:
        text_words = count_words(" ".join(breakdown.text))
        list_words = count_words(" ".join(breakdown.lists))
        header_words = count_words(" ".join(breakdown.headers))
        table_words = count_words(" ".join(breakdown.tables))
        code_words = sum(b.word_count for b in breakdown.code_blocks)

        minutes = text_words / READING_SPEEDS["text"]
        for block in breakdown.code_blocks:
            speed = READING_SPEEDS["json"] if block.language in STRUCTURED_LANGUAGES else READING_SPEEDS["code"]
            minutes += block.word_count / speed
        minutes += list_words / READING_SPEEDS["lists"]
        minutes += header_words / READING_SPEEDS["headers"]
        minutes += table_words / ((READING_SPEEDS["text"] + READING_SPEEDS["lists"]) / 2)

        return ReadingTime(
            total_minutes=math.ceil(minutes),
            text_minutes=math.ceil(text_words / READING_SPEEDS["text"]),
            code_minutes=math.ceil(code_words / READING_SPEEDS["code"]),
            other_minutes=math.ceil((list_words + header_words + table_words) / READING_SPEEDS["lists"]),
        )

    def complexity(self, breakdown: ContentBreakdown) -> Complexity:
        all_text = " ".join(breakdown.text + breakdown.lists + breakdown.headers).lower()
        total_words = count_words(all_text)
        sentences = len([s for s in re.split(r"[.!?]+", all_text) if s.strip()])

        terms = [t for t in TECHNICAL_TERMS if t in all_text]
        density = len(terms) / total_words * 100 if total_words else 0.0
        avg_words = total_words / sentences if sentences else 0.0

        if total_words and sentences:
            syllables_per_word = count_syllables(all_text) / total_words
            flesch = 206.835 - 1.015 * avg_words - 84.6 * syllables_per_word
            grade = 0.39 * avg_words + 11.8 * syllables_per_word - 15.59
        else:
            flesch, grade = 100.0, 0.0

        return Complexity(
            total_words=total_words,
            sentences=sentences,
            avg_words_per_sentence=round(avg_words, 1),
            technical_density=round(density, 1),
            technical_terms=terms,
            flesch_score=round(flesch, 1),
            grade_level=round(grade, 1),
            code_blocks=len(breakdown.code_blocks),
            has_complex_code=any(
                b.language not in SIMPLE_CODE_LANGUAGES for b in breakdown.code_blocks
            ),
        )

    def reading_level(self, complexity: Complexity):
        """判定阅读等级，返回 (等级, 理由列表)"""
        reasoning = []
        if complexity.grade_level <= 12:
            level = "Beginner"
            reasoning.append("accessible language")
        elif complexity.grade_level <= 16:
            level = "Intermediate"
            reasoning.append("moderate complexity")
        else:
            level = "Advanced"
            reasoning.append("complex language")

        if complexity.technical_density > 20:
            level = self.escalate(level)
            reasoning.append("high technical density")
        elif complexity.technical_density < 10:
            reasoning.append("low technical density")

        if complexity.has_complex_code:
            level = self.escalate(level)
            reasoning.append("complex code examples")

        if complexity.avg_words_per_sentence > 20:
            level = self.escalate(level)
            reasoning.append("long sentences")

        return level, reasoning

    @staticmethod
    def escalate(level: str) -> str:
        index = LEVELS.index(level)
        return LEVELS[min(index + 1, len(LEVELS) - 1)]

    @staticmethod
    def interpret_flesch(score: float) -> str:
        if score >= 70:
            return "Very Easy"
        if score >= 60:
            return "Easy"
        if score >= 50:
            return "Fairly Easy"
        if score >= 30:
            return "Fairly Difficult"
        if score >= 10:
            return "Difficult"
        return "Very Difficult"

    def suggest_prerequisites(self, analysis: ReadingAnalysis) -> str:
        if analysis.level == "Beginner":
            return "Basic HTTP knowledge"
        if analysis.level == "Intermediate":
            if any(t in ADVANCED_TERMS for t in analysis.complexity.technical_terms):
                return "HTTP fundamentals, basic API experience"
            return "Basic REST API knowledge"
        return "Strong API background, experience with complex systems"

    @staticmethod
    def key_topics(terms: Sequence[str]) -> str:
        topics = []
        for term in terms:
            topic = TOPIC_MAPPING.get(term)
            if topic and topic not in topics:
                topics.append(topic)
        return ", ".join(topics[:3]) if topics else "API Design"

    def suggest_improvements(self, analysis: ReadingAnalysis) -> List[str]:
        c = analysis.complexity
        suggestions = []
        if c.grade_level > 16:
            suggestions.append("Consider breaking long sentences into shorter ones")
        if c.avg_words_per_sentence > 20:
            suggestions.append("Average sentence length is high - consider shorter sentences")
        if c.technical_density > 25:
            suggestions.append("High technical density - consider adding explanations for technical terms")
        if c.flesch_score < 30:
            suggestions.append("Text is difficult to read - consider simplifying language")
        if analysis.level == "Advanced" and c.code_blocks > 10:
            suggestions.append("Many code examples - consider consolidating or moving to appendix")
        return suggestions

    def info_box(self, analysis: ReadingAnalysis) -> str:
        """生成 markdown 引用块形式的阅读指引"""
        minutes = analysis.reading_time.total_minutes
        time_text = "1 minute" if minutes == 1 else f"{minutes} minutes"
        c = analysis.complexity
        return "\n".join([
            "> **📖 Reading Guide**",
            "> ",
            f"> **⏱️ Reading Time:** {time_text} | **{LEVEL_EMOJI[analysis.level]} Level:** {analysis.level}",
            "> ",
            f"> **📋 Prerequisites:** {self.suggest_prerequisites(analysis)}  ",
            f"> **🎯 Key Topics:** {self.key_topics(c.technical_terms)}",
            "> ",
            f"> **📊 Complexity:** {c.grade_level:.1f} grade level • "
            f"{c.technical_density:.1f}% technical density • {analysis.flesch_interpretation.lower()}",
        ])

    def summarize(self, analyses: Sequence[ReadingAnalysis]) -> Dict[str, Any]:
        """多个文档的汇总报告"""
        total = len(analyses)
        if not total:
            return {"total_documents": 0, "distribution_by_level": {}, "averages": {},
                    "most_complex": [], "longest_reads": []}

        distribution: Dict[str, int] = {}
        for a in analyses:
            distribution[a.level] = distribution.get(a.level, 0) + 1

        most_complex = sorted(analyses, key=lambda a: a.complexity.grade_level, reverse=True)[:5]
        longest = sorted(analyses, key=lambda a: a.reading_time.total_minutes, reverse=True)[:5]

        return {
            "total_documents": total,
            "distribution_by_level": distribution,
            "averages": {
                "reading_time": round(sum(a.reading_time.total_minutes for a in analyses) / total, 1),
                "grade_level": round(sum(a.complexity.grade_level for a in analyses) / total, 1),
                "technical_density": round(sum(a.complexity.technical_density for a in analyses) / total, 1),
            },
            "most_complex": [
                {"file": a.filename, "grade_level": a.complexity.grade_level, "level": a.level}
                for a in most_complex
            ],
            "longest_reads": [
                {"file": a.filename, "minutes": a.reading_time.total_minutes, "level": a.level}
                for a in longest
            ],
        }
