"""文档阅读难度分析测试"""

from skilldocs.analysis import ReadingLevelAnalyzer
from skilldocs.analysis.reading_level import count_syllables, count_words

SIMPLE_DOC = """# Title

The cat sat on the mat. The dog ran.

- item one
"""

CODE_DOC = SIMPLE_DOC + """
```java
public class OrderController {}
```
"""


class TestReadingLevelAnalyzer:
    """测试 ReadingLevelAnalyzer"""

    def test_breakdown(self):
        breakdown = ReadingLevelAnalyzer().parse_content(CODE_DOC + "\n| a | b |\n")

        assert breakdown.headers == ["# Title"]
        assert breakdown.text == ["The cat sat on the mat. The dog ran."]
        assert breakdown.lists == ["- item one"]
        assert breakdown.tables == ["| a | b |"]
        assert [b.language for b in breakdown.code_blocks] == ["java"]
        assert "OrderController" in breakdown.code_blocks[0].content

    def test_simple_document(self):
        analysis = ReadingLevelAnalyzer().analyze(SIMPLE_DOC, filename="SKILL.md")

        assert analysis.filename == "SKILL.md"
        assert analysis.reading_time.total_minutes == 1
        assert analysis.complexity.total_words == 12
        assert analysis.complexity.sentences == 3
        assert analysis.complexity.technical_terms == []
        assert analysis.level == "Beginner"
        assert analysis.reasoning == ["accessible language", "low technical density"]
        assert analysis.flesch_interpretation == "Very Easy"

    def test_complex_code_escalates(self):
        analysis = ReadingLevelAnalyzer().analyze(CODE_DOC)

        assert analysis.complexity.has_complex_code
        assert analysis.level == "Intermediate"
        assert "complex code examples" in analysis.reasoning

    def test_yaml_is_not_complex_code(self):
        analysis = ReadingLevelAnalyzer().analyze(SIMPLE_DOC + "```yaml\nkey: value\n```\n")

        assert not analysis.complexity.has_complex_code
        assert analysis.level == "Beginner"

    def test_empty_document(self):
        analysis = ReadingLevelAnalyzer().analyze("")

        assert analysis.reading_time.total_minutes == 0
        assert analysis.complexity.total_words == 0
        assert analysis.level == "Beginner"

    def test_info_box(self):
        analyzer = ReadingLevelAnalyzer()
        analysis = analyzer.analyze("Use OAuth and JWT tokens for authentication.\n")

        box = analyzer.info_box(analysis)

        assert box.startswith("> **📖 Reading Guide**")
        assert "**⏱️ Reading Time:** 1 minute" in box
        assert "Authentication" in box

    def test_summarize(self):
        analyzer = ReadingLevelAnalyzer()
        analyses = [analyzer.analyze(SIMPLE_DOC, "a.md"), analyzer.analyze(CODE_DOC, "b.md")]

        summary = analyzer.summarize(analyses)

        assert summary["total_documents"] == 2
        assert summary["distribution_by_level"] == {"Beginner": 1, "Intermediate": 1}
        assert analyzer.summarize([])["total_documents"] == 0

    def test_analyze_directory(self, skills_dir):
        (skills_dir / ".draft.md").write_text("hidden", encoding="utf-8")
        (skills_dir / "rest-api-design" / "broken.md").write_bytes(b"caf\xe9\n")
        analyzer = ReadingLevelAnalyzer()

        analyses = analyzer.analyze_directory(skills_dir)

        assert sorted(a.filename for a in analyses) == [
            "README.md", "SKILL.md", "SKILL.md", "java-spring.md", "pagination.md",
        ]
        assert analyzer.summarize(analyses)["total_documents"] == 5

    def test_analyze_bundled_manifest(self, skills_dir):
        analysis = ReadingLevelAnalyzer().analyze_file(skills_dir / "rest-api-design" / "SKILL.md")

        assert analysis.filename == "SKILL.md"
        assert analysis.to_dict()["reading_minutes"] >= 1


def test_counting_helpers():
    assert count_words("Hello, world - again") == 3
    assert count_syllables("the item one title") == 5
