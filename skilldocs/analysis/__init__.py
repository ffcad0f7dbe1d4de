"""文档分析"""

from .reading_level import ReadingLevelAnalyzer, ReadingAnalysis

__all__ = ["ReadingLevelAnalyzer", "ReadingAnalysis"]
