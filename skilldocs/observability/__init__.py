"""可观测性模块

提供 TraceLogger 用于记录技能加载轨迹（JSONL 格式）。
"""

from .trace_logger import TraceLogger

__all__ = ["TraceLogger"]
