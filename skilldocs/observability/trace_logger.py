"""TraceLogger - 技能加载轨迹记录器

JSONL 格式：每行一个事件，流式追加，支持 jq 分析。
记录一次消费会话中排序、加载了哪些技能与参考文档，以及占用的上下文 Token。
"""

import copy
import json
import logging
import re
import uuid
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class TraceLogger:
    """JSONL Trace Logger

    特性：
    - JSONL 流式写入（实时追加）
    - 自动脱敏（路径中的用户名）
    - 会话结束时汇总事件统计

    使用示例：
        trace = TraceLogger(output_dir="memory/traces")
        trace.log_event("manifest_loaded", {"skill": "rest-api-design", "tokens": 812})
        trace.finalize()
    """

    def __init__(self, output_dir: str = "memory/traces", sanitize: bool = True):
        """初始化 TraceLogger

        Args:
            output_dir: 输出目录
            sanitize: 是否脱敏敏感信息
        """
        self.output_dir = Path(output_dir)
        self.sanitize = sanitize

        self.session_id = self._generate_session_id()
        self._events: List[Dict] = []
        self._step = 0

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.jsonl_path = self.output_dir / f"trace-{self.session_id}.jsonl"
        self.jsonl_file = open(self.jsonl_path, "w", encoding="utf-8")
        self.closed = False

    def _generate_session_id(self) -> str:
        """生成会话 ID

        格式: s-YYYYMMDD-HHMMSS-xxxx
        """
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        return f"s-{timestamp}-{uuid.uuid4().hex[:4]}"

    @property
    def events(self) -> List[Dict]:
        return list(self._events)

    def log_event(self, event: str, payload: Dict[str, Any], step: Optional[int] = None):
        """记录事件

        Args:
            event: 事件类型（manifest_loaded, reference_resolved, ...）
            payload: 事件数据
            step: 步骤序号（默认自增）
        """
        if self.closed:
            raise ValueError(f"TraceLogger {self.session_id} 已关闭")

        if step is None:
            self._step += 1
            step = self._step

        event_obj = {
            "ts": datetime.now().isoformat(),
            "session_id": self.session_id,
            "step": step,
            "event": event,
            "payload": payload,
        }
        if self.sanitize:
            event_obj = self._sanitize_event(event_obj)

        self._events.append(event_obj)
        self.jsonl_file.write(json.dumps(event_obj, ensure_ascii=False, default=str) + "\n")
        self.jsonl_file.flush()

    def _sanitize_event(self, event: Dict) -> Dict:
        event = copy.deepcopy(event)
        event["payload"] = self._sanitize_value(event.get("payload", {}))
        return event

    def _sanitize_value(self, value: Any) -> Any:
        """递归脱敏：/Users/xxx/、/home/xxx/ -> ***"""
        if isinstance(value, Path):
            value = str(value)
        if isinstance(value, str):
            return re.sub(r"(/Users/|/home/|C:\\Users\\)[^/\\]+", r"\1***", value)
        if isinstance(value, dict):
            return {k: self._sanitize_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._sanitize_value(item) for item in value]
        return value

    def summary(self) -> Dict[str, Any]:
        """事件统计"""
        counts = Counter(e["event"] for e in self._events)
        return {
            "session_id": self.session_id,
            "total_events": len(self._events),
            "events": dict(counts),
        }

    def finalize(self):
        """关闭文件（可重复调用）"""
        if self.closed:
            return
        self.jsonl_file.close()
        self.closed = True
        logger.info(f"Trace 已保存: {self.jsonl_path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()
        return False
