"""工具响应协议

技能工具返回给宿主 Agent 的结构化结果：状态、文本、数据和错误信息。
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ToolStatus(Enum):
    """工具执行状态"""
    SUCCESS = "success"
    PARTIAL = "partial"  # 结果可用但有折扣（如引用的参考文档缺失）
    ERROR = "error"


@dataclass
class ToolResponse:
    """工具响应

    - status: 执行状态
    - text: 注入上下文的文本
    - data: 结构化数据
    - error_info: {"code", "message"}（仅 status=error）
    - context: 调用参数等上下文
    """

    status: ToolStatus
    text: str
    data: Dict[str, Any] = field(default_factory=dict)
    error_info: Optional[Dict[str, str]] = None
    context: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status != ToolStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status.value,
            "text": self.text,
            "data": self.data,
        }
        if self.error_info:
            result["error"] = self.error_info
        if self.context:
            result["context"] = self.context
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2, default=str)

    @classmethod
    def success(cls, text: str, data: Optional[Dict[str, Any]] = None,
                context: Optional[Dict[str, Any]] = None) -> "ToolResponse":
        return cls(status=ToolStatus.SUCCESS, text=text, data=data or {}, context=context)

    @classmethod
    def partial(cls, text: str, data: Optional[Dict[str, Any]] = None,
                context: Optional[Dict[str, Any]] = None) -> "ToolResponse":
        return cls(status=ToolStatus.PARTIAL, text=text, data=data or {}, context=context)

    @classmethod
    def error(cls, code: str, message: str,
              context: Optional[Dict[str, Any]] = None) -> "ToolResponse":
        return cls(
            status=ToolStatus.ERROR,
            text=message,
            error_info={"code": code, "message": message},
            context=context,
        )
