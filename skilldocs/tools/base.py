"""工具基类"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List

from .response import ToolResponse


@dataclass
class ToolParameter:
    """工具参数定义"""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None


class Tool(ABC):
    """工具基类"""

    def __init__(self, name: str, description: str):
        """
        初始化工具

        Args:
            name: 工具名称
            description: 工具描述
        """
        self.name = name
        self.description = description

    @abstractmethod
    def get_parameters(self) -> List[ToolParameter]:
        """参数定义"""
        pass

    @abstractmethod
    def run(self, parameters: Dict[str, Any]) -> ToolResponse:
        """
        执行工具

        Returns:
            ToolResponse
        """
        pass

    def to_schema(self) -> Dict[str, Any]:
        """转换为 function calling 的 JSON schema"""
        properties = {}
        required = []
        for param in self.get_parameters():
            properties[param.name] = {"type": param.type, "description": param.description}
            if param.default is not None:
                properties[param.name]["default"] = param.default
            if param.required:
                required.append(param.name)
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {"type": "object", "properties": properties, "required": required},
        }

    def __str__(self) -> str:
        return f"Tool(name={self.name})"

    def __repr__(self) -> str:
        return self.__str__()
