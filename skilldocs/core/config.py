"""配置管理"""

import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


def _env_int(key: str) -> Optional[int]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"环境变量 {key} 必须是整数，当前值: {value!r}") from None


@dataclass
class Config:
    """skilldocs 配置类"""

    # 语料位置
    skills_dir: str = field(default_factory=lambda: os.getenv("SKILLDOCS_SKILLS_DIR", "skills"))
    registry_filename: str = "README.md"

    # 参考文档加载策略
    strict_references: bool = True

    # 一致性检查策略（error / warning / ignore）
    orphan_severity: str = field(
        default_factory=lambda: os.getenv("SKILLDOCS_ORPHAN_SEVERITY", "warning")
    )
    registry_drift_severity: str = field(
        default_factory=lambda: os.getenv("SKILLDOCS_REGISTRY_DRIFT_SEVERITY", "error")
    )

    # 上下文预算
    max_context_tokens: Optional[int] = field(
        default_factory=lambda: _env_int("SKILLDOCS_MAX_CONTEXT_TOKENS")
    )
    token_model: str = "gpt-4"

    # 可观测性
    trace_enabled: bool = False
    trace_dir: str = "memory/traces"
    log_level: str = "INFO"

    # 自定义配置
    custom_config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "Config":
        """从环境变量创建配置"""
        return cls()

    def get(self, key: str, default: Any = None) -> Any:
        """获取配置值"""
        return getattr(self, key, self.custom_config.get(key, default))

    def set(self, key: str, value: Any) -> None:
        """设置配置值"""
        if hasattr(self, key):
            setattr(self, key, value)
        else:
            self.custom_config[key] = value

    def policy(self):
        """根据配置构造一致性检查策略"""
        from ..skills.consistency import ConsistencyPolicy

        return ConsistencyPolicy.from_settings(
            orphan=self.orphan_severity,
            registry_drift=self.registry_drift_severity,
        )
