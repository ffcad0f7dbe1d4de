"""核心模块：配置、异常、日志"""

from .config import Config
from .exceptions import (
    SkillDocsException,
    RegistryException,
    RegistryNotFound,
    MalformedRegistry,
    MissingManifest,
    ManifestException,
    SkillNotFound,
    InvalidSkillName,
    MalformedManifest,
    ReferenceException,
    ReferenceNotFound,
    PathEscape,
    UndeclaredReference,
    ContextBudgetExceeded,
    ConsistencyError,
)
from .logging import setup_logging

__all__ = [
    "Config",
    "setup_logging",
    "SkillDocsException",
    "RegistryException",
    "RegistryNotFound",
    "MalformedRegistry",
    "MissingManifest",
    "ManifestException",
    "SkillNotFound",
    "InvalidSkillName",
    "MalformedManifest",
    "ReferenceException",
    "ReferenceNotFound",
    "PathEscape",
    "UndeclaredReference",
    "ContextBudgetExceeded",
    "ConsistencyError",
]
