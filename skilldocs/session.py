"""SkillSession - 宿主 Agent 的最小接口

一次消费会话：
- 每个技能清单只加载一次
- 参考文档只在清单提到时按需加载
- 统计已拉入上下文的 Token，可选预算上限
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .context.token_counter import TokenCounter
from .core.config import Config
from .core.exceptions import ContextBudgetExceeded, SkillDocsException
from .observability.trace_logger import TraceLogger
from .skills.consistency import ConsistencyChecker, ConsistencyReport
from .skills.loader import ManifestLoader
from .skills.matcher import Matcher
from .skills.models import ReferenceDocument, SkillManifest
from .skills.references import ReferenceResolver, normalize_reference_path
from .skills.registry import SkillRegistry

logger = logging.getLogger(__name__)


class SkillSession:
    """
    技能会话

    使用示例：
        >>> session = SkillSession(skills_dir="skills")
        >>> for name in session.rank("add tracing to a Spring Boot service"):
        ...     manifest = session.load_manifest(name)
        >>> doc = session.resolve_reference("api-observability", "references/java-spring.md")
    """

    def __init__(
        self,
        skills_dir: Optional[Path] = None,
        config: Optional[Config] = None,
        matcher: Optional[Matcher] = None,
        trace_logger: Optional[TraceLogger] = None,
    ):
        self.config = config or Config()
        self.skills_dir = Path(skills_dir if skills_dir is not None else self.config.skills_dir)
        self.matcher = matcher

        self.loader = ManifestLoader(self.skills_dir)
        self.resolver = ReferenceResolver(self.loader, strict=self.config.strict_references)
        self.token_counter = TokenCounter(model=self.config.token_model)

        if trace_logger is None and self.config.trace_enabled:
            trace_logger = TraceLogger(output_dir=self.config.trace_dir)
        self.trace_logger = trace_logger

        self._registry: Optional[SkillRegistry] = None
        self.loaded_manifests: Dict[str, int] = {}
        self.loaded_references: Dict[Tuple[str, str], int] = {}

        self._trace("session_start", {
            "skills_dir": str(self.skills_dir),
            "max_context_tokens": self.config.max_context_tokens,
        })

    @property
    def registry(self) -> SkillRegistry:
        """注册表快照（首次访问时解析）"""
        if self._registry is None:
            self._registry = SkillRegistry.from_readme(self.skills_dir, self.config.registry_filename)
        return self._registry

    @property
    def context_tokens(self) -> int:
        """本会话已拉入上下文的 Token 总数"""
        return sum(self.loaded_manifests.values()) + sum(self.loaded_references.values())

    def rank(self, intent: str, limit: Optional[int] = None) -> List[str]:
        """按意图挑选候选技能"""
        names = self.registry.rank(intent, matcher=self.matcher, limit=limit)
        self._trace("skill_ranked", {"intent": intent, "candidates": names})
        return names

    def load_manifest(self, name: str) -> SkillManifest:
        """加载技能清单（会话内只计一次）"""
        try:
            return self._load_manifest(name)
        except SkillDocsException as e:
            self._trace_failure(e, skill=name)
            raise

    def resolve_reference(self, name: str, path: str) -> ReferenceDocument:
        """按需加载参考文档（先加载所属清单）"""
        try:
            key = (name, normalize_reference_path(name, path))
            self._load_manifest(name)
            document = self.resolver.resolve_reference(name, path)
            if key not in self.loaded_references:
                tokens = self._reserve(document.file, document.content)
                self.loaded_references[key] = tokens
                self._trace("reference_resolved", {
                    "skill": name, "path": document.path, "tokens": tokens,
                })
            return document
        except SkillDocsException as e:
            self._trace_failure(e, skill=name, path=path)
            raise

    def _load_manifest(self, name: str) -> SkillManifest:
        manifest = self.loader.load_manifest(name)
        if name not in self.loaded_manifests:
            tokens = self._reserve(manifest.path, manifest.content)
            self.loaded_manifests[name] = tokens
            self._trace("manifest_loaded", {
                "skill": name,
                "path": manifest.path,
                "tokens": tokens,
                "references": manifest.references,
            })
        return manifest

    def check_consistency(self) -> ConsistencyReport:
        """对会话所用的语料执行一致性检查"""
        checker = ConsistencyChecker(
            self.skills_dir,
            policy=self.config.policy(),
            registry_filename=self.config.registry_filename,
        )
        report = checker.check()
        self._trace("consistency_checked", {
            "ok": report.ok,
            "errors": len(report.errors),
            "warnings": len(report.warnings),
        })
        return report

    def close(self):
        self._trace("session_end", {
            "manifests": list(self.loaded_manifests),
            "references": [f"{skill}/{path}" for skill, path in self.loaded_references],
            "context_tokens": self.context_tokens,
        })
        if self.trace_logger:
            self.trace_logger.finalize()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _reserve(self, path, content: str) -> int:
        tokens = self.token_counter.count_document(content)
        budget = self.config.max_context_tokens
        if budget is not None and self.context_tokens + tokens > budget:
            raise ContextBudgetExceeded(path, tokens, self.context_tokens, budget)
        return tokens

    def _trace_failure(self, error: Exception, **payload):
        logger.debug(f"加载失败: {error}")
        payload.update({"error": type(error).__name__, "message": str(error)})
        self._trace("load_failed", payload)

    def _trace(self, event: str, payload: Dict):
        if self.trace_logger and not self.trace_logger.closed:
            self.trace_logger.log_event(event, payload)
