"""flowtrace: execution trace reconciliation and diagram highlighting for BPMN engines."""

from .cache import DefinitionCache
from .config import FlowtraceConfig, load_config
from .contracts import (
    ActivityRecord,
    ActivityType,
    AnnotationPlan,
    EdgeState,
    NodeState,
    OrderedTrace,
    TaskHistoryRecord,
    TaskStatus,
)
from .errors import (
    DiagramParseError,
    FlowtraceError,
    MalformedHistoryError,
    SourceError,
    UnresolvedReferenceWarning,
)
from .graph import ProcessGraph, parse_bpmn
from .render import DiagramSurface, InMemorySurface, apply_plan
from .session import DiagramSession
from .sources import get_history_source
from .trace import TraceAnalysis

__version__ = "0.1.0"
__all__ = [
    "ActivityRecord",
    "ActivityType",
    "AnnotationPlan",
    "DefinitionCache",
    "DiagramParseError",
    "DiagramSession",
    "DiagramSurface",
    "EdgeState",
    "FlowtraceConfig",
    "FlowtraceError",
    "InMemorySurface",
    "MalformedHistoryError",
    "NodeState",
    "OrderedTrace",
    "ProcessGraph",
    "SourceError",
    "TaskHistoryRecord",
    "TaskStatus",
    "TraceAnalysis",
    "UnresolvedReferenceWarning",
    "apply_plan",
    "get_history_source",
    "load_config",
    "parse_bpmn",
]
