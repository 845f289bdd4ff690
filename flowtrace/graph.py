"""Static process graph built from BPMN 2.0 XML."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, Optional, Set

from pydantic import BaseModel, Field

from .errors import DiagramParseError

logger = logging.getLogger(__name__)

# Children of a process that are not flow elements.
_NON_FLOW_TAGS = {
    "laneSet",
    "documentation",
    "extensionElements",
    "dataObject",
    "dataObjectReference",
    "dataStoreReference",
    "textAnnotation",
    "association",
    "ioSpecification",
    "property",
}

_EXPRESSION_NAME = re.compile(r"^\$\{[^}]*\}$")


class GraphNode(BaseModel):
    id: str
    type: str
    name: str = ""


class GraphEdge(BaseModel):
    id: str
    source: Optional[str] = None
    target: Optional[str] = None
    name: str = ""


class ProcessGraph(BaseModel):
    """Node and edge ids of a process definition.

    Only the structure needed for trace reconciliation is kept: which ids
    exist and where each sequence flow leads.
    """

    nodes: Dict[str, GraphNode] = Field(default_factory=dict)
    edges: Dict[str, GraphEdge] = Field(default_factory=dict)

    @property
    def node_ids(self) -> Set[str]:
        return set(self.nodes)

    def has_element(self, element_id: str) -> bool:
        return element_id in self.nodes or element_id in self.edges

    def target_of(self, edge_id: str) -> Optional[str]:
        """Return the target node of ``edge_id`` or ``None`` if unknown."""
        edge = self.edges.get(edge_id)
        return edge.target if edge else None

    def name_of(self, element_id: str) -> str:
        element = self.nodes.get(element_id) or self.edges.get(element_id)
        return element.name if element else ""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _clean_name(raw: Optional[str]) -> str:
    name = (raw or "").strip()
    # Expression names render as raw template text; show nothing instead.
    if _EXPRESSION_NAME.match(name):
        return ""
    return name


def _flow_elements(container: ET.Element) -> Iterator[ET.Element]:
    for child in container:
        if _local(child.tag) in _NON_FLOW_TAGS or child.get("id") is None:
            continue
        yield child
        if _local(child.tag) in {"subProcess", "transaction", "adHocSubProcess"}:
            yield from _flow_elements(child)


def parse_bpmn(xml: str | bytes) -> ProcessGraph:
    """Build a :class:`ProcessGraph` from a BPMN document.

    Raises:
        DiagramParseError: If the document is not XML or has no process.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise DiagramParseError(f"Invalid BPMN XML: {exc}") from exc

    processes = [el for el in root.iter() if _local(el.tag) == "process"]
    if not processes:
        raise DiagramParseError("BPMN document contains no process element")

    graph = ProcessGraph()
    for process in processes:
        for element in _flow_elements(process):
            element_id = element.get("id")
            tag = _local(element.tag)
            name = _clean_name(element.get("name"))
            if tag == "sequenceFlow":
                graph.edges[element_id] = GraphEdge(
                    id=element_id,
                    source=element.get("sourceRef"),
                    target=element.get("targetRef"),
                    name=name,
                )
            else:
                graph.nodes[element_id] = GraphNode(id=element_id, type=tag, name=name)

    logger.debug(
        f"Parsed BPMN graph with {len(graph.nodes)} nodes and {len(graph.edges)} edges"
    )
    return graph
