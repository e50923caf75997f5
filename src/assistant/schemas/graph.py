"""
Flowchart graph schemas.

Nodes and edges mirror the diagram editor's wire shape. Only the fields the
assistant reasons about are typed; everything else the editor attaches
(style, width, selected, handles...) is preserved as extra data and
round-trips unchanged.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _coerce_id(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Position(BaseModel):
    """Canvas coordinates of a node."""
    model_config = ConfigDict(extra="allow")

    x: Union[int, float]
    y: Union[int, float]


class Node(BaseModel):
    """Graph vertex. `data` is an opaque attribute bag owned by the editor."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    type: str = Field(default="customNode")
    position: Position
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)


class Edge(BaseModel):
    """Directed connection between two nodes."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    source: str
    target: str
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def derive_missing_id(cls, data: Any) -> Any:
        """Edges without an id get the editor's default `e{source}-{target}` id."""
        if isinstance(data, dict) and not data.get("id") and data.get("source") is not None:
            data = {**data, "id": f"e{data.get('source')}-{data.get('target')}"}
        return data

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _coerce_id(v)


class Graph(BaseModel):
    """Full flowchart: `{nodes, edges}`."""
    model_config = ConfigDict(extra="allow")

    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self):
        """Node ids and edge ids must each be unique within the graph."""
        seen_nodes = set()
        for node in self.nodes:
            if node.id in seen_nodes:
                raise ValueError(f"duplicate node id: {node.id}")
            seen_nodes.add(node.id)
        seen_edges = set()
        for edge in self.edges:
            if edge.id in seen_edges:
                raise ValueError(f"duplicate edge id: {edge.id}")
            seen_edges.add(edge.id)
        return self

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_wire(self) -> Dict[str, Any]:
        """Serialize back to the editor's JSON shape.

        Fields the caller never sent are left out, except node `type` and
        `data`, which the editor needs to render a node.
        """
        body = self.model_dump(mode="json", exclude_unset=True)
        body.setdefault("nodes", [])
        body.setdefault("edges", [])
        for wire_node, node in zip(body["nodes"], self.nodes):
            wire_node.setdefault("type", node.type)
            wire_node.setdefault("data", dict(node.data))
        return body


class MutationRequest(BaseModel):
    """Graph plus the free-text instruction describing the change."""
    model_config = ConfigDict(populate_by_name=True)

    graph: Graph = Field(..., alias="flowData")
    instruction: str = Field(..., alias="userInstruction", min_length=1)

    @field_validator("instruction")
    @classmethod
    def instruction_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("instruction must not be blank")
        return v.strip()


class MutationResult(BaseModel):
    """Replacement graph plus advisory warnings raised while validating it."""

    graph: Graph
    warnings: List[str] = Field(default_factory=list)
    model: Optional[str] = None
    stage: Optional[str] = None
