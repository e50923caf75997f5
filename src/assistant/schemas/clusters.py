"""
Annotation clustering schemas.

ClusterItem accepts both the assistant's field names (`tag`, `labels`) and the
comment store's names (`commentType`, `nodeLabels`). The caller's original item
dict is kept so responses echo items back exactly as they were sent.
"""

import copy
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator


class ClusterItem(BaseModel):
    """One free-text annotation to be grouped."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1)
    text: str = ""
    tag: str = Field(default="", validation_alias=AliasChoices("tag", "commentType"))
    labels: List[str] = Field(default_factory=list, validation_alias=AliasChoices("labels", "nodeLabels"))

    _source: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("tag", "text", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("labels", mode="before")
    @classmethod
    def wrap_single_label(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def projection(self) -> Dict[str, Any]:
        """The fields that identify an item for caching and prompting."""
        return {"id": self.id, "text": self.text, "tag": self.tag, "labels": list(self.labels)}

    def to_wire(self) -> Dict[str, Any]:
        if self._source:
            return copy.deepcopy(self._source)
        return self.projection()


class ClusterRequest(BaseModel):
    """Items to cluster plus an optional partition key (flow / session id)."""
    model_config = ConfigDict(populate_by_name=True)

    items: List[ClusterItem] = Field(..., alias="comments", min_length=1)
    partition_key: Optional[str] = Field(default=None, alias="flowId")

    @field_validator("partition_key", mode="before")
    @classmethod
    def coerce_partition_key(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @model_validator(mode="after")
    def validate_unique_item_ids(self):
        seen = set()
        duplicates = []
        for item in self.items:
            if item.id in seen:
                duplicates.append(item.id)
            seen.add(item.id)
        if duplicates:
            raise ValueError(f"duplicate comment ids: {', '.join(sorted(set(duplicates)))}")
        return self

    @classmethod
    def from_wire(cls, comments: List[Dict[str, Any]], flow_id: Any = None) -> "ClusterRequest":
        """Build a request keeping each item's original dict for the response."""
        request = cls.model_validate({"comments": comments, "flowId": flow_id})
        for item, raw in zip(request.items, comments):
            item._source = copy.deepcopy(raw)
        return request

    def item_ids(self) -> List[str]:
        return [item.id for item in self.items]


class Theme(BaseModel):
    """Named group of items."""

    name: str = Field(..., min_length=1)
    items: List[ClusterItem] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return {"name": self.name, "items": [item.to_wire() for item in self.items]}


class ClusterResult(BaseModel):
    """Partition of the request's items into themes."""

    themes: List[Theme] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return {"themes": [theme.to_wire() for theme in self.themes]}

    def item_ids(self) -> List[str]:
        return [item.id for theme in self.themes for item in theme.items]
