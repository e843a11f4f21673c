"""
Node Items - Data structures flowing through workflows.

NodeItem is the fundamental data unit in workflows. Hosts may pass either
NodeItem instances or plain ``{"json": {...}}`` dicts as node input.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class NodeItem(BaseModel):
    """
    A single data item flowing through a workflow.

    Example:
        item = NodeItem(json_data={"name": "John Doe", "domain": "example.com"})
    """
    model_config = ConfigDict(extra="forbid")

    json_data: Dict[str, Any] = Field(default_factory=dict, description="JSON data")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeItem":
        """Create NodeItem from a simple dict."""
        return cls(json_data=data)
