"""
Node pack manifest - metadata a pack hands to the host's node registry.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class NodePackManifest(BaseModel):
    """
    Manifest for a node pack (collection of nodes).

    Used for discovery and registration of bundled nodes.
    """
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Pack name")
    version: str = Field("1.0.0", description="Pack version")
    description: str = Field("", description="Pack description")

    author: str = Field("", description="Author name")
    license: str = Field("MIT", description="License type")

    nodes: List[str] = Field(
        default_factory=list,
        description="List of node types in this pack"
    )
    credentials: List[str] = Field(
        default_factory=list,
        description="List of credential types in this pack"
    )

    entry_point: str = Field(
        "",
        description="Module path for node discovery (e.g., 'findymail')"
    )
