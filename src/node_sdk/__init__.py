"""
Node SDK - Minimal Python node execution semantics.

This package provides the runtime for executing Python nodes:
- NodeItem: Data item flowing through workflows
- NodeExecutionContext: Runtime context for a node, including the
  authenticated HTTP transport
- BaseNode: Abstract base class for node implementations
- BaseCredential: Base class for credential types

All nodes execute synchronously (sync-Celery safe).
"""

from .items import NodeItem
from .basenode import (
    BaseNode,
    NodeExecutionContext,
    NodeExecutionData,
    NodeParameter,
    NodeCredential,
    NodeParameterType,
    RequestDescriptor,
    NodeOperationError,
    NodeValidationError,
    UnknownOperationError,
    NodeApiError,
)
from .credentials import BaseCredential
from .http import HttpClient, HttpResponse, HttpApiError, NodeTimeoutError
from .manifest import NodePackManifest

__all__ = [
    # Items
    "NodeItem",
    "NodeExecutionData",
    # Context
    "NodeExecutionContext",
    "RequestDescriptor",
    # Base classes
    "BaseNode",
    "BaseCredential",
    "NodeParameter",
    "NodeCredential",
    "NodeParameterType",
    "NodePackManifest",
    # Errors
    "NodeOperationError",
    "NodeValidationError",
    "UnknownOperationError",
    "NodeApiError",
    # HTTP
    "HttpClient",
    "HttpResponse",
    "HttpApiError",
    "NodeTimeoutError",
]
