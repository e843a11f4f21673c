"""
FindyMail Node Pack - email and contact discovery through the FindyMail API.

This pack provides:
- FindyMailNode: one node covering every FindyMail operation
- FindyMailApiCredential: API key credential (X-API-Key or Bearer)
- OPERATIONS: the operation table the node dispatches on

All nodes are SYNC-CELERY SAFE.
"""

from .credentials import FindyMailApiCredential
from .node import FindyMailNode
from .operations import OPERATIONS, FieldSpec, OperationSpec, build_request, get_operation
from .manifest import CREDENTIAL_TYPES, MANIFEST, NODE_CLASSES, register_nodes

__all__ = [
    "FindyMailNode",
    "FindyMailApiCredential",
    "OPERATIONS",
    "FieldSpec",
    "OperationSpec",
    "build_request",
    "get_operation",
    "CREDENTIAL_TYPES",
    "MANIFEST",
    "NODE_CLASSES",
    "register_nodes",
]
