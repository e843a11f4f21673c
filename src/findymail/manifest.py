"""
FindyMail Node Pack Manifest - Registration function for entry-points.
"""

from node_sdk import NodePackManifest

from .credentials import FindyMailApiCredential
from .node import FindyMailNode


MANIFEST = NodePackManifest(
    name="findymail",
    version="1.0.0",
    description="FindyMail email, phone, employee and company lookups",
    author="findymail-nodes",
    license="MIT",
    nodes=[FindyMailNode.type],
    credentials=[FindyMailApiCredential.name],
    entry_point="findymail",
)


# Node classes by type
NODE_CLASSES = {
    FindyMailNode.type: FindyMailNode,
}

# Credential classes by credential type name
CREDENTIAL_TYPES = {
    FindyMailApiCredential.name: FindyMailApiCredential,
}


def register_nodes():
    """
    Entry point function for node pack discovery.

    Returns tuple of (manifest, node_classes).
    """
    return MANIFEST, NODE_CLASSES


__all__ = [
    "MANIFEST",
    "NODE_CLASSES",
    "CREDENTIAL_TYPES",
    "register_nodes",
]
