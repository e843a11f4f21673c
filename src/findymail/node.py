"""
FindyMail Node

Finds and verifies email addresses, phone numbers, employees and company
data through the FindyMail API. One request is sent per input item, in
input order, and one output item is produced per input item.

SYNC-CELERY SAFE: All methods are synchronous with timeouts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from node_sdk import (
    BaseNode,
    NodeCredential,
    NodeExecutionData,
    NodeOperationError,
    NodeParameter,
)
from node_sdk.observability import with_item_context

from .credentials import FindyMailApiCredential
from .operations import OPERATIONS, OperationSpec, build_request, get_operation


def _build_parameters(operations: Dict[str, OperationSpec]) -> List[Dict[str, Any]]:
    """
    UI parameters for every operation.

    A parameter shared by several operations is merged only where its
    requiredness and description agree; otherwise each variant gets its own
    property, shown for its own operations.
    """
    params: List[NodeParameter] = [
        NodeParameter(
            name="operation",
            display_name="Operation",
            type="options",
            no_data_expression=True,
            options=[
                {
                    "name": op.display_name,
                    "value": op.name,
                    "description": op.description,
                    "action": op.action,
                }
                for op in sorted(operations.values(), key=lambda op: op.display_name)
            ],
            default="findFromName",
        )
    ]
    variants: Dict[Tuple[str, bool, str], NodeParameter] = {}
    option_specs: Dict[str, Dict[str, Any]] = {}
    option_ops: List[str] = []

    for op in operations.values():
        for spec in op.fields:
            required = spec in op.required
            key = (spec.param, required, spec.description)
            if key in variants:
                variants[key].display_options["show"]["operation"].append(op.name)
                continue
            param = NodeParameter(
                name=spec.param,
                display_name=spec.display_name,
                type="string",
                default=[] if spec.kind == "list" else "",
                required=required,
                placeholder=spec.placeholder or None,
                description=spec.description or None,
                type_options={"multipleValues": True} if spec.kind == "list" else None,
                display_options={"show": {"operation": [op.name]}},
            )
            variants[key] = param
            params.append(param)

        if op.optional:
            option_ops.append(op.name)
            for spec in op.optional:
                option_specs.setdefault(spec.param, {
                    "displayName": spec.display_name,
                    "name": spec.param,
                    "type": "boolean" if spec.kind == "boolean" else "string",
                    "default": False if spec.kind == "boolean" else "",
                    "description": spec.description,
                    "displayOptions": {"show": {"/operation": []}},
                })["displayOptions"]["show"]["/operation"].append(op.name)

    params.append(
        NodeParameter(
            name="additionalOptions",
            display_name="Additional Options",
            type="collection",
            placeholder="Add Option",
            default={},
            display_options={"show": {"operation": option_ops}},
            options=list(option_specs.values()),
        )
    )
    return [p.to_property() for p in params]


class FindyMailNode(BaseNode):
    """
    FindyMail node.

    Operations are table driven (see ``findymail.operations``); the node
    itself only runs the per-item loop and decides what happens to a failed
    item.
    """

    type = "n8n-nodes-findymail.findyMail"
    version = 1

    credential_type = FindyMailApiCredential.name

    description = {
        "displayName": "FindyMail",
        "name": "findyMail",
        "icon": "file:findymail.svg",
        "group": ["input"],
        "version": 1,
        "description": "Find email addresses using FindyMail API",
        "defaults": {"name": "FindyMail"},
        "inputs": ["main"],
        "outputs": ["main"],
        "credentials": [
            NodeCredential(name=FindyMailApiCredential.name, required=True).model_dump(
                by_alias=True, exclude_none=True
            ),
        ],
        "properties": _build_parameters(OPERATIONS),
    }

    def execute(self) -> List[List[NodeExecutionData]]:
        """
        Run the selected operation for every input item.

        With continue_on_fail a failed item becomes ``{"error": message}`` and
        the loop goes on; otherwise the first failure aborts the whole run
        with the failing item's index attached.
        """
        items = self.get_input_data()
        return_items: List[NodeExecutionData] = []

        for i in range(len(items)):
            operation = None
            try:
                operation = self.get_node_parameter("operation", i)
                spec = get_operation(operation)
                request = build_request(spec, lambda name: self.get_node_parameter(name, i))
                response = self.request_with_authentication(self.credential_type, request)
                return_items.append({"json": response, "pairedItem": {"item": i}})

            except Exception as e:
                if self.continue_on_fail:
                    message = e.message if isinstance(e, NodeOperationError) else str(e)
                    self.logger.warning(
                        "Item failed, continuing: %s", message,
                        extra=with_item_context(self.type, operation, i),
                    )
                    return_items.append({"json": {"error": message}, "pairedItem": {"item": i}})
                    continue

                self.logger.error(
                    "Item failed, aborting run: %s", e,
                    extra=with_item_context(self.type, operation, i),
                )
                if isinstance(e, NodeOperationError):
                    e.item_index = i
                    e.node = self
                    raise
                raise NodeOperationError(str(e), node=self, item_index=i) from e

        return [return_items]
