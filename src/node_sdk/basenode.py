"""
BaseNode - Abstract base class for Python node implementations.

Nodes receive a NodeExecutionContext from the host runtime, read their
parameters per item, call external APIs through the context's
authenticated transport and return n8n-shaped output items.

All nodes inherit from BaseNode and implement the execute() method.

SYNC-CELERY SAFE: execute() is synchronous.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Mapping, Optional, Type, TypedDict, Union

from pydantic import BaseModel, ConfigDict, Field

from .http import HttpApiError, HttpClient, NodeTimeoutError
from .items import NodeItem

if TYPE_CHECKING:
    from .credentials import BaseCredential


logger = logging.getLogger(__name__)


# ==============================================================================
# NodeParameter - description of one UI parameter
# ==============================================================================

NodeParameterType = Literal[
    "string", "number", "boolean", "options", "multiOptions",
    "json", "collection", "notice",
]


class NodeParameter(BaseModel):
    """
    A single parameter in the node's properties.

    Serialised with ``model_dump(by_alias=True, exclude_none=True)`` into the
    camelCase dict shape the workflow editor expects.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Parameter key (internal name)")
    display_name: str = Field(..., alias="displayName", description="Human-readable label")
    type: NodeParameterType = Field(..., description="Parameter type")
    default: Any = Field(None, description="Default value")
    required: bool = Field(False, description="Is parameter required?")
    description: Optional[str] = Field(None, description="Help text")
    placeholder: Optional[str] = Field(None, description="Input placeholder")
    no_data_expression: Optional[bool] = Field(None, alias="noDataExpression")
    type_options: Optional[Dict[str, Any]] = Field(None, alias="typeOptions")
    options: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Options for options/collection type"
    )
    display_options: Optional[Dict[str, Any]] = Field(
        None,
        alias="displayOptions",
        description="Conditional visibility"
    )

    def to_property(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class NodeCredential(BaseModel):
    """Credential requirement definition."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Credential type name")
    required: bool = Field(True, description="Is credential required?")
    display_name: Optional[str] = Field(None, alias="displayName")


# ==============================================================================
# NodeExecutionData - Output data format
# ==============================================================================

class NodeExecutionData(TypedDict, total=False):
    """
    Single item of execution output data.

    Format: {"json": {...}, "pairedItem": {"item": 0}}
    """
    json: Any
    pairedItem: Dict[str, int]


# ==============================================================================
# BaseNode - Abstract base class
# ==============================================================================

class BaseNode(ABC):
    """
    Abstract base class for all Python node implementations.

    Nodes define:
    - type: Unique identifier (e.g., "n8n-nodes-findymail.findyMail")
    - version: Node version number
    - description: Node metadata dict, including its ``properties`` list

    And implement execute() which processes input items.
    """

    # Required class attributes (override in subclasses)
    type: str = "base"
    version: int = 1

    description: Dict[str, Any] = {
        "displayName": "Base Node",
        "name": "base",
        "description": "",
        "group": [],
        "version": 1,
        "inputs": ["main"],
        "outputs": ["main"],
        "credentials": [],
        "properties": [],
    }

    def __init__(self, continue_on_fail: bool = False) -> None:
        self.logger = logging.getLogger(f"node.{self.type}")
        self.continue_on_fail = continue_on_fail
        self._context: Optional[NodeExecutionContext] = None

    @abstractmethod
    def execute(self) -> List[List[NodeExecutionData]]:
        """
        Execute node operation.

        Returns:
            List[List[NodeExecutionData]]: outer list is output branches
            (always one here), inner list is the items of that branch.

        Raises:
            NodeOperationError: when an item fails and continue_on_fail is off
        """
        raise NotImplementedError

    # ==== Context Management ====

    def set_context(self, context: "NodeExecutionContext") -> None:
        self._context = context

    @property
    def context(self) -> "NodeExecutionContext":
        if self._context is None:
            raise NodeOperationError("No context set", node=self)
        return self._context

    # ==== Helper methods for subclasses ====

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
    ) -> Any:
        """
        Get parameter value for one item.

        Falls back to ``default``, then to the default declared in the node's
        properties, like n8n's getNodeParameter.
        """
        if default is None:
            default = self.get_parameter_default(name)
        if self._context is None:
            return default
        return self._context.get_node_parameter(name, item_index, default)

    @classmethod
    def get_parameter_default(cls, name: str) -> Any:
        for prop in cls.description.get("properties", []):
            if prop.get("name") == name:
                return prop.get("default")
        return None

    def get_input_data(self) -> List[Dict[str, Any]]:
        if self._context is None:
            return []
        return self._context.get_input_data()

    def request_with_authentication(
        self,
        credential_type: str,
        request: "RequestDescriptor",
    ) -> Any:
        """Send ``request`` with the named credential injected by the transport."""
        return self.context.request_with_authentication(credential_type, request)

    @classmethod
    def get_definition(cls) -> Dict[str, Any]:
        """Get full node definition for registration."""
        return {
            "type": cls.type,
            "version": cls.version,
            "description": cls.description,
        }


# ==============================================================================
# RequestDescriptor - what a node asks the transport to send
# ==============================================================================

class RequestDescriptor(BaseModel):
    """A fully formed HTTP request, built fresh for every item."""
    model_config = ConfigDict(extra="forbid")

    method: Literal["GET", "POST"] = "POST"
    url: str
    body: Dict[str, Any] = Field(default_factory=dict)
    authenticate: bool = True


# ==============================================================================
# NodeExecutionContext - Runtime context for node execution
# ==============================================================================

# ={{ $json.company.domain }} or ={{ $json["full name"] }}
_EXPRESSION_RE = re.compile(r"^=\{\{\s*\$json((?:\.[A-Za-z_][\w]*|\[\s*(?:\"[^\"]*\"|'[^']*'|\d+)\s*\])*)\s*\}\}$")
_PATH_PART_RE = re.compile(r"\.([A-Za-z_][\w]*)|\[\s*(?:\"([^\"]*)\"|'([^']*)'|(\d+))\s*\]")


class NodeExecutionContext:
    """
    Runtime context provided to nodes during execution.

    Provides access to:
    - Parameters (node level, optionally overridden per item)
    - Credentials and the credential types that know how to inject them
    - Input data
    - The authenticated HTTP transport
    """

    def __init__(
        self,
        parameters: Dict[str, Any],
        credentials: Dict[str, Dict[str, Any]],
        input_data: List[Union[Dict[str, Any], NodeItem]],
        credential_types: Optional[Mapping[str, Type["BaseCredential"]]] = None,
        item_parameters: Optional[List[Dict[str, Any]]] = None,
        http_client: Optional[HttpClient] = None,
    ) -> None:
        self._parameters = parameters
        self._item_parameters = item_parameters or []
        self._credentials = credentials
        self._credential_types = dict(credential_types or {})
        self._input_data = [
            {"json": item.json_data} if isinstance(item, NodeItem) else item
            for item in input_data
        ]
        self._http = http_client or HttpClient()

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
    ) -> Any:
        """
        Get parameter value, resolving ``={{ $json... }}`` expressions.

        Only a whole-value ``$json`` path is supported. Any other ``=`` value
        holding ``{{`` (mixed templates, other variables) raises
        NodeValidationError rather than being sent as literal text.
        """
        if item_index < len(self._item_parameters) and name in self._item_parameters[item_index]:
            value = self._item_parameters[item_index][name]
        else:
            value = self._parameters.get(name, default)
        return self._resolve(value, item_index)

    def _resolve(self, value: Any, item_index: int) -> Any:
        if isinstance(value, str):
            text = value.strip()
            match = _EXPRESSION_RE.match(text)
            if match:
                return self._lookup_json(match.group(1), item_index)
            if text.startswith("=") and "{{" in text:
                raise NodeValidationError(
                    f"Unsupported expression '{value}': only ={{{{ $json.<path> }}}} is resolved",
                    item_index=item_index,
                )
            return value
        if isinstance(value, list):
            return [self._resolve(v, item_index) for v in value]
        if isinstance(value, dict):
            return {k: self._resolve(v, item_index) for k, v in value.items()}
        return value

    def _lookup_json(self, path: str, item_index: int) -> Any:
        if item_index >= len(self._input_data):
            return None
        current: Any = self._input_data[item_index].get("json", {})
        for attr, dq, sq, idx in _PATH_PART_RE.findall(path):
            if idx:
                if not isinstance(current, list) or int(idx) >= len(current):
                    return None
                current = current[int(idx)]
                continue
            key = attr or dq or sq
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
        return current

    def get_credentials(self, name: str) -> Dict[str, Any]:
        """Get credentials by type name."""
        if name not in self._credentials:
            raise NodeOperationError(f"Credentials '{name}' not found")
        return self._credentials[name]

    def get_input_data(self) -> List[Dict[str, Any]]:
        return self._input_data

    def request_with_authentication(
        self,
        credential_type: str,
        request: RequestDescriptor,
    ) -> Any:
        """
        Send a request with credentials injected.

        The credential type turns the stored credential data into headers;
        nodes never build auth headers themselves.

        Raises:
            NodeApiError: non-2xx status, network error, timeout or non-JSON body
        """
        headers: Dict[str, str] = {}
        if request.authenticate:
            credential_cls = self._credential_types.get(credential_type)
            if credential_cls is None:
                raise NodeOperationError(f"Unknown credential type '{credential_type}'")
            credential = credential_cls(self.get_credentials(credential_type))
            headers = credential.authenticate()

        try:
            response = self._http.request(
                request.method,
                request.url,
                json=request.body if request.method != "GET" else None,
                headers=headers,
            )
            response.raise_for_status()
            return response.json()
        except HttpApiError as e:
            raise NodeApiError(
                str(e),
                status_code=e.status_code,
                response_body=e.response_body,
            ) from e
        except NodeTimeoutError as e:
            raise NodeApiError(str(e)) from e
        except ValueError as e:
            raise NodeApiError(f"Invalid JSON response from {request.url}") from e


# ==============================================================================
# Errors
# ==============================================================================

class NodeOperationError(Exception):
    """Error during node operation."""

    def __init__(
        self,
        message: str,
        node: Optional[BaseNode] = None,
        item_index: Optional[int] = None,
    ) -> None:
        self.message = message
        self.node = node
        self.item_index = item_index
        super().__init__(message)

    def __str__(self) -> str:
        if self.item_index is None:
            return self.message
        return f"{self.message} [item {self.item_index}]"


class NodeValidationError(NodeOperationError):
    """A parameter failed local validation; nothing was sent."""

    def __init__(
        self,
        message: str,
        missing: Optional[List[str]] = None,
        node: Optional[BaseNode] = None,
        item_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, node, item_index)
        self.missing = missing or []


class UnknownOperationError(NodeOperationError):
    """The operation id is not in the node's operation table."""

    def __init__(
        self,
        operation: Any,
        node: Optional[BaseNode] = None,
        item_index: Optional[int] = None,
    ) -> None:
        super().__init__(f"The operation '{operation}' is not supported", node, item_index)
        self.operation = operation


class NodeApiError(NodeOperationError):
    """Error from external API call."""

    def __init__(
        self,
        message: str,
        node: Optional[BaseNode] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message, node)
        self.status_code = status_code
        self.response_body = response_body


__all__ = [
    "BaseNode",
    "NodeExecutionContext",
    "NodeExecutionData",
    "NodeParameter",
    "NodeCredential",
    "NodeParameterType",
    "RequestDescriptor",
    "NodeOperationError",
    "NodeValidationError",
    "UnknownOperationError",
    "NodeApiError",
]
