"""
Shared contract for Terraform tool handlers.

Every handler follows the same shape:

1. Validate: read declared parameters from a ToolRequest. A missing required
   parameter fails with "missing required input: <name>".
2. Acquire the remote client for the current session from the ToolContext.
3. Invoke one remote operation with the validated parameters.
4. Translate failure: remote errors become a message naming the resource and
   its identifier instead of the raw transport error.
5. Encode success into a single text payload.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence

from terraform_mcp.client import ClientProvider, TfeClient

logger = logging.getLogger(__name__)


class MissingParameterError(ValueError):
    """Raised when a required tool parameter is absent or empty."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"required argument {name!r} not found")


class EncodingError(Exception):
    """Raised when a successful result cannot be serialized."""


@dataclass
class ToolResult:
    """Text payload returned to the MCP client, flagged when it is a failure."""

    text: str
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for MCP response."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


def tool_error(
    message: str,
    exc: Optional[BaseException] = None,
    cause: Optional[BaseException] = None,
) -> ToolResult:
    """
    Log a tool failure and build the error result.

    Args:
        message: User-facing message naming what failed
        exc: Underlying error; its text is appended to the message
        cause: Underlying error that is logged but kept out of the message

    Returns:
        ToolResult with is_error=True
    """
    if cause is not None:
        logger.error("%s (%s)", message, cause)
        return ToolResult(text=message, is_error=True)
    if exc is not None:
        logger.error("%s: %s", message, exc)
        return ToolResult(text=f"{message}: {exc}", is_error=True)
    logger.error(message)
    return ToolResult(text=message, is_error=True)


def encode_document(document: Dict[str, Any]) -> str:
    """
    Serialize a JSON:API document without its ``included`` resources.

    Raises:
        EncodingError: If the document is not JSON serializable
    """
    payload = {key: value for key, value in document.items() if key != "included"}
    try:
        return json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise EncodingError(str(e)) from e


def encode_list(document: Dict[str, Any]) -> str:
    """
    Serialize a JSON:API list document, merging in its pagination metadata.

    The output holds ``data`` and ``pagination`` (from ``meta.pagination``).

    Raises:
        EncodingError: If the document is not JSON serializable
    """
    meta = document.get("meta") or {}
    result = {
        "data": document.get("data", []),
        "pagination": meta.get("pagination"),
    }
    try:
        return json.dumps(result)
    except (TypeError, ValueError) as e:
        raise EncodingError(str(e)) from e


@dataclass
class ToolRequest:
    """String-keyed parameter bag of a single tool invocation."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def require_string(self, name: str) -> str:
        """
        Return a required string argument.

        An empty string counts as missing: every required parameter is an
        identifier or name, and an empty one cannot address a resource.

        Raises:
            MissingParameterError: If the argument is absent, empty or not a string
        """
        value = self.arguments.get(name)
        if not isinstance(value, str) or not value:
            raise MissingParameterError(name)
        return value

    def get_string(self, name: str, default: str = "") -> str:
        value = self.arguments.get(name)
        if isinstance(value, str):
            return value
        return default

    def get_string_list(self, name: str) -> List[str]:
        """Return an array argument; a bare string counts as one item."""
        value = self.arguments.get(name)
        if isinstance(value, str):
            return [value] if value else []
        if isinstance(value, (list, tuple)):
            return [item for item in value if isinstance(item, str) and item]
        return []


@dataclass
class ToolContext:
    """
    Request-scoped context handed to handlers.

    Attributes:
        client_provider: Source of per-session remote API clients
        session_id: MCP session the request belongs to
    """

    client_provider: ClientProvider
    session_id: str = "default"

    def get_client(self) -> TfeClient:
        return self.client_provider.get_client(self.session_id)


Handler = Callable[[ToolContext, ToolRequest], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolParameter:
    """A declared tool parameter with a primitive JSON type."""

    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    enum: Optional[Sequence[str]] = None
    default: Optional[Any] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.type == "array":
            items: Dict[str, Any] = {"type": "string"}
            if self.enum:
                items["enum"] = list(self.enum)
            schema["items"] = items
        elif self.enum:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    """
    A tool exposed over MCP.

    Attributes:
        name: Unique, stable tool name
        title: Short human-readable title
        description: What the tool does
        read_only: The tool never changes remote state
        destructive: Invocation may mutate remote state
        parameters: Declared parameters
        handler: Coroutine implementing the tool
    """

    name: str
    title: str
    description: str
    handler: Handler = field(compare=False, repr=False)
    read_only: bool = True
    destructive: bool = False
    parameters: Sequence[ToolParameter] = ()

    @property
    def required_parameters(self) -> List[str]:
        return [param.name for param in self.parameters if param.required]

    def input_schema(self) -> Dict[str, Any]:
        """Render the JSON Schema for the tool's parameters."""
        return {
            "type": "object",
            "properties": {param.name: param.schema() for param in self.parameters},
            "required": self.required_parameters,
        }

    def annotations(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "readOnlyHint": self.read_only,
            "destructiveHint": self.destructive,
        }


class ToolCatalog:
    """Ordered collection of the tool definitions this server implements."""

    def __init__(self, definitions: Sequence[ToolDefinition] = ()):
        self._definitions: Dict[str, ToolDefinition] = {}
        for definition in definitions:
            self.add(definition)

    def add(self, definition: ToolDefinition) -> None:
        if definition.name in self._definitions:
            raise ValueError(f"Duplicate tool definition: {definition.name}")
        self._definitions[definition.name] = definition

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
