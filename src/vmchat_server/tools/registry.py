"""Tool registry: descriptors, schemas and invocation.

The registry maps a tool name to its descriptor and an async function. It is
filled once at startup and frozen; from then on it is only read, so a single
instance is shared by all requests.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic_core import to_jsonable_python

from vmchat_server.exceptions import ToolExecutionError, UnknownToolError

logger = logging.getLogger(__name__)

ToolFunction = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ToolParameter:
    """One argument of a tool, in declaration order."""

    name: str
    type: str = "string"  # integer | string
    required: bool = True
    description: str = ""


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and argument schema advertised to the model."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    def to_ollama_schema(self) -> dict[str, Any]:
        """Render the descriptor as an Ollama/OpenAI function tool schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        p.name: {"type": p.type, "description": p.description}
                        for p in self.parameters
                    },
                    "required": [p.name for p in self.parameters if p.required],
                },
            },
        }


@dataclass(frozen=True)
class ToolInvocationRequest:
    """A tool call requested by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolInvocationResult:
    """Outcome of one tool call: a JSON-compatible value or an error message.

    A value of None is a legitimate result (e.g. a VM that does not exist).
    """

    name: str
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_content(self) -> str:
        """Serialize the result as the content of a tool message."""
        if self.error is not None:
            return json.dumps({"error": self.error})
        return json.dumps(self.value)


class ToolRegistry:
    """Fixed mapping of tool names to descriptors and functions."""

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDescriptor, ToolFunction]] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor, function: ToolFunction) -> None:
        """Add a tool.

        Raises:
            RuntimeError: If the registry has been frozen
            ValueError: If a tool with the same name exists
        """
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        if descriptor.name in self._tools:
            raise ValueError(f"Tool already registered: {descriptor.name}")
        self._tools[descriptor.name] = (descriptor, function)
        logger.debug(f"Registered tool: {descriptor.name}")

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    def resolve(self, name: str) -> ToolFunction | None:
        entry = self._tools.get(name)
        return entry[1] if entry is not None else None

    def describe_all(self) -> list[ToolDescriptor]:
        """Return all descriptors in registration order."""
        return [descriptor for descriptor, _ in self._tools.values()]

    def to_ollama_tools(self) -> list[dict[str, Any]]:
        return [descriptor.to_ollama_schema() for descriptor in self.describe_all()]

    async def execute(self, request: ToolInvocationRequest) -> ToolInvocationResult:
        """Run a requested tool and capture its outcome.

        Unknown tools, bad arguments and exceptions raised by the tool are
        returned as error results so the model can react to them.

        Args:
            request: The tool call requested by the model

        Returns:
            ToolInvocationResult: The value or the error message
        """
        entry = self._tools.get(request.name)
        if entry is None:
            error = UnknownToolError(request.name)
            logger.warning(str(error))
            return ToolInvocationResult(name=request.name, error=str(error))

        descriptor, function = entry
        try:
            kwargs = _coerce_arguments(descriptor, request.arguments)
            value = await function(**kwargs)
            jsonable = to_jsonable_python(value)
        except ToolExecutionError as e:
            logger.warning(str(e))
            return ToolInvocationResult(name=request.name, error=str(e))
        except Exception as e:
            error = ToolExecutionError(request.name, str(e))
            logger.warning(f"{error} (arguments={request.arguments})")
            return ToolInvocationResult(name=request.name, error=str(error))

        logger.debug(f"Tool {request.name} returned {type(value).__name__}")
        return ToolInvocationResult(name=request.name, value=jsonable)


def _coerce_arguments(
    descriptor: ToolDescriptor, arguments: dict[str, Any]
) -> dict[str, Any]:
    """Map model-supplied arguments onto the declared parameters.

    Models frequently send numbers as strings, so integer parameters accept
    integral strings and floats. Undeclared arguments are dropped.

    Raises:
        ToolExecutionError: If a required argument is missing or cannot be converted
    """
    kwargs: dict[str, Any] = {}
    for parameter in descriptor.parameters:
        if parameter.name not in arguments or arguments[parameter.name] is None:
            if parameter.required:
                raise ToolExecutionError(
                    descriptor.name, f"missing required argument '{parameter.name}'"
                )
            continue

        raw = arguments[parameter.name]
        if parameter.type == "integer":
            kwargs[parameter.name] = _to_int(descriptor.name, parameter.name, raw)
        else:
            kwargs[parameter.name] = str(raw)

    extra = set(arguments) - {p.name for p in descriptor.parameters}
    if extra:
        logger.debug(f"Ignoring undeclared arguments for {descriptor.name}: {sorted(extra)}")
    return kwargs


def _to_int(tool_name: str, parameter: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ToolExecutionError(tool_name, f"argument '{parameter}' must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise ToolExecutionError(
        tool_name, f"argument '{parameter}' must be an integer, got {raw!r}"
    )
