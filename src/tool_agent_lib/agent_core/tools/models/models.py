"""Tool identifiers, public tool specs and the internal tool definition."""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict


class ToolName(str, Enum):
    """Closed set of tools the agent can dispatch to."""

    SEARCH = "search"
    TRANSFORM = "transform"
    RUN_CODE = "run_code"


class ToolSpec(BaseModel):
    """
    The part of a tool that is exposed to the model.

    Attributes:
        name: The unique name of the tool.
        description: What the tool does, as shown to the model.
        parameters: JSON schema describing required and optional parameters.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Dict[str, Any]


class ToolDefinition(BaseModel):
    """
    A registered tool: its spec plus the callable that implements it.

    Attributes:
        name: The tool identifier.
        description: A brief description of what the tool does.
        func: The callable (usually an async bound method) implementing the tool.
        parameters: JSON schema for the tool's input parameters.
        args_model: Optional Pydantic model used for validating and coercing arguments.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: ToolName
    description: str
    func: Callable[..., Any]
    parameters: Dict[str, Any]
    args_model: Optional[Type[BaseModel]] = None

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(name=self.name.value, description=self.description, parameters=self.parameters)
