"""Tool registry: the declarative catalog of tools offered to the model."""

import inspect
from typing import Annotated, Any, Callable, Dict, List, Optional, Union, cast, get_args, get_origin

import jsonref  # type: ignore
from pydantic import create_model
from pydantic.fields import FieldInfo

from ..models import ToolDefinition, ToolName, ToolSpec
from ..schema import SchemaValidator
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry to manage and access the tools available to the agent.

    This class holds the tool specs sent to the model and maps each
    ``ToolName`` to the callable that implements it. Definitions are frozen
    once registered.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[ToolName, ToolDefinition] = {}

    def register(
        self,
        name_or_tool: Union[str, ToolName, ToolDefinition, Callable[..., Any]],
        description: Optional[str] = None,
        func: Optional[Callable[..., Any]] = None,
    ) -> ToolDefinition:
        """
        Register a new tool.

        Accepts a ready ``ToolDefinition``, a callable whose ``__name__`` is a
        ``ToolName`` value, or a name plus the implementing callable. The
        parameter schema is always generated from the callable's signature.

        Args:
            name_or_tool: A ``ToolDefinition``, a tool name, or a Callable.
            description: Optional description override. Defaults to the callable's docstring.
            func: The implementing callable. Required if `name_or_tool` is a name.

        Returns:
            The registered definition.

        Raises:
            ToolRegistrationError: If the name is not a known tool, a callable is
                missing, or the tool already exists.
            ToolValidationError: If the callable lacks a docstring or parameter descriptions.
        """
        if isinstance(name_or_tool, ToolDefinition):
            tool = name_or_tool
        elif callable(name_or_tool):
            tool = self._generate_tool_definition(name_or_tool, description=description)
        else:
            if func is None:
                raise ToolRegistrationError("If passing name as string, func is required.")
            name = name_or_tool.value if isinstance(name_or_tool, ToolName) else name_or_tool
            tool = self._generate_tool_definition(func, name=name, description=description)

        if tool.name in self.tools:
            msg = f"Tool '{tool.name.value}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name.value}'")
        return tool

    def get(self, name: ToolName) -> ToolDefinition:
        """Return the definition registered under ``name``.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        try:
            return self.tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Tool '{name.value}' not found in the registry.") from None

    def list(self) -> List[ToolSpec]:
        """Returns the specs of all registered tools in registration order."""
        return [tool.spec for tool in self.tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def _generate_tool_definition(
        self, func: Callable[..., Any], name: Optional[str] = None, description: Optional[str] = None
    ) -> ToolDefinition:
        """Generate a ToolDefinition from a callable.

        Args:
            func: The function to generate a definition for.
            name: Optional name override for the tool.
            description: Optional description override for the tool.

        Returns:
            A ToolDefinition object containing the tool's metadata and schema.

        Raises:
            ToolRegistrationError: If the resolved name is not a ``ToolName``.
            ToolValidationError: If the function is missing a docstring or parameter descriptions.
        """
        raw_name = name or func.__name__
        try:
            tool_name = ToolName(raw_name)
        except ValueError:
            msg = f"'{raw_name}' is not a known tool. Known tools: {[t.value for t in ToolName]}"
            logger.error(msg)
            raise ToolRegistrationError(msg) from None

        if description is None:
            description = self._get_docstring_from_func(func, raw_name)

        signature = inspect.signature(func)
        fields = self._build_fields(signature, raw_name)

        # create_model expects **field_definitions: Any
        dynamic_params_model = create_model(f"{raw_name}Params", **cast(Dict[str, Any], fields))
        raw_schema = dynamic_params_model.model_json_schema()
        SchemaValidator.assert_no_recursive_refs(raw_schema)

        # proxies=False ensures we get a plain dict back, not JsonRef objects
        parameters_schema = jsonref.replace_refs(raw_schema, proxies=False)
        parameters_schema = SchemaValidator.sanitize_schema(parameters_schema)

        return ToolDefinition(
            name=tool_name,
            description=description,
            func=func,
            parameters=parameters_schema,
            args_model=dynamic_params_model,
        )

    @staticmethod
    def _get_docstring_from_func(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. The model needs a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc

    @staticmethod
    def _build_fields(signature: inspect.Signature, tool_name: str) -> Dict[str, Any]:
        """Turn handler parameters into ``create_model`` field definitions.

        The dispatcher calls handlers with keyword arguments only, so every
        parameter must be nameable and described through
        ``Annotated[<type>, Field(description=...)]``. The signature default,
        if any, becomes the field default.

        Raises:
            ToolValidationError: On variadic or positional-only parameters, or a missing description.
        """
        fields: Dict[str, Any] = {}
        for param_name, param in signature.parameters.items():
            if param_name == "self":
                continue
            if param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
                inspect.Parameter.POSITIONAL_ONLY,
            ):
                msg = f"Parameter '{param_name}' in tool '{tool_name}' cannot be passed by name."
                logger.error(msg)
                raise ToolValidationError(msg)
            if _parameter_description(param.annotation) is None:
                msg = (
                    f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
                    f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
                )
                logger.error(msg)
                raise ToolValidationError(msg)
            default = ... if param.default is inspect.Parameter.empty else param.default
            fields[param_name] = (param.annotation, default)
        return fields


def _parameter_description(annotation: Any) -> Optional[str]:
    if get_origin(annotation) is not Annotated:
        return None
    for metadata in get_args(annotation)[1:]:
        if isinstance(metadata, FieldInfo) and metadata.description:
            return metadata.description
    return None
