from typing import Any, Dict, Set

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """
    Checks and cleans the JSON schemas generated from tool signatures before
    they are shown to the model.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walks the ``$ref`` graph of a schema and fails on the first cycle.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def check(node: Any, path: Set[str]) -> None:
            if isinstance(node, dict):
                ref = node.get("$ref")
                if ref is not None:
                    if ref in path:
                        msg = f"Recursive structure detected: {ref}. Tool parameters must be finite trees."
                        logger.error(msg)
                        raise ToolValidationError(msg)

                    # e.g. #/$defs/SearchHit
                    if ref.startswith("#"):
                        def_name = ref.split("/")[-1]
                        if def_name in defs:
                            check(defs[def_name], path | {ref})
                    return

                for value in node.values():
                    check(value, path)
            elif isinstance(node, list):
                for item in node:
                    check(item, path)

        check(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Removes pydantic metadata ($defs, $schema, $id, title), collapses
        ``Optional`` unions to their single non-null type and closes objects
        with ``additionalProperties: false``.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = schema.copy()

        for key in _METADATA_KEYS:
            new_schema.pop(key, None)

        if "anyOf" in new_schema:
            non_null = [x for x in new_schema["anyOf"] if not (isinstance(x, dict) and x.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = {k: v for k, v in new_schema.items() if k != "anyOf"}
                merged.update(non_null[0])
                if "description" in new_schema:
                    merged["description"] = new_schema["description"]
                # A null default is meaningless once the null branch is gone.
                if merged.get("default", 0) is None:
                    merged.pop("default")
                return SchemaValidator.sanitize_schema(merged)

        if new_schema.get("type") == "object" and "additionalProperties" not in new_schema:
            new_schema["additionalProperties"] = False

        for key, value in new_schema.items():
            if key == "properties" and isinstance(value, dict):
                new_schema[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [
                    SchemaValidator.sanitize_schema(item) if isinstance(item, dict) else item for item in value
                ]

        return new_schema
