"""ConfigValidator: JSON Schema validation for filter configuration.

Configuration is checked before any ActionParam is built, so a malformed
entry fails at load time instead of on the first request.
"""

from typing import Any, Mapping

import jsonschema
from jsonschema import Draft7Validator

from paramguard.kernel.params.errors import ActionParamConfigError, ValidationErrorCode

# Draft 7, but any Mapping (not only dict) counts as an "object".
MappingDraft7Validator = jsonschema.validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine(
        "object", lambda _checker, instance: isinstance(instance, Mapping)
    ),
)

# One {"source": ...} entry after the filter has taken out its "class" key.
PARAM_ENTRY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "source": {
            "anyOf": [
                {"type": "string", "pattern": "[^,\\s]"},
                {"type": "array", "items": {"type": "string"}, "minItems": 1},
            ]
        },
    },
    "required": ["source"],
    # The mapping key names the param; custom classes may take extra keys
    "not": {"required": ["name"]},
}

# {action_id: {param_name: entry-or-ActionParam}}
ACTION_PARAMS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "object"},
}

FILTER_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "action_params": ACTION_PARAMS_SCHEMA,
        "provide_action_params": {"type": "boolean"},
        "action_param_provider_id": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}


class ConfigValidator:
    """Validates configuration data against a Draft 7 JSON Schema."""

    def validate(self, data: Any, schema: dict[str, Any], action_id: str = "", param_name: str = "") -> None:
        """Validate configuration data.

        Args:
            data: Configuration mapping to check
            schema: JSON Schema to check it against
            action_id: Action the data belongs to, for error reporting
            param_name: Parameter the data configures, for error reporting

        Raises:
            ActionParamConfigError: CONFIG_MALFORMED if validation fails
        """
        try:
            Draft7Validator.check_schema(schema)
        except jsonschema.exceptions.SchemaError as e:
            raise ActionParamConfigError(
                code=ValidationErrorCode.CONFIG_MALFORMED,
                message=f"Schema is malformed: {str(e)}",
                action_id=action_id,
                param_name=param_name,
            ) from e

        errors = list(MappingDraft7Validator(schema).iter_errors(data))

        if errors:
            # Take the first error for reporting
            first_error = errors[0]
            path = ".".join(str(p) for p in first_error.path)
            location = f" at '{path}'" if path else ""

            raise ActionParamConfigError(
                code=ValidationErrorCode.CONFIG_MALFORMED,
                message=f"Invalid action param configuration{location}: {first_error.message}",
                action_id=action_id,
                param_name=param_name,
            )
