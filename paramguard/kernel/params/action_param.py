"""ActionParam: per-parameter source allowlist.

A rule names one action parameter and the ordered list of sources that may
supply it. The first source (in configured order) that contains the name wins.
"""

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paramguard.kernel.params.errors import ActionParamConfigError, ValidationErrorCode
from paramguard.kernel.params.sources import ParameterSource, RequestContext, parse_source_list

logger = logging.getLogger(__name__)


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality without coercion: same type and same value, recursively.

    Dicts must also list their keys in the same order.
    """
    if type(left) is not type(right):
        return False

    if isinstance(left, dict):
        if list(left) != list(right):
            return False
        return all(strictly_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(strictly_equal(a, b) for a, b in zip(left, right))

    return bool(left == right)


class ActionParam(BaseModel):
    """Source allowlist for a single action parameter.

    Immutable once built. Subclass it and reference the subclass through the
    ``class`` key of a configuration entry to customize resolution.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    source: tuple[ParameterSource, ...]  # Precedence order

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, value: Any) -> tuple[ParameterSource, ...]:
        sources = parse_source_list(value)
        if not sources:
            raise ValueError("at least one source is required")
        return sources

    def resolve_source(self, context: RequestContext) -> ParameterSource | None:
        """Return the first allowed source containing this parameter, if any."""
        for source in self.source:
            if self.name in context.source(source):
                logger.debug("Param '%s' resolved from %s", self.name, source.name)
                return source
        return None

    def is_provided(self, context: RequestContext) -> bool:
        """True if any allowed source holds this parameter."""
        return self.resolve_source(context) is not None

    def value(self, context: RequestContext) -> Any:
        """Return the value found in the resolved source.

        Raises:
            ActionParamConfigError: If no allowed source holds the parameter
        """
        source = self.resolve_source(context)
        if source is None:
            raise ActionParamConfigError(
                code=ValidationErrorCode.SOURCE_UNRESOLVED,
                message=f"Param '{self.name}' is not provided by any of its sources.",
                param_name=self.name,
            )
        return context.source(source)[self.name]

    def check(
        self, action_params: Mapping[str, Any], context: RequestContext
    ) -> ValidationErrorCode | None:
        """Return the reason the submitted params fail this rule, or None."""
        # Nothing submitted, nothing to check
        if self.name not in action_params:
            return None

        if not self.is_provided(context):
            return ValidationErrorCode.PARAM_UNSOURCED

        if not strictly_equal(action_params[self.name], self.value(context)):
            return ValidationErrorCode.PARAM_MISMATCH

        return None

    def validate_params(self, action_params: Mapping[str, Any], context: RequestContext) -> bool:
        """True if the submitted value (when present) came from an allowed source."""
        return self.check(action_params, context) is None
