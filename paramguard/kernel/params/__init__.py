"""Params module: per-action parameter source rules and the filter enforcing them."""

from paramguard.kernel.params.action_param import ActionParam, strictly_equal
from paramguard.kernel.params.action_param_filter import (
    ActionParamFilter,
    FilterResult,
    FilterSettings,
    FilterState,
)
from paramguard.kernel.params.action_param_registry import ActionParamRegistry
from paramguard.kernel.params.config_validator import ConfigValidator
from paramguard.kernel.params.errors import (
    ActionParamConfigError,
    ActionParamDeniedError,
    ValidationErrorCode,
)
from paramguard.kernel.params.provider import (
    ActionParamProvider,
    ParamController,
    SupportsActionParams,
)
from paramguard.kernel.params.sources import ParameterSource, RequestContext

__all__ = [
    "ActionParam",
    "ActionParamFilter",
    "ActionParamRegistry",
    "ActionParamProvider",
    "ActionParamConfigError",
    "ActionParamDeniedError",
    "ConfigValidator",
    "FilterResult",
    "FilterSettings",
    "FilterState",
    "ParamController",
    "ParameterSource",
    "RequestContext",
    "SupportsActionParams",
    "ValidationErrorCode",
    "strictly_equal",
]
