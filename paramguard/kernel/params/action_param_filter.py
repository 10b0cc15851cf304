"""ActionParamFilter: restricts where each action parameter may come from.

For each action and parameter the configuration names the sources the value
may be taken from:

    ActionParamFilter(
        {
            "delete": {
                "id": {"source": "get"},
                "returnUrl": {"source": "post"},
                # get takes precedence over post
                "ajax": {"source": "get,post"},
            },
        }
    )

Before the action runs, the params the controller would bind are compared to
the configured sources. A param found in none of its sources, or with a
different value there, denies the request. Params without a rule are not
checked.

With ``provide_action_params`` enabled the filter also hands the controller an
ActionParamProvider, so the controller can bind exactly the configured params
from exactly the configured sources instead of merging request containers.
"""

import importlib
import logging
from enum import Enum
from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from paramguard.kernel.params.action_param import ActionParam
from paramguard.kernel.params.action_param_registry import ActionParamRegistry
from paramguard.kernel.params.config_validator import (
    ACTION_PARAMS_SCHEMA,
    FILTER_CONFIG_SCHEMA,
    PARAM_ENTRY_SCHEMA,
    ConfigValidator,
)
from paramguard.kernel.params.errors import (
    ActionParamConfigError,
    ActionParamDeniedError,
    ValidationErrorCode,
)
from paramguard.kernel.params.provider import (
    DEFAULT_PROVIDER_ID,
    ActionParamProvider,
    SupportsActionParams,
)
from paramguard.kernel.params.sources import RequestContext

logger = logging.getLogger(__name__)


class ActionParamsController(Protocol):
    """What the filter needs from the controller running the action."""

    def get_action_params(
        self, context: RequestContext, provider: SupportsActionParams | None = None
    ) -> Mapping[str, Any]: ...


class FilterState(str, Enum):
    """Outcome state of a filter run; results are always terminal."""

    ALLOWED = "ALLOWED"  # Every rule passed
    DENIED = "DENIED"  # A rule failed; the action must not run


class FilterResult(BaseModel):
    """Outcome of running the filter for one request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    action_id: str
    state: FilterState
    failed_param: str | None = None
    code: ValidationErrorCode | None = None
    provider: ActionParamProvider | None = None

    @property
    def allowed(self) -> bool:
        """True if the action may run."""
        return self.state is FilterState.ALLOWED


class FilterSettings(BaseModel):
    """Filter options besides the rules themselves."""

    provide_action_params: bool = False
    action_param_provider_id: str = Field(default=DEFAULT_PROVIDER_ID, min_length=1)


def _import_param_class(path: str) -> type:
    """Import a class from a dotted path such as ``package.module.ClassName``.

    Raises:
        ImportError: If the module or the attribute cannot be found
    """
    module_name, _, class_name = path.rpartition(".")
    if not module_name:
        raise ImportError(f"'{path}' is not a dotted path")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, class_name)
    except AttributeError:
        raise ImportError(f"Module '{module_name}' has no attribute '{class_name}'") from None


class ActionParamFilter:
    """Pre-action filter enforcing per-parameter source allowlists."""

    def __init__(
        self,
        action_params: Mapping[str, Mapping[str, Any]] | None = None,
        settings: FilterSettings | None = None,
    ) -> None:
        """Initialize the filter.

        Args:
            action_params: Rules per action, see ``set_action_params``
            settings: Filter options; defaults to provider mode off

        Raises:
            ActionParamConfigError: If the rules are malformed
        """
        self.settings = settings or FilterSettings()
        self._registry = ActionParamRegistry()
        self._validator = ConfigValidator()

        if action_params:
            self.set_action_params(action_params)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ActionParamFilter":
        """Build a filter from one configuration mapping.

        Accepts the keys ``action_params``, ``provide_action_params`` and
        ``action_param_provider_id``.

        Raises:
            ActionParamConfigError: If the configuration is malformed
        """
        ConfigValidator().validate(dict(config), FILTER_CONFIG_SCHEMA)

        settings = FilterSettings(
            **{key: value for key, value in config.items() if key != "action_params"}
        )
        return cls(config.get("action_params"), settings)

    def set_action_params(self, params: Mapping[str, Mapping[str, Any]]) -> None:
        """Configure rules for several actions.

        Args:
            params: {action_id: {param_name: entry}} where an entry is either
                a mapping with a ``source`` key (and optionally ``class``) or
                an ActionParam instance

        Raises:
            ActionParamConfigError: On any malformed entry or unknown source
        """
        self._validator.validate(params, ACTION_PARAMS_SCHEMA)

        for action_id, action_params in params.items():
            for param_name, param in action_params.items():
                self.set_action_param(action_id, param_name, param)

    def set_action_param(self, action_id: str, param_name: str, param: Any) -> None:
        """Configure a single rule; the mapping key always names the param."""
        if isinstance(param, Mapping):
            param = self._build_param(action_id, param_name, param)
        elif isinstance(param, ActionParam):
            if param.name != param_name:
                param = self._rename_param(action_id, param_name, param)
        else:
            raise ActionParamConfigError(
                code=ValidationErrorCode.PARAM_INVALID,
                message=f"Failed to set param '{param_name}' for action '{action_id}'.",
                action_id=action_id,
                param_name=param_name,
            )

        self._registry.register(action_id, param)

    def get_action_params(self, action_id: str) -> dict[str, ActionParam]:
        """Return the rules configured for ``action_id`` (empty if none)."""
        return self._registry.lookup(action_id)

    def create_provider(self, action_id: str, context: RequestContext) -> ActionParamProvider:
        """Create a provider for the given action and request."""
        return ActionParamProvider(
            self, action_id, context, provider_id=self.settings.action_param_provider_id
        )

    def provide_action_params(self, action_id: str, context: RequestContext) -> dict[str, Any]:
        """Read every configured param of the action from its allowed sources.

        Params not found in any of their sources are left out.
        """
        return {
            name: param.value(context)
            for name, param in self.get_action_params(action_id).items()
            if param.is_provided(context)
        }

    def pre_filter(
        self, action_id: str, context: RequestContext, controller: ActionParamsController
    ) -> FilterResult:
        """Check the controller's action params against the configured rules.

        Args:
            action_id: Id of the action about to run
            context: Current request
            controller: Controller running the action

        Returns:
            FilterResult, DENIED on the first failing rule, else ALLOWED. In
            provider mode the result carries the provider handed to the
            controller.
        """
        provider = None
        if self.settings.provide_action_params:
            provider = self.create_provider(action_id, context)
            logger.info(
                "Providing action params for '%s' as '%s'", action_id, provider.provider_id
            )

        action_params = controller.get_action_params(context, provider)

        for name, param in self.get_action_params(action_id).items():
            code = param.check(action_params, context)
            if code is not None:
                logger.warning(
                    "Denied action '%s': param '%s' failed (%s)", action_id, name, code.value
                )
                return FilterResult(
                    action_id=action_id,
                    state=FilterState.DENIED,
                    failed_param=name,
                    code=code,
                    provider=provider,
                )

        return FilterResult(action_id=action_id, state=FilterState.ALLOWED, provider=provider)

    def enforce(
        self, action_id: str, context: RequestContext, controller: ActionParamsController
    ) -> FilterResult:
        """Run ``pre_filter`` and raise if the request is denied.

        Raises:
            ActionParamDeniedError: If a rule fails (status 400)
        """
        result = self.pre_filter(action_id, context, controller)

        if not result.allowed:
            raise ActionParamDeniedError(
                code=result.code or ValidationErrorCode.PARAM_MISMATCH,
                message=f"Your request is invalid: param '{result.failed_param}' rejected.",
                action_id=action_id,
                param_name=result.failed_param or "",
            )

        return result

    def _rename_param(self, action_id: str, param_name: str, param: ActionParam) -> ActionParam:
        try:
            return type(param).model_validate({**param.model_dump(), "name": param_name})
        except ValidationError as e:
            raise ActionParamConfigError(
                code=ValidationErrorCode.PARAM_INVALID,
                message=f"Invalid param '{param_name}' for action '{action_id}': {e}",
                action_id=action_id,
                param_name=param_name,
            ) from e

    def _build_param(self, action_id: str, param_name: str, entry: Mapping[str, Any]) -> ActionParam:
        config = dict(entry)
        param_class = config.pop("class", ActionParam)

        if isinstance(param_class, str):
            try:
                param_class = _import_param_class(param_class)
            except ImportError as e:
                raise ActionParamConfigError(
                    code=ValidationErrorCode.PARAM_INVALID,
                    message=f"Cannot load param class for '{param_name}': {e}",
                    action_id=action_id,
                    param_name=param_name,
                ) from e

        if not (isinstance(param_class, type) and issubclass(param_class, ActionParam)):
            raise ActionParamConfigError(
                code=ValidationErrorCode.PARAM_INVALID,
                message=f"Failed to set param '{param_name}' for action '{action_id}'.",
                action_id=action_id,
                param_name=param_name,
            )

        self._validator.validate(config, PARAM_ENTRY_SCHEMA, action_id, param_name)

        try:
            return param_class(name=param_name, **config)
        except ActionParamConfigError as e:
            raise ActionParamConfigError(
                code=e.code, message=e.message, action_id=action_id, param_name=param_name
            ) from e
        except ValidationError as e:
            raise ActionParamConfigError(
                code=ValidationErrorCode.PARAM_INVALID,
                message=f"Invalid param '{param_name}' for action '{action_id}': {e}",
                action_id=action_id,
                param_name=param_name,
            ) from e
