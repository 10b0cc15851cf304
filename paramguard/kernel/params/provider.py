"""Action parameter providers and the controller side that consumes them."""

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from paramguard.kernel.params.sources import RequestContext

if TYPE_CHECKING:
    from paramguard.kernel.params.action_param_filter import ActionParamFilter

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_ID = "actionParamProvider"


@runtime_checkable
class SupportsActionParams(Protocol):
    """Anything that can hand a controller its action parameters."""

    provider_id: str

    def provide_action_params(self) -> dict[str, Any]: ...


class ActionParamProvider:
    """Provider bound to one filter, action and request.

    It holds no parameters itself and forwards to the filter, which reads
    every configured parameter from its allowed sources only.
    """

    def __init__(
        self,
        action_filter: "ActionParamFilter",
        action_id: str,
        context: RequestContext,
        provider_id: str = DEFAULT_PROVIDER_ID,
    ) -> None:
        self._filter = action_filter
        self.action_id = action_id
        self.context = context
        self.provider_id = provider_id

    def provide_action_params(self) -> dict[str, Any]:
        """Return the action params read from their configured sources.

        Returns:
            Param name to value, for every configured param that was found
        """
        return self._filter.provide_action_params(self.action_id, self.context)


class ParamController:
    """Base controller that binds action params from an injected provider.

    Subclasses override ``default_action_params`` to change what is used when
    no matching provider is handed in (actions the filter does not cover).
    """

    action_param_provider_id = DEFAULT_PROVIDER_ID

    def default_action_params(self, context: RequestContext) -> dict[str, Any]:
        """Query string parameters, the usual default for action binding."""
        return dict(context.query)

    def get_action_params(
        self, context: RequestContext, provider: SupportsActionParams | None = None
    ) -> dict[str, Any]:
        """Return the params to bind to the current action.

        Args:
            context: Current request
            provider: Provider handed out by the filter, if provider mode is on

        Returns:
            Provider output when the provider id matches, else the defaults
        """
        if provider is not None and provider.provider_id == self.action_param_provider_id:
            return provider.provide_action_params()

        if provider is not None:
            logger.debug(
                "Ignoring provider '%s'; controller expects '%s'",
                provider.provider_id,
                self.action_param_provider_id,
            )

        return self.default_action_params(context)
