"""ActionParamRegistry: rules keyed by action id and parameter name."""

import logging

from paramguard.kernel.params.action_param import ActionParam
from paramguard.kernel.params.errors import ActionParamConfigError, ValidationErrorCode

logger = logging.getLogger(__name__)


class ActionParamRegistry:
    """Read-mostly store of ActionParam rules.

    Provides:
    - Registration of a rule for an action
    - Lookup of all rules of an action (empty when none are configured)
    """

    def __init__(self) -> None:
        # Storage: {action_id: {param_name: ActionParam}}
        self._params: dict[str, dict[str, ActionParam]] = {}

    def register(self, action_id: str, param: ActionParam) -> None:
        """Register a rule for an action.

        Raises:
            ActionParamConfigError: If the action already has a rule for this name
        """
        rules = self._params.setdefault(action_id, {})

        if param.name in rules:
            raise ActionParamConfigError(
                code=ValidationErrorCode.DUPLICATE_PARAM,
                message=f"Param '{param.name}' already configured for action '{action_id}'.",
                action_id=action_id,
                param_name=param.name,
            )

        rules[param.name] = param
        logger.debug(
            "Registered param '%s' for action '%s' from %s",
            param.name,
            action_id,
            ",".join(source.value for source in param.source),
        )

    def lookup(self, action_id: str) -> dict[str, ActionParam]:
        """Return the rules configured for ``action_id`` (possibly empty)."""
        return dict(self._params.get(action_id, {}))

    def list_actions(self) -> list[str]:
        """List every action id with at least one rule."""
        return list(self._params)
