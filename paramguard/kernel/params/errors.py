"""Errors raised while configuring and enforcing action parameter rules."""

from enum import Enum


class ValidationErrorCode(str, Enum):
    """Standardized error codes for configuration and request checks."""

    CONFIG_MALFORMED = "CONFIG_MALFORMED"  # Filter configuration violates its schema
    PARAM_INVALID = "PARAM_INVALID"  # Entry is neither a mapping nor an ActionParam
    SOURCE_UNKNOWN = "SOURCE_UNKNOWN"  # Source name outside the fixed enumeration
    SOURCE_UNRESOLVED = "SOURCE_UNRESOLVED"  # Value requested from no allowed source
    DUPLICATE_PARAM = "DUPLICATE_PARAM"  # Same param registered twice for an action
    PARAM_UNSOURCED = "PARAM_UNSOURCED"  # Submitted but found in no allowed source
    PARAM_MISMATCH = "PARAM_MISMATCH"  # Submitted value differs from the source value


class ActionParamConfigError(Exception):
    """Raised when the filter configuration cannot be turned into rules.

    Attributes:
        code: Standardized error code
        message: Human-readable error description
        action_id: Action the offending entry belongs to (if known)
        param_name: Parameter the offending entry configures (if known)
    """

    def __init__(
        self,
        code: ValidationErrorCode,
        message: str,
        action_id: str = "",
        param_name: str = "",
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.action_id = action_id
        self.param_name = param_name


class ActionParamDeniedError(Exception):
    """Raised when a request fails an action parameter rule.

    Maps onto a client error; the request is not retried.

    Attributes:
        code: PARAM_UNSOURCED or PARAM_MISMATCH
        message: Human-readable error description
        action_id: Action that was denied
        param_name: First parameter that failed its rule
        status_code: HTTP status the host framework should answer with
    """

    status_code = 400

    def __init__(
        self,
        code: ValidationErrorCode,
        message: str,
        action_id: str,
        param_name: str,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.action_id = action_id
        self.param_name = param_name
