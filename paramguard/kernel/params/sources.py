"""Request parameter sources and the per-request context that carries them."""

from enum import Enum
from typing import Any
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field

from paramguard.kernel.params.errors import ActionParamConfigError, ValidationErrorCode


class ParameterSource(str, Enum):
    """Containers a request parameter may be read from.

    Values are the (case-insensitive) names used in filter configuration.
    """

    QUERY = "get"
    BODY = "post"
    COOKIE = "cookie"
    SESSION = "session"
    SERVER_ENV = "server"
    FILE_UPLOAD = "files"
    REQUEST_MERGED = "request"
    ENVIRONMENT = "env"
    HTTP_PUT_BODY = "put"
    HTTP_DELETE_BODY = "delete"

    @classmethod
    def from_name(cls, name: str) -> "ParameterSource":
        """Look up a source by its configuration name.

        Raises:
            ActionParamConfigError: If the name is not a known source
        """
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ActionParamConfigError(
                code=ValidationErrorCode.SOURCE_UNKNOWN,
                message=f"Unknown source for action params '{name}'.",
            ) from None


def parse_source_list(value: Any) -> tuple[ParameterSource, ...]:
    """Parse "get,post" / ["GET", "post"] / ParameterSource into an ordered tuple.

    Order is preserved; it is the precedence order. Repeated names are kept once.

    Raises:
        ActionParamConfigError: SOURCE_UNKNOWN for any other value or unknown name
    """
    if isinstance(value, ParameterSource):
        items: list[Any] = [value]
    elif isinstance(value, str):
        items = [part for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ActionParamConfigError(
            code=ValidationErrorCode.SOURCE_UNKNOWN,
            message=f"Source for action params must be a name or a list of names, got {value!r}.",
        )

    sources: list[ParameterSource] = []
    for item in items:
        source = item if isinstance(item, ParameterSource) else ParameterSource.from_name(item)
        if source not in sources:
            sources.append(source)
    return tuple(sources)


class RequestContext(BaseModel):
    """One dictionary per parameter source for a single request.

    Built by the host framework adapter. PUT and DELETE parameters are parsed
    from ``raw_body`` (form encoded) and only exist for the matching method.
    """

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    query: dict[str, Any] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)
    cookies: dict[str, Any] = Field(default_factory=dict)
    session: dict[str, Any] = Field(default_factory=dict)
    server: dict[str, Any] = Field(default_factory=dict)
    env: dict[str, Any] = Field(default_factory=dict)
    files: dict[str, Any] = Field(default_factory=dict)
    raw_body: str = ""

    def rest_params(self) -> dict[str, str]:
        """Raw body parsed as key/value pairs; the last duplicate key wins."""
        return dict(parse_qsl(self.raw_body, keep_blank_values=True))

    def source(self, source: ParameterSource) -> dict[str, Any]:
        """Return the dictionary backing ``source`` for this request."""
        if source is ParameterSource.QUERY:
            return self.query
        if source is ParameterSource.BODY:
            return self.body
        if source is ParameterSource.COOKIE:
            return self.cookies
        if source is ParameterSource.SESSION:
            return self.session
        if source is ParameterSource.SERVER_ENV:
            return self.server
        if source is ParameterSource.FILE_UPLOAD:
            return self.files
        if source is ParameterSource.ENVIRONMENT:
            return self.env
        if source is ParameterSource.REQUEST_MERGED:
            return {**self.query, **self.body}
        if source is ParameterSource.HTTP_PUT_BODY:
            return self.rest_params() if self.method.upper() == "PUT" else {}
        if source is ParameterSource.HTTP_DELETE_BODY:
            return self.rest_params() if self.method.upper() == "DELETE" else {}

        raise ActionParamConfigError(
            code=ValidationErrorCode.SOURCE_UNKNOWN,
            message=f"Unknown source for action params '{source}'.",
        )
