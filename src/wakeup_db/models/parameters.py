"""
Connection parameter models.

Callers hand over their connection target in one of several shapes (a raw
connection string, a mapping of fields, or a ConnectionParameters record).
``resolve_parameters`` turns any of them into a single ConnectionParameters
at the edge so the rest of the package never branches on input shape.
"""

from typing import Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PORT = 1433


class ConnectionParameters(BaseModel):
    """Validated connection target for one wakeup run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    server: str = ""
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    instance_name: Optional[str] = None
    database: Optional[str] = None
    user: str = ""
    password: str = Field(default="", repr=False)
    raw_dsn: Optional[str] = None

    @property
    def has_raw_dsn(self) -> bool:
        return bool(self.raw_dsn)

    @property
    def is_empty(self) -> bool:
        """True when neither a raw DSN nor server/user/password were given."""
        return not (self.raw_dsn or self.server or self.user or self.password)


ConnectionSource = Union[str, Mapping[str, object], ConnectionParameters]


def resolve_parameters(source: ConnectionSource) -> ConnectionParameters:
    """
    Resolve a caller-supplied connection source into ConnectionParameters.

    Args:
        source: Raw connection string, mapping of field names, or an
            already-built ConnectionParameters

    Returns:
        ConnectionParameters instance

    Raises:
        TypeError: If the source is none of the accepted shapes
        pydantic.ValidationError: If a mapping holds invalid fields
    """
    if isinstance(source, ConnectionParameters):
        return source
    if isinstance(source, str):
        return ConnectionParameters(raw_dsn=source)
    if isinstance(source, Mapping):
        return ConnectionParameters.model_validate(dict(source))
    raise TypeError(f"Unsupported connection source: {type(source).__name__}")
