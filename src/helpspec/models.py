"""Canonical Pydantic models shared across all helpspec modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- loaded from ``helpspec.json`` (project) or the
user's config directory:
    :class:`ServiceConfig`, :class:`GeneratorConfig`, :class:`Settings`,
    and the derived :class:`TranslationOptions`.

**Type descriptor variants** -- the explicit, tagged form of the
self-describing type grammar found in the help payloads. Raw payload values
are turned into these exclusively by
:func:`~helpspec.translator.types.classify`:
    :class:`PrimitiveType`, :class:`ArrayType`, :class:`MapType`,
    :class:`EnumType`, :class:`ObjectType`, :class:`NamedReference`
    (union alias :data:`TypeDescriptor`).

**Function views** -- the two per-function descriptions returned by the help
endpoint and their join:
    :class:`FullFunction`, :class:`ConsoleFunction`, :class:`JoinedFunction`,
    plus :class:`ParameterPlacement` and :class:`UsageParameter` produced by
    the usage-string parser.

Payload-facing models use ``extra="allow"`` because the service adds fields
between releases; unknown keys are preserved in ``model_extra``.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class StatusCodeStyle(str, enum.Enum):
    """How the success response of every operation is keyed.

    ``RANGE`` emits ``"2XX"``; ``EXACT`` emits ``"200"``.
    """

    RANGE = "range"
    EXACT = "exact"


class ServiceConfig(BaseModel):
    """Connection settings for the local service exposing ``/help``.

    The service listens on the loopback interface with a self-signed
    certificate, so ``verify_ssl`` defaults to ``False``.

    Example::

        ServiceConfig(port=51234, secret_source="file:~/.lockfile-secret")
    """

    host: str = Field(default="127.0.0.1", description="Service host")
    port: Optional[int] = Field(default=None, description="Service HTTPS port")
    username: str = Field(default="riot", description="Basic-auth user name")
    secret_source: str = Field(
        default="env:SECRET",
        description="Credential source: env:VAR, file:/path, prompt, value:LITERAL",
    )
    verify_ssl: bool = Field(default=False, description="Verify TLS certificates")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=0, description="Retries on connection errors")
    help_path: str = Field(default="/help", description="Introspection endpoint path")
    app_info_path: str = Field(
        default="/riotclient/v1/app-info",
        description="Application info endpoint (empty string disables it)",
    )

    @property
    def base_url(self) -> str:
        """Return ``https://<host>:<port>`` for the configured service."""
        return f"https://{self.host}:{self.port}"


class GeneratorConfig(BaseModel):
    """Settings that shape the generated OpenAPI document."""

    output: str = Field(default="out/openapi.json", description="Output file path")
    overrides_file: Optional[str] = Field(
        default=None, description="JSON/YAML file with object name overrides"
    )
    object_name_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Inline overrides, merged over the overrides file",
    )
    status_code_style: StatusCodeStyle = StatusCodeStyle.RANGE
    include_forbidden_response: bool = False
    emit_parts: bool = Field(
        default=False, description="Also write schemas.json and paths.json"
    )
    openapi_version: str = "3.0.0"
    default_tag: str = "core-sdk"
    ignored_tags: list[str] = Field(
        default_factory=lambda: ["$remoting-binding-module", "Plugins"]
    )

    def translation_options(self) -> TranslationOptions:
        """Project the endpoint-translation subset of this config."""
        return TranslationOptions(
            status_code_style=self.status_code_style,
            include_forbidden_response=self.include_forbidden_response,
            default_tag=self.default_tag,
            ignored_tags=tuple(self.ignored_tags),
        )


class Settings(BaseModel):
    """Effective configuration, produced by :func:`~helpspec.config.resolve_settings`."""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)


class TranslationOptions(BaseModel):
    """Read-only policy knobs threaded through the endpoint translator."""

    model_config = ConfigDict(frozen=True)

    status_code_style: StatusCodeStyle = StatusCodeStyle.RANGE
    include_forbidden_response: bool = False
    default_tag: str = "core-sdk"
    ignored_tags: tuple[str, ...] = ("$remoting-binding-module", "Plugins")

    @property
    def success_status(self) -> str:
        return "2XX" if self.status_code_style == StatusCodeStyle.RANGE else "200"


# --- Type descriptor variants ---


class _Descriptor(BaseModel):
    model_config = ConfigDict(frozen=True)


class PrimitiveType(_Descriptor):
    """A name from the closed primitive vocabulary (``string``, ``int``, ...)."""

    kind: Literal["primitive"] = "primitive"
    name: str


class ArrayType(_Descriptor):
    """``"vector of <element>"``."""

    kind: Literal["array"] = "array"
    element: TypeDescriptor


class MapType(_Descriptor):
    """``"map of <value>"``; keys are always strings."""

    kind: Literal["map"] = "map"
    value: TypeDescriptor


class EnumValue(_Descriptor):
    name: str
    value: Optional[int] = None
    description: Optional[str] = None


class EnumType(_Descriptor):
    """A structure carrying ordered ``values``."""

    kind: Literal["enum"] = "enum"
    values: tuple[EnumValue, ...] = ()


class ObjectField(_Descriptor):
    name: str
    type: TypeDescriptor
    description: Optional[str] = None
    optional: bool = False
    offset: Optional[int] = None


class ObjectType(_Descriptor):
    """A structure carrying ordered ``fields``."""

    kind: Literal["object"] = "object"
    fields: tuple[ObjectField, ...] = ()


class NamedReference(_Descriptor):
    """Any other value; ``name`` is the referenced type (``"0"`` when unusable)."""

    kind: Literal["reference"] = "reference"
    name: str


TypeDescriptor = Annotated[
    Union[PrimitiveType, ArrayType, MapType, EnumType, ObjectType, NamedReference],
    Field(discriminator="kind"),
]

for _model in (ArrayType, MapType, ObjectField, ObjectType):
    _model.model_rebuild()


# --- Function views ---


class ParameterPlacement(str, enum.Enum):
    """Where a function argument ends up in the HTTP request."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"


class UsageParameter(BaseModel):
    """One argument token recognised in a usage string."""

    name: str
    placement: ParameterPlacement
    optional: bool = False


class FullFunction(BaseModel):
    """An entry of ``/help?format=Full`` ``functions``.

    Only the fields used for translation are declared; ``arguments`` and
    ``returns`` stay raw because their shape varies between releases.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    description: Optional[str] = None
    help: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    arguments: list[Any] = Field(default_factory=list)
    returns: Any = None
    deprecated: Optional[bool] = None


class ConsoleFunction(BaseModel):
    """An entry of ``/help?format=Console`` ``functions`` (keyed by name upstream).

    ``arguments`` is a list of single-key mappings
    ``{argName: {type, optional, description}}``.
    """

    model_config = ConfigDict(extra="allow")

    http_method: Optional[str] = None
    url: Optional[str] = None
    usage: Optional[str] = None
    arguments: list[Any] = Field(default_factory=list)
    returns: Any = None
    description: Optional[str] = None
    help: Optional[str] = None


class JoinedFunction(BaseModel):
    """The Full view of a function joined with its Console view by name.

    ``console`` is ``None`` when the Console catalogue has no entry of that
    name -- a normal outcome, not an error.
    """

    name: str
    full: FullFunction
    console: Optional[ConsoleFunction] = None


class IntrospectionPayloads(BaseModel):
    """The raw payloads a single run works from."""

    console: dict[str, Any] = Field(default_factory=dict)
    full: dict[str, Any] = Field(default_factory=dict)
    app_info: dict[str, Any] = Field(default_factory=dict)
    base_url: Optional[str] = None
