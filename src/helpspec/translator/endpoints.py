"""Translate help-endpoint functions into OpenAPI ``paths``.

Each callable function is described twice by the service:

* the **Full** view (``/help?format=Full``) -- name, description, help
  text, tags, argument metadata, return type;
* the **Console** view (``/help?format=Console``) -- HTTP method, URL
  template, usage string, argument types and optionality.

:func:`join_functions` pairs the two by function name,
:func:`translate_endpoint` turns one pair into an operation object, and
:func:`build_paths` groups the operations by URL template and then by HTTP
method, so several functions may share one path item.

Functions the service cannot route over HTTP (no console entry, no URL) are
dropped with a warning; the run always continues.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from helpspec.models import (
    ConsoleFunction,
    FullFunction,
    JoinedFunction,
    ParameterPlacement,
    TranslationOptions,
)
from helpspec.output import debug, warning
from helpspec.translator.types import (
    ARRAY_PREFIX,
    MAP_PREFIX,
    reference_name,
    reference_schema,
    translate_type,
)
from helpspec.translator.usage import normalize_url_template, parse_usage, template_variables

_UNAUTHORIZED_REF = "#/components/responses/UnauthorizedError"
_FORBIDDEN_REF = "#/components/responses/ForbiddenError"
_JSON = "application/json"


# ---------------------------------------------------------------------------
# Joining the two views
# ---------------------------------------------------------------------------


def join_functions(
    console_help: Mapping[str, Any],
    full_help: Mapping[str, Any],
) -> list[JoinedFunction]:
    """Pair every Full-view function with its Console-view entry by name.

    Function names are assumed unique; when a name repeats, the later entry
    wins and takes the later position.

    Args:
        console_help: The ``/help?format=Console`` payload.
        full_help: The ``/help?format=Full`` payload.

    Returns:
        One :class:`~helpspec.models.JoinedFunction` per named Full-view
        function, in catalogue order. ``console`` is ``None`` when there is
        no Console entry of that name.
    """
    console_index = _console_index(console_help.get("functions"))
    joined: list[JoinedFunction] = []
    for name, full in _full_index(full_help.get("functions")).items():
        console: Optional[ConsoleFunction] = None
        raw = console_index.get(name)
        if raw is not None:
            try:
                console = ConsoleFunction.model_validate(raw)
            except ValidationError as exc:
                warning(f"Console entry for {name} is malformed, ignoring it: {exc}")
        joined.append(JoinedFunction(name=name, full=full, console=console))
    return joined


def _full_index(functions: Any) -> dict[str, FullFunction]:
    if isinstance(functions, Mapping):
        entries = [
            {"name": key, **value} if isinstance(value, Mapping) else value
            for key, value in functions.items()
        ]
    elif isinstance(functions, list):
        entries = functions
    else:
        warning("Full help payload has no function list")
        return {}

    index: dict[str, FullFunction] = {}
    for entry in entries:
        if not isinstance(entry, Mapping) or not entry.get("name"):
            warning(f"Skipping function without a name: {entry!r}"[:200])
            continue
        try:
            full = FullFunction.model_validate(entry)
        except ValidationError as exc:
            warning(f"Skipping malformed function {entry.get('name')}: {exc}")
            continue
        if full.name in index:
            debug(f"Function {full.name} is listed twice, keeping the later entry")
            del index[full.name]
        index[full.name] = full
    return index


def _console_index(functions: Any) -> dict[str, Any]:
    if isinstance(functions, Mapping):
        return {str(name): entry for name, entry in functions.items()}
    if isinstance(functions, list):
        return {
            str(entry["name"]): entry
            for entry in functions
            if isinstance(entry, Mapping) and entry.get("name")
        }
    warning("Console help payload has no function catalogue")
    return {}


# ---------------------------------------------------------------------------
# Argument lookups
# ---------------------------------------------------------------------------


def console_argument_lookup(arguments: Any) -> dict[str, Mapping[str, Any]]:
    """Index Console arguments (``[{argName: {type, optional, description}}]``) by name."""
    lookup: dict[str, Mapping[str, Any]] = {}
    for entry in arguments or []:
        if not isinstance(entry, Mapping) or not entry:
            debug(f"Skipping malformed console argument: {entry!r}")
            continue
        name, spec = next(iter(entry.items()))
        lookup[str(name)] = spec if isinstance(spec, Mapping) else {}
    return lookup


def full_argument_lookup(arguments: Any) -> dict[str, Mapping[str, Any]]:
    """Index Full arguments (``[{name, type, optional, description}]``) by name."""
    lookup: dict[str, Mapping[str, Any]] = {}
    for entry in arguments or []:
        if not isinstance(entry, Mapping) or not entry.get("name"):
            debug(f"Argument without a name: {entry!r}")
            continue
        lookup[str(entry["name"])] = entry
    return lookup


def full_type_descriptor(value: Any) -> Any:
    """Rewrite a Full-view ``{type, elementType}`` pair into Console type syntax.

    Example::

        >>> full_type_descriptor({"type": "vector", "elementType": "string"})
        'vector of string'

    Values of any other shape are returned unchanged.
    """
    if isinstance(value, Mapping) and "type" in value and set(value) <= {"type", "elementType"}:
        kind = value.get("type") or ""
        element = value.get("elementType") or ""
        if kind == "vector":
            return ARRAY_PREFIX + element
        if kind == "map":
            return MAP_PREFIX + element
        return kind
    return value


# ---------------------------------------------------------------------------
# Operation pieces
# ---------------------------------------------------------------------------


def operation_tags(full: FullFunction, options: TranslationOptions) -> list[str]:
    tags = [tag for tag in full.tags if tag not in options.ignored_tags]
    return tags or [options.default_tag]


def is_deprecated(full: FullFunction, console: Optional[ConsoleFunction] = None) -> bool:
    """True for an explicit marker or "deprecated" anywhere in the description/help."""
    if full.deprecated:
        return True
    texts = [full.description, full.help]
    if console is not None:
        texts += [console.description, console.help]
    return any(text and "deprecated" in text.lower() for text in texts)


def operation_description(
    full: FullFunction,
    console: Optional[ConsoleFunction] = None,
) -> Optional[str]:
    description = full.description or (console.description if console else None)
    help_text = full.help or (console.help if console else None)
    if description and help_text and help_text.strip() != description.strip():
        return f"{description}\n\n{help_text}"
    return description or help_text or None


def response_schema(
    returns: Any,
    overrides: Optional[Mapping[str, str]] = None,
) -> Optional[dict[str, Any]]:
    """Schema of a declared return type, or ``None`` when nothing is returned.

    A bare string is translated as a type; a wrapper mapping names a type by
    its first key.
    """
    if returns is None or returns == "":
        return None
    if isinstance(returns, Mapping):
        return reference_schema(reference_name(returns), overrides)
    return translate_type(returns, overrides)


def build_responses(
    returns: Any,
    overrides: Optional[Mapping[str, str]] = None,
    options: Optional[TranslationOptions] = None,
) -> dict[str, Any]:
    options = options or TranslationOptions()
    responses: dict[str, Any] = {}
    schema = response_schema(returns, overrides)
    if schema is None:
        responses[options.success_status] = {"description": "Returns nothing"}
    else:
        responses[options.success_status] = {
            "description": "Success",
            "content": {_JSON: {"schema": schema}},
        }
    responses["401"] = {"$ref": _UNAUTHORIZED_REF}
    if options.include_forbidden_response:
        responses["403"] = {"$ref": _FORBIDDEN_REF}
    return responses


# ---------------------------------------------------------------------------
# Endpoint translation
# ---------------------------------------------------------------------------


def translate_endpoint(
    full: FullFunction,
    console: Optional[ConsoleFunction],
    overrides: Optional[Mapping[str, str]] = None,
    options: Optional[TranslationOptions] = None,
) -> Optional[tuple[str, str, dict[str, Any]]]:
    """Translate one joined function into an OpenAPI operation.

    Args:
        full: The Full-view entry.
        console: The Console-view entry, or ``None`` when there is none.
        overrides: Raw type name -> output name.
        options: Status-code and tag policy; defaults apply when ``None``.

    Returns:
        ``(url_template, method, operation)`` -- or ``None`` when the
        function has no console entry, no URL, or no HTTP method.
    """
    options = options or TranslationOptions()
    if console is None:
        warning(f"No console entry for {full.name}, skipping")
        return None
    url = normalize_url_template(console.url or "").strip()
    if not url:
        warning(f"No URL found for {full.name}, skipping")
        return None
    if not console.http_method:
        warning(f"No HTTP method for {full.name} ({url}), skipping")
        return None
    method = console.http_method.strip().lower()

    console_args = console_argument_lookup(console.arguments)
    full_args = full_argument_lookup(full.arguments)
    debug(f"{method.upper()} {url} <- {full.name}")

    parameters: list[dict[str, Any]] = []
    request_body: Optional[dict[str, Any]] = None
    path_names: set[str] = set()

    for param in parse_usage(console.usage, console.url, method, known_arguments=console_args):
        arg = console_args[param.name]
        description = _argument_description(arg, full_args.get(param.name))
        schema = translate_type(_argument_type(arg, full_args.get(param.name)), overrides)

        if param.placement == ParameterPlacement.BODY:
            if request_body is not None:
                warning(f"{full.name} declares more than one body argument; using {param.name}")
            request_body = {}
            if description:
                request_body["description"] = description
            if arg.get("optional") is False:
                request_body["required"] = True
            request_body["content"] = {_JSON: {"schema": schema}}
            continue

        entry: dict[str, Any] = {"in": param.placement.value, "name": param.name}
        if description:
            entry["description"] = description
        entry["schema"] = schema
        if param.placement == ParameterPlacement.PATH:
            entry["required"] = True
            path_names.add(param.name)
        elif arg.get("optional") is False:
            entry["required"] = True
        parameters.append(entry)

    for name in template_variables(url):
        if name in path_names:
            continue
        debug(f"{full.name}: declaring path variable {{{name}}} missing from the usage string")
        arg = console_args.get(name, {})
        entry = {"in": "path", "name": name}
        description = _argument_description(arg, full_args.get(name))
        if description:
            entry["description"] = description
        arg_type = _argument_type(arg, full_args.get(name))
        entry["schema"] = translate_type(arg_type, overrides) if arg_type is not None else {"type": "string"}
        entry["required"] = True
        parameters.append(entry)
        path_names.add(name)

    operation: dict[str, Any] = {"operationId": full.name}
    description = operation_description(full, console)
    if description:
        operation["description"] = description
    operation["tags"] = operation_tags(full, options)
    operation["deprecated"] = is_deprecated(full, console)
    operation["parameters"] = parameters
    if request_body is not None:
        operation["requestBody"] = request_body

    returns = console.returns
    if returns is None:
        returns = full_type_descriptor(full.returns)
    operation["responses"] = build_responses(returns, overrides, options)
    return url, method, operation


def _argument_description(
    console_arg: Mapping[str, Any],
    full_arg: Optional[Mapping[str, Any]],
) -> Optional[str]:
    description = console_arg.get("description")
    if not description and full_arg:
        description = full_arg.get("description")
    return description or None


def _argument_type(
    console_arg: Mapping[str, Any],
    full_arg: Optional[Mapping[str, Any]],
) -> Any:
    if "type" in console_arg:
        return console_arg["type"]
    if full_arg and "type" in full_arg:
        return full_type_descriptor(full_arg["type"])
    return None


# ---------------------------------------------------------------------------
# Paths catalogue
# ---------------------------------------------------------------------------


def build_paths(
    console_help: Mapping[str, Any],
    full_help: Mapping[str, Any],
    overrides: Optional[Mapping[str, str]] = None,
    options: Optional[TranslationOptions] = None,
) -> dict[str, dict[str, dict[str, Any]]]:
    """Build the ``paths`` object from the Console and Full help payloads.

    Returns:
        URL template -> lowercase HTTP method -> operation. Path items
        appear in the order their first function appears in the Full
        catalogue.
    """
    paths: dict[str, dict[str, dict[str, Any]]] = {}
    for function in join_functions(console_help, full_help):
        result = translate_endpoint(function.full, function.console, overrides, options)
        if result is None:
            continue
        url, method, operation = result
        item = paths.setdefault(url, {})
        if method in item:
            warning(
                f"{method.upper()} {url} is already provided by "
                f"{item[method]['operationId']}; replacing it with {function.name}"
            )
        item[method] = operation
    return paths
