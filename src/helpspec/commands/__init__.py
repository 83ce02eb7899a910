"""Built-in CLI sub-commands for helpspec.

* :mod:`~helpspec.commands.generate` -- introspect and write the OpenAPI
  document.
* :mod:`~helpspec.commands.dump` -- save the raw payloads for offline runs.
* :mod:`~helpspec.commands.inspect` -- tabular views of functions and types.
* :mod:`~helpspec.commands.config` -- show or initialise settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``generate``).
"""
