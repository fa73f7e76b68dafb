"""nexusdl CLI — Typer-based command-line interface.

Provides the ``nexusdl`` command with ``run`` (configuration file or
configuration server) and ``get`` (single artifact from options).

All output uses Rich for formatted terminal display.
"""
