"""Shared plumbing for CLI commands: settings, services and output helpers."""

from __future__ import annotations

import json
from typing import Any

import click

from quikprint.infrastructure.bootstrap import Services, build_services
from quikprint.infrastructure.config import Settings


class CliState:
    """Held in ``ctx.obj``; services are built on first use."""

    def __init__(self, settings: Settings, services: Services | None = None) -> None:
        self.settings = settings
        self._services = services

    @property
    def services(self) -> Services:
        if self._services is None:
            self._services = build_services(self.settings)
        return self._services


pass_state = click.make_pass_decorator(CliState)


def parse_options(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse repeated ``key=value`` pairs into a configuration mapping.

    Values are read as JSON when possible (``10``, ``true``, ``2.5``) and
    kept as plain text otherwise (``gloss``).
    """
    config: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid option '{pair}'. Expected 'key=value'.", param_hint="--option"
            )
        key, raw = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"Missing key in '{pair}'.", param_hint="--option")
        try:
            config[key] = json.loads(raw)
        except ValueError:
            config[key] = raw
    return config
