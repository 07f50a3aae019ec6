"""Pluggy hook namespace and plugin hook specifications."""

from __future__ import annotations

import pluggy

from shellgate.config import Settings
from shellgate.host import HostServices
from shellgate.registry import ProcessorRegistry
from shellgate.types import Preprocessor, Processor

SHELLGATE_HOOK_NAMESPACE = "shellgate"
hookspec = pluggy.HookspecMarker(SHELLGATE_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(SHELLGATE_HOOK_NAMESPACE)


class ShellGateHookSpecs:
    """Hook contract for shellgate plugins."""

    @hookspec
    def provide_preprocessors(self, settings: Settings, services: HostServices) -> dict[str, Preprocessor] | None:
        """Provide named preprocessors that the configured chain may reference."""

    @hookspec
    def provide_processors(self, settings: Settings, services: HostServices) -> dict[str, Processor] | None:
        """Provide processor kinds that the configured command mapping may reference."""

    @hookspec
    def register_processors(self, registry: ProcessorRegistry, settings: Settings, services: HostServices) -> None:
        """Register processors directly, after the configured mapping."""

    @hookspec
    def on_error(self, stage: str, error: Exception) -> None:
        """Observe plugin errors from any stage."""
