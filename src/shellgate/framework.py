"""Assemble the pipeline from settings and plugins."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pluggy
from loguru import logger

from shellgate.builtin.plugin import plugin as builtin_plugin
from shellgate.chain import PreprocessorChain
from shellgate.config import Settings, get_settings
from shellgate.errors import UnknownPreprocessorError, UnknownProcessorError
from shellgate.hook_runtime import HookRuntime
from shellgate.hookspecs import SHELLGATE_HOOK_NAMESPACE, ShellGateHookSpecs
from shellgate.host import HostServices, ShellChannel
from shellgate.registry import ProcessorRegistry
from shellgate.runner import PipelineConfig, PipelineRunner
from shellgate.session import Session
from shellgate.types import Preprocessor, Processor

ENTRY_POINT_GROUP = "shellgate"


class ShellGate:
    """Owns the plugin manager, the host services and the shared pipeline config."""

    def __init__(self, settings: Settings | None = None, services: HostServices | None = None) -> None:
        self.settings = settings or get_settings()
        self.services = services or HostServices.in_memory(self.settings.shell_label)
        self._plugin_manager = pluggy.PluginManager(SHELLGATE_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(ShellGateHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        self._plugin_manager.register(builtin_plugin, name="builtin")
        self._failed_plugins: dict[str, str] = {}
        self._config: PipelineConfig | None = None

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    @property
    def config(self) -> PipelineConfig:
        if self._config is None:
            self._config = self.build_config()
        return self._config

    def load_plugins(self) -> None:
        """Register third-party plugins from the ``shellgate`` entry point group."""

        if not self.settings.load_plugins:
            return
        try:
            loaded = self._plugin_manager.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception as exc:
            self._failed_plugins[ENTRY_POINT_GROUP] = str(exc)
            logger.opt(exception=True).warning("plugin.load_failed group={}", ENTRY_POINT_GROUP)
            return
        logger.debug("plugin.loaded group={} count={}", ENTRY_POINT_GROUP, loaded)
        self._config = None

    def register_plugin(self, plugin: object, *, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)
        self._config = None

    def build_config(self) -> PipelineConfig:
        """Resolve the configured chain order and command mapping into a new config."""

        preprocessors = self._collect("provide_preprocessors")
        chain = PreprocessorChain()
        for name in self.settings.preprocessors:
            step: Preprocessor | None = preprocessors.get(name)
            if step is None:
                raise UnknownPreprocessorError(f"unknown preprocessor: {name}")
            chain.append(name, step)

        kinds = self._collect("provide_processors")
        registry = ProcessorRegistry()
        for command_name, kind in self.settings.processors:
            processor: Processor | None = kinds.get(kind)
            if processor is None:
                raise UnknownProcessorError(f"unknown processor kind for {command_name}: {kind}")
            registry.register(command_name, processor)

        self._hook_runtime.call_many(
            "register_processors",
            registry=registry,
            settings=self.settings,
            services=self.services,
        )
        return PipelineConfig(chain=chain, registry=registry, noop_token=self.settings.noop_token)

    def create_runner(self) -> PipelineRunner:
        return PipelineRunner(self.config)

    def create_session(self, channel: ShellChannel, *, label: str | None = None, cwd: Path | None = None) -> Session:
        resolved_label = label or self.settings.shell_label
        return Session(
            label=resolved_label,
            channel=channel,
            contexts=self.services.contexts,
            output=self.services.output,
            directory=self.services.directory,
            shell_context=self.settings.shell_label,
            cwd=(cwd or self.settings.workspace_path or Path.cwd()).resolve(),
        )

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()

    def _collect(self, hook_name: str) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for provided in self._hook_runtime.call_many(hook_name, settings=self.settings, services=self.services):
            if not isinstance(provided, dict):
                logger.warning("hook.bad_result hook={} type={}", hook_name, type(provided).__name__)
                continue
            for name, handler in provided.items():
                merged.setdefault(name, handler)
        return merged
