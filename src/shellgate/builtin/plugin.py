"""Builtin plugin contributing the default handlers."""

from __future__ import annotations

from shellgate.builtin.preprocessors import CredentialPrefix, SessionRelabel, SubstitutionRewrite, label_from_template
from shellgate.builtin.processors import (
    CalculatorProcessor,
    DocumentationProcessor,
    ExpressionProcessor,
    OpenFileProcessor,
)
from shellgate.config import Settings
from shellgate.hookspecs import hookimpl
from shellgate.host import HostServices
from shellgate.types import Preprocessor, Processor


class BuiltinPlugin:
    @hookimpl
    def provide_preprocessors(self, settings: Settings, services: HostServices) -> dict[str, Preprocessor]:
        naming = services.naming or label_from_template(settings.label_template)
        return {
            "credential_prefix": CredentialPrefix(settings.privileged_commands, prefix=settings.elevation_prefix),
            "substitution": SubstitutionRewrite(settings.substitution_sigil, settings.substitution_command),
            "relabel": SessionRelabel(settings.relabel_seeds, naming),
        }

    @hookimpl
    def provide_processors(self, settings: Settings, services: HostServices) -> dict[str, Processor]:
        _ = settings
        return {
            "open_file": OpenFileProcessor(services.opener),
            "documentation": DocumentationProcessor(services.viewer),
            "expression": ExpressionProcessor(services.evaluate),
            "calculator": CalculatorProcessor(services.calculate),
        }


plugin = BuiltinPlugin()
