"""Application-level exception types for shellgate."""

from __future__ import annotations


class ShellGateError(Exception):
    """Base exception for shellgate."""


class ConfigurationError(ShellGateError):
    """Base exception for configuration and assembly errors."""


class UnknownPreprocessorError(ConfigurationError):
    """Raised when the configured chain names a preprocessor nobody provides."""


class UnknownProcessorError(ConfigurationError):
    """Raised when the configured mapping names a processor kind nobody provides."""


class HandlerFault(ShellGateError):
    """Raised when an evaluator delegated to by a processor fails."""

    def __init__(self, processor: str, error: Exception) -> None:
        super().__init__(f"{processor}: {error!s}")
        self.processor = processor
        self.error = error
