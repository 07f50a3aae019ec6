"""Configuration management for shellgate."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRIVILEGED_COMMANDS = [
    "apt",
    "apt-get",
    "dnf",
    "yum",
    "pacman",
    "zypper",
    "systemctl",
    "mount",
    "umount",
    "useradd",
    "usermod",
]

DEFAULT_PROCESSORS = [
    ("ff", "open_file"),
    ("man", "documentation"),
    ("eval", "expression"),
    ("calc", "calculator"),
]


class Settings(BaseSettings):
    """Application settings."""

    # Pipeline
    preprocessors: list[str] = Field(
        default_factory=lambda: ["substitution", "credential_prefix", "relabel"],
        description="Ordered preprocessor names",
    )
    processors: list[tuple[str, str]] = Field(
        default_factory=lambda: list(DEFAULT_PROCESSORS),
        description="Command name to processor kind; the first entry for a name wins",
    )
    noop_token: str = Field(default="", description="Text sent to the shell when nothing should run")

    # Built-in preprocessors
    privileged_commands: list[str] = Field(default_factory=lambda: list(DEFAULT_PRIVILEGED_COMMANDS))
    elevation_prefix: str = Field(default="sudo", description="Prefix injected before privileged commands")
    substitution_sigil: str = Field(default="<", description="Single character rewritten at line start")
    substitution_command: str = Field(default="cat", description="Command the sigil expands to")
    relabel_seeds: dict[str, str] = Field(default_factory=dict, description="Command name to session label seed")
    label_template: str = Field(default="*{seed}-shell*", description="Template of the default naming function")

    # Session
    shell_label: str = Field(default="*shell*", description="Initial session label")
    workspace_path: Path | None = Field(None, description="Working directory for forwarded commands")

    # Plugins and logging
    load_plugins: bool = Field(default=True, description="Load plugins from the 'shellgate' entry point group")
    log_level: str = Field(default="INFO", description="Log level")

    model_config = SettingsConfigDict(
        env_prefix="SHELLGATE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("substitution_sigil")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1 or value.isspace():
            raise ValueError("substitution_sigil must be one non-space character")
        return value

    @field_validator("label_template")
    @classmethod
    def _formats_with_seed_only(cls, value: str) -> str:
        if "{seed}" not in value:
            raise ValueError("label_template must contain '{seed}'")
        try:
            value.format(seed="x")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"label_template must only use the {{seed}} field: {exc!s}") from exc
        return value


def get_settings(**overrides: object) -> Settings:
    """Build settings from the environment, ``.env`` and explicit overrides."""

    return Settings(**overrides)
