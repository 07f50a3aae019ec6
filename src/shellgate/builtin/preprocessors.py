"""Built-in preprocessors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from shellgate.session import Session
from shellgate.tokenizer import tokenize
from shellgate.types import Naming


class CredentialPrefix:
    """Prepend an elevation prefix to privileged commands."""

    def __init__(self, privileged: Iterable[str], *, prefix: str = "sudo") -> None:
        self._privileged = [item.strip() for item in privileged if item.strip()]
        self._prefix = prefix

    def __call__(self, command: str, session: Session) -> str:
        _ = session
        stripped = command.lstrip()
        first_word = tokenize(stripped).name
        if first_word is None or first_word == self._prefix:
            return command
        if any(self._matches(stripped, privileged) for privileged in self._privileged):
            return f"{self._prefix} {stripped}"
        return command

    @staticmethod
    def _matches(command: str, privileged: str) -> bool:
        if not command.startswith(privileged):
            return False
        rest = command[len(privileged) :]
        return not rest or rest[0].isspace()


class SubstitutionRewrite:
    """Expand a leading sigil into a full command name, e.g. ``<file`` to ``cat file``."""

    def __init__(self, sigil: str = "<", replacement: str = "cat") -> None:
        self._sigil = sigil
        self._replacement = replacement

    def __call__(self, command: str, session: Session) -> str:
        _ = session
        if not command.startswith(self._sigil):
            return command
        return f"{self._replacement} {command[len(self._sigil) :]}"


def label_from_template(template: str) -> Naming:
    """Build a naming function that formats ``seed`` into ``template``."""

    def _naming(seed: str) -> str | None:
        if not seed:
            return None
        return template.format(seed=seed)

    return _naming


class SessionRelabel:
    """Rename the session when a configured command is run.

    Unlike the other steps this one has a side effect: the new label
    persists after the triggering command completes. A label collision
    vetoes the command.
    """

    def __init__(self, seeds: Mapping[str, str], naming: Naming) -> None:
        self._seeds = dict(seeds)
        self._naming = naming

    @property
    def seeds(self) -> dict[str, str]:
        return dict(self._seeds)

    def __call__(self, command: str, session: Session) -> str | None:
        name = tokenize(command).name
        if name is None or name not in self._seeds:
            return command

        candidate = self._naming(self._seeds[name])
        if not candidate or candidate == session.label:
            return command
        if session.directory.label_in_use(candidate):
            session.diagnostic(f"A session named {candidate} already exists")
            return None

        logger.debug("relabel.rename command={} candidate={}", name, candidate)
        session.rename(candidate)
        return command
