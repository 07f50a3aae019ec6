from __future__ import annotations

from pathlib import Path

import pytest

from shellgate.host import HostServices, RecordingChannel
from shellgate.session import Session

SHELL_LABEL = "*shell*"


@pytest.fixture
def host() -> HostServices:
    return HostServices.in_memory(SHELL_LABEL)


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def session(host: HostServices, channel: RecordingChannel, tmp_path: Path) -> Session:
    return Session(
        label=SHELL_LABEL,
        channel=channel,
        contexts=host.contexts,
        output=host.output,
        directory=host.directory,
        cwd=tmp_path,
    )
