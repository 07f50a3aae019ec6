from __future__ import annotations

from dataclasses import dataclass

from shellgate.chain import ChainEntry, PreprocessorChain
from shellgate.session import Session
from shellgate.types import Abort, Continue


@dataclass
class Probe:
    """Counts invocations and applies a fixed rewrite."""

    suffix: str = ""
    result: str | None = None
    calls: int = 0

    def __call__(self, command: str, session: Session) -> str | None:
        _ = session
        self.calls += 1
        if self.result is not None:
            return self.result
        return command + self.suffix


def test_chain_is_left_fold(session: Session) -> None:
    chain = PreprocessorChain()
    chain.append("a", Probe(suffix="-a"))
    chain.append("b", Probe(suffix="-b"))
    chain.append("c", Probe(suffix="-c"))

    assert chain.run("cmd", session) == Continue("cmd-a-b-c")


def test_empty_chain_passes_command_through(session: Session) -> None:
    assert PreprocessorChain().run("ls -la", session) == Continue("ls -la")


def test_empty_result_aborts_and_skips_later_steps(session: Session) -> None:
    first = Probe(suffix="-a")
    veto = Probe(result="")
    later = Probe(suffix="-c")
    chain = PreprocessorChain()
    chain.append("first", first)
    chain.append("veto", veto)
    chain.append("later", later)

    result = chain.run("cmd", session)

    assert isinstance(result, Abort)
    assert result.step == "veto"
    assert (first.calls, veto.calls, later.calls) == (1, 1, 0)


def test_none_result_aborts(session: Session) -> None:
    later = Probe()
    chain = PreprocessorChain()
    chain.append("none", lambda command, session: None)
    chain.append("later", later)

    assert isinstance(chain.run("cmd", session), Abort)
    assert later.calls == 0


def test_raising_step_aborts_without_touching_chain(session: Session) -> None:
    def broken(command: str, session: Session) -> str:
        raise RuntimeError("boom")

    later = Probe()
    chain = PreprocessorChain()
    chain.append("broken", broken)
    chain.append("later", later)

    result = chain.run("cmd", session)

    assert isinstance(result, Abort)
    assert "boom" in result.reason
    assert later.calls == 0
    assert chain.names() == ["broken", "later"]


def test_mutations_are_seen_by_next_run(session: Session) -> None:
    chain = PreprocessorChain()
    chain.append("a", Probe(suffix="-a"))
    chain.append("b", Probe(suffix="-b"))
    assert chain.run("x", session) == Continue("x-a-b")

    chain.move("b", 0)
    assert chain.names() == ["b", "a"]
    assert chain.run("x", session) == Continue("x-b-a")

    chain.insert(1, "c", Probe(suffix="-c"))
    assert chain.run("x", session) == Continue("x-b-c-a")

    assert chain.remove("b") is True
    assert chain.remove("missing") is False
    assert chain.run("x", session) == Continue("x-c-a")
    assert "c" in chain
    assert len(chain) == 2

    chain.replace([ChainEntry("z", Probe(suffix="-z"))])
    assert chain.run("x", session) == Continue("x-z")

    chain.clear()
    assert chain.run("x", session) == Continue("x")
