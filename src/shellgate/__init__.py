"""shellgate - rewrite or intercept shell commands before they run."""

from shellgate.chain import PreprocessorChain
from shellgate.framework import ShellGate
from shellgate.registry import ProcessorRegistry
from shellgate.runner import PipelineConfig, PipelineRunner
from shellgate.session import Session
from shellgate.tokenizer import tokenize
from shellgate.types import Abort, Continue, PipelineOutcome, RunState, TokenizedCommand

__version__ = "0.1.0"

__all__ = [
    "Abort",
    "Continue",
    "PipelineConfig",
    "PipelineOutcome",
    "PipelineRunner",
    "PreprocessorChain",
    "ProcessorRegistry",
    "RunState",
    "Session",
    "ShellGate",
    "TokenizedCommand",
    "tokenize",
]
