"""Execution layer: external programs and hosted models."""

from .agent_runner import CodexAgent
from .command_runner import CommandRunner
from .llm_client import AnthropicClient

__all__ = [
    "AnthropicClient",
    "CodexAgent",
    "CommandRunner",
]
