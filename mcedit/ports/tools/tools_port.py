"""
Port and types for tools exposed to protocol clients.
"""

from abc import ABC, abstractmethod
from typing import TypedDict


class ToolSpec(TypedDict):
    """Specification for a tool that can be called by a client."""

    name: str
    description: str
    inputSchema: dict[str, object]  # JSON Schema
    outputSchema: dict[str, object]  # JSON Schema


class ToolsHandlerPort(ABC):
    """
    Port interface for handling client tools.

    This port exposes available tools and dispatches tool invocations to the file
    service, the project analyzer and the diff generator.
    """

    @abstractmethod
    def available_tools(self) -> list[ToolSpec]:
        """
        Get a list of available tools.

        Returns:
            List of tool specifications
        """
        pass

    @abstractmethod
    def dispatch(self, name: str, arguments: dict[str, object]) -> object:
        """
        Dispatch a tool invocation to the appropriate use case.

        Args:
            name: Name of the tool to invoke
            arguments: Arguments to pass to the tool

        Returns:
            Result of the tool invocation

        Raises:
            ValueError: If the tool name is unknown
            ToolArgumentsError: If the arguments fail validation
            ToolExecutionError: If the tool fails while running
        """
        pass
