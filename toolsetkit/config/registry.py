"""
Tool declaration registry.

Holds the ordered, validated list of tools for one invocation. Validation
happens at construction, before any probe or install runs.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from toolsetkit.core.exceptions import DuplicateToolError, UnknownToolError
from toolsetkit.tools.models import ToolSpec

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Ordered collection of ToolSpec with unique names.

    Order is installation order. No tool depends on another, so order only
    affects how the report reads.

    Example:
        >>> registry = ToolRegistry(default_tool_specs())
        >>> registry.names()
        ['pre-commit', 'cargo-deny', 'typos', 'git-cliff', 'cargo-nextest']
    """

    def __init__(self, specs: Iterable[ToolSpec]):
        """
        Initialize registry.

        Args:
            specs: Tool declarations in installation order

        Raises:
            DuplicateToolError: If two declarations share a name
        """
        self._specs: List[ToolSpec] = []
        seen = set()
        for spec in specs:
            if spec.name in seen:
                raise DuplicateToolError(spec.name)
            seen.add(spec.name)
            self._specs.append(spec)
        logger.debug(f"Registry loaded with {len(self._specs)} tool(s)")

    def list(self) -> List[ToolSpec]:
        """Return the tool declarations in installation order."""
        return list(self._specs)

    def names(self) -> List[str]:
        return [spec.name for spec in self._specs]

    def get(self, name: str) -> Optional[ToolSpec]:
        for spec in self._specs:
            if spec.name == name:
                return spec
        return None

    def select(self, names: Optional[Sequence[str]]) -> List[ToolSpec]:
        """
        Return a subset of tools, keeping registry order.

        Args:
            names: Tool names to keep (None or empty keeps all)

        Returns:
            Selected tool declarations

        Raises:
            UnknownToolError: If a name is not declared
        """
        if not names:
            return self.list()

        known = set(self.names())
        for name in names:
            if name not in known:
                raise UnknownToolError(name, self.names())

        wanted = set(names)
        return [spec for spec in self._specs if spec.name in wanted]

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._specs)
