"""Dashboard sections and the in-memory state keyed by them."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Section(str, Enum):
    """One of the three independent dashboard data domains."""

    COMMUNITY = "community"
    PRODUCTS = "products"
    FINANCE = "finance"

    @property
    def source_tag(self) -> str:
        """Source identifier sent with every webhook request for this section."""
        return f"dashboard-{self.value}"


# Names used by the upstream automation and older cache records
_LEGACY_NAMES = {
    "comunidade": Section.COMMUNITY,
    "produtos": Section.PRODUCTS,
    "financeiro": Section.FINANCE,
}

DashboardState = dict[Section, Any]


def parse_section(name: str | Section) -> Section:
    """Resolve a section from its value or legacy upstream name.

    Raises:
        ValueError: If *name* is not a known section.
    """
    if isinstance(name, Section):
        return name
    key = name.strip().lower()
    if key in _LEGACY_NAMES:
        return _LEGACY_NAMES[key]
    try:
        return Section(key)
    except ValueError:
        raise ValueError(f"Unknown dashboard section: {name!r}") from None


def empty_state() -> DashboardState:
    """State with every section absent."""
    return {section: None for section in Section}


def state_to_json(state: DashboardState) -> dict[str, Any]:
    return {section.value: state.get(section) for section in Section}


def state_from_json(data: dict[str, Any]) -> DashboardState:
    """Build a full state from a JSON mapping, ignoring unknown keys."""
    state = empty_state()
    for key, payload in data.items():
        try:
            section = parse_section(key)
        except ValueError:
            continue
        state[section] = payload
    return state
