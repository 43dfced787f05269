from __future__ import annotations

from typing import Dict

from .interface import ElevatorView, SearchFunction, Trip
from .nearest import assign, candidates, is_candidate, search, step

__all__ = [
    "ElevatorView",
    "SearchFunction",
    "Trip",
    "assign",
    "candidates",
    "get_search",
    "is_candidate",
    "search",
    "step",
]


SEARCH_REGISTRY: Dict[str, SearchFunction] = {
    "nearest": search,
}


def get_search(name: str) -> SearchFunction:
    func = SEARCH_REGISTRY.get(name.lower())
    if func is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(SEARCH_REGISTRY)}")
    return func
