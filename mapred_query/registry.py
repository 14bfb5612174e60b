"""
Maps a phase kind to the executor that runs it and the behaviours it carries.
"""
from __future__ import annotations
from typing import Any, Dict, Tuple
from .ir import ACCUMULATE, Behavior, Converge, PhaseKind

MAP_EXECUTOR = "map_phase"
REDUCE_EXECUTOR = "reduce_phase"

_EXECUTORS: Dict[PhaseKind, str] = {
    PhaseKind.LINK: MAP_EXECUTOR,
    PhaseKind.MAP: MAP_EXECUTOR,
    PhaseKind.REDUCE: REDUCE_EXECUTOR,
}

REDUCE_CONVERGE = Converge(arity=2)


def _phase_kind(kind: Any) -> PhaseKind:
    try:
        return PhaseKind(kind)
    except ValueError:
        raise KeyError(f"Unknown phase kind '{kind}'") from None


def phase_executor(kind: PhaseKind) -> str:
    return _EXECUTORS[_phase_kind(kind)]


def phase_behavior(kind: PhaseKind, accumulate: bool) -> Tuple[Behavior, ...]:
    """
    Behaviour flags for a phase. Reduce phases always converge their
    inputs; accumulate comes first when set.
    """
    if _phase_kind(kind) is PhaseKind.REDUCE:
        if accumulate:
            return (ACCUMULATE, REDUCE_CONVERGE)
        return (REDUCE_CONVERGE,)
    return (ACCUMULATE,) if accumulate else ()
