"""
Builds flows in-process for a validated phase list.
- freezes the phase list with cloudpickle so it can be shipped to workers
- checks every phase names a known executor
- returns a FlowHandle; running the phases is left to the executors
"""
from __future__ import annotations
from typing import Any, Callable, Optional, Protocol, Sequence

import structlog

from ..ir import FlowHandle, PhaseDefinition
from ..registry import MAP_EXECUTOR, REDUCE_EXECUTOR
from ..util import freeze_phases

log = structlog.get_logger(__name__)

_KNOWN_EXECUTORS = {MAP_EXECUTOR, REDUCE_EXECUTOR}


class FlowEngine(Protocol):
    def new_flow(
        self,
        node: Any,
        client: Any,
        req_id: Any,
        phases: Sequence[PhaseDefinition],
        result_transformer: Optional[Callable[..., Any]],
        timeout: int,
    ) -> Any: ...


class LocalFlowEngine:
    def new_flow(self, node, client, req_id, phases, result_transformer, timeout) -> FlowHandle:
        for i, phase in enumerate(phases):
            if phase.executor not in _KNOWN_EXECUTORS:
                raise KeyError(f"No executor registered for phase {i}: '{phase.executor}'")

        try:
            payload = freeze_phases(phases)
        except Exception as exc:
            raise TypeError(f"Phase list for request {req_id!r} cannot be serialized: {exc}") from exc

        for i, phase in enumerate(phases):
            log.debug(
                "flow.phase",
                req_id=req_id,
                index=i,
                executor=phase.executor,
                language=phase.target.language if phase.target else None,
                behaviors=[type(b).__name__ for b in phase.behaviors],
            )
        log.info("flow.created", req_id=req_id, node=node, phases=len(phases), timeout=timeout)

        return FlowHandle(
            node=node,
            client=client,
            req_id=req_id,
            phases=tuple(phases),
            result_transformer=result_transformer,
            timeout=timeout,
            payload=payload,
        )
