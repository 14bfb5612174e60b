"""
Entry point for a map-reduce query: validate the terms, then hand the
phase list to the flow engine.
"""
from __future__ import annotations

from typing import Any, Callable, List, Optional

import structlog

from .backends.local import FlowEngine, LocalFlowEngine
from .config import QueryConfig, load_query
from .errors import BadQueryTerm, QuerySpecError
from .ir import Rejected
from .resolver import StorageClient
from .validator import check_query_syntax

log = structlog.get_logger(__name__)


def _query_terms(query: Any) -> List[Any]:
    if isinstance(query, dict):
        return load_query(query)
    query = list(query)
    # any JSON phase means the whole query is in JSON form
    if any(isinstance(phase, dict) for phase in query):
        return load_query(query)
    return query


def effective_timeout(timeout: int, config: Optional[QueryConfig] = None) -> int:
    buffer = (config or QueryConfig()).timeout_buffer
    return int(timeout * buffer)


def start(
    node: Any,
    client: Any,
    req_id: Any,
    query: Any,
    result_transformer: Optional[Callable[..., Any]] = None,
    timeout: Optional[int] = None,
    *,
    engine: Optional[FlowEngine] = None,
    storage: Optional[StorageClient] = None,
    config: Optional[QueryConfig] = None,
) -> Any:
    """
    Validate ``query`` and create a flow for it.

    Returns whatever the engine's new_flow returns, or Rejected(term)
    when a term is invalid; nothing reaches the engine in that case.
    """
    config = config or QueryConfig()
    if timeout is None:
        timeout = config.default_timeout
    flow_timeout = effective_timeout(timeout, config)

    try:
        phases = check_query_syntax(_query_terms(query), storage)
    except QuerySpecError as exc:
        log.warning("query.rejected", req_id=req_id, reason="bad_qterm", term=repr(exc.phase), error=str(exc))
        return Rejected(term=exc.phase)
    except BadQueryTerm as exc:
        log.warning("query.rejected", req_id=req_id, reason=exc.reason, term=repr(exc.term))
        return Rejected(term=exc.term)

    engine = engine or LocalFlowEngine()
    return engine.new_flow(node, client, req_id, phases, result_transformer, flow_timeout)
