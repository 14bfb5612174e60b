"""
Checks query terms and turns them into phase definitions.

Terms are checked in order and the first invalid one rejects the whole
query; no partial phase list is ever returned.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, List, Optional

from .errors import BadQueryTerm, FetchError
from .ir import (
    ExecutionTarget,
    InlineFunction,
    ModuleFunction,
    PhaseDefinition,
    PhaseKind,
    QueryTerm,
    RemoteFunctionName,
    RemoteSourceText,
    RemoteStoredSource,
    SourceText,
)
from .registry import phase_behavior, phase_executor
from .resolver import StorageClient, fetch_source

NATIVE = "python"
SCRIPTING = "javascript"


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_text(value: Any) -> bool:
    return isinstance(value, (str, bytes))


def _resolve_target(term: QueryTerm, storage: Optional[StorageClient]) -> ExecutionTarget:
    ref = term.function
    if isinstance(ref, ModuleFunction) and _is_name(ref.module) and _is_name(ref.function):
        return ExecutionTarget(NATIVE, term)
    if isinstance(ref, InlineFunction) and callable(ref.handle):
        return ExecutionTarget(NATIVE, term)
    if isinstance(ref, SourceText) and _is_text(ref.text):
        return ExecutionTarget(NATIVE, term)
    if isinstance(ref, RemoteSourceText) and _is_text(ref.text):
        return ExecutionTarget(SCRIPTING, term)
    if isinstance(ref, RemoteFunctionName) and _is_name(ref.name):
        return ExecutionTarget(SCRIPTING, term)
    if isinstance(ref, RemoteStoredSource) and isinstance(ref.bucket, str) and isinstance(ref.key, str):
        try:
            source = fetch_source(storage, ref.bucket, ref.key)
        except FetchError as exc:
            raise BadQueryTerm(term) from exc
        # stored source is always scripting code, never compiled here
        return ExecutionTarget(SCRIPTING, replace(term, function=RemoteSourceText(source)))
    raise BadQueryTerm(term)


def check_term(term: Any, storage: Optional[StorageClient] = None) -> PhaseDefinition:
    if not isinstance(term, QueryTerm) or not isinstance(term.kind, PhaseKind):
        raise BadQueryTerm(term)
    if not isinstance(term.accumulate, bool):
        raise BadQueryTerm(term)

    if term.kind is PhaseKind.LINK:
        target = ExecutionTarget(NATIVE, term)
    else:
        target = _resolve_target(term, storage)

    return PhaseDefinition(
        executor=phase_executor(term.kind),
        behaviors=phase_behavior(term.kind, term.accumulate),
        target=target,
    )


def check_query_syntax(terms: Iterable[Any], storage: Optional[StorageClient] = None) -> List[PhaseDefinition]:
    """
    Validate every term, in order, and return one PhaseDefinition per term.

    Raises BadQueryTerm carrying the first invalid term as submitted.
    """
    return [check_term(term, storage) for term in terms]
