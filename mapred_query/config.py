"""
Configuration of a query: runtime defaults and loading the JSON form of
a query that users submit.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import os
from typing import Any, Dict, List

from .errors import QuerySpecError
from .ir import (
    LinkSpec,
    ModuleFunction,
    PhaseKind,
    QueryTerm,
    RemoteFunctionName,
    RemoteSourceText,
    RemoteStoredSource,
    SourceText,
)

DEFAULT_TIMEOUT_MS = 60000


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class QueryConfig:
    default_timeout: int = field(default_factory=lambda: _env_int("MAPRED_DEFAULT_TIMEOUT", DEFAULT_TIMEOUT_MS))
    timeout_buffer: float = 1.1  # headroom for validation and flow setup


def _function_ref(kind: str, spec: Dict[str, Any], phase: Any) -> Any:
    language = spec.get("language")
    if language == "python":
        if "module" in spec and "function" in spec:
            return ModuleFunction(module=spec["module"], function=spec["function"])
        if "source" in spec:
            return SourceText(text=spec["source"])
    elif language == "javascript":
        if "source" in spec:
            return RemoteSourceText(text=spec["source"])
        if "name" in spec:
            return RemoteFunctionName(name=spec["name"])
        if "bucket" in spec and "key" in spec:
            return RemoteStoredSource(bucket=spec["bucket"], key=spec["key"])
    else:
        raise QuerySpecError(f"Unknown language {language!r} in {kind} phase", phase)
    raise QuerySpecError(f"No function given for {language} {kind} phase", phase)


def load_query(d: List[Dict[str, Any]]) -> List[QueryTerm]:
    if not isinstance(d, list):
        raise QuerySpecError(f"Query must be a list of phases, got {type(d).__name__}", d)

    terms = []
    for i, phase in enumerate(d):
        if not isinstance(phase, dict) or len(phase) != 1:
            raise QuerySpecError(f"Phase {i} must be an object with exactly one key", phase)
        (kind_name, spec), = phase.items()
        try:
            kind = PhaseKind(kind_name)
        except ValueError:
            raise QuerySpecError(f"Unknown phase type {kind_name!r} at phase {i}", phase) from None
        if not isinstance(spec, dict):
            raise QuerySpecError(f"Phase {i} ({kind_name}) must be an object", phase)

        # the last phase is kept unless told otherwise
        keep = spec.get("keep", i == len(d) - 1)
        if kind is PhaseKind.LINK:
            terms.append(QueryTerm(
                kind=kind,
                arg=LinkSpec(bucket=spec.get("bucket", "_"), tag=spec.get("tag", "_")),
                accumulate=keep,
            ))
        else:
            terms.append(QueryTerm(
                kind=kind,
                function=_function_ref(kind_name, spec, phase),
                arg=spec.get("arg"),
                accumulate=keep,
            ))
    return terms
