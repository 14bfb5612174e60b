"""
This module defines the Intermediate Representation of a map-reduce query.
It contains:
- Query terms - the phases a user submits (link, map, reduce)
- Function references - how a map or reduce phase names its logic
- Phase definitions - validated phases ready for the flow engine
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union


class PhaseKind(str, Enum):
    LINK = "link"
    MAP = "map"
    REDUCE = "reduce"


# Function references

@dataclass(frozen=True)
class ModuleFunction:
    module: str
    function: str


@dataclass(frozen=True)
class InlineFunction:
    handle: Callable[..., Any]


@dataclass(frozen=True)
class SourceText:
    text: Union[str, bytes]


@dataclass(frozen=True)
class RemoteSourceText:
    text: Union[str, bytes]


@dataclass(frozen=True)
class RemoteFunctionName:
    name: str


@dataclass(frozen=True)
class RemoteStoredSource:
    bucket: str
    key: str


FunctionReference = Union[
    ModuleFunction,
    InlineFunction,
    SourceText,
    RemoteSourceText,
    RemoteFunctionName,
    RemoteStoredSource,
]


@dataclass(frozen=True)
class LinkSpec:
    bucket: str = "_"
    tag: str = "_"


@dataclass(frozen=True)
class QueryTerm:
    kind: PhaseKind
    function: Optional[Any] = None   # FunctionReference for map/reduce, None for link
    arg: Any = None                  # opaque, a LinkSpec for link terms
    accumulate: bool = False


def link_phase(bucket: str = "_", tag: str = "_", accumulate: bool = False) -> QueryTerm:
    return QueryTerm(kind=PhaseKind.LINK, arg=LinkSpec(bucket=bucket, tag=tag), accumulate=accumulate)


def map_phase(function: Any, arg: Any = None, accumulate: bool = False) -> QueryTerm:
    return QueryTerm(kind=PhaseKind.MAP, function=function, arg=arg, accumulate=accumulate)


def reduce_phase(function: Any, arg: Any = None, accumulate: bool = False) -> QueryTerm:
    return QueryTerm(kind=PhaseKind.REDUCE, function=function, arg=arg, accumulate=accumulate)


# Behaviour flags

@dataclass(frozen=True)
class Accumulate:
    pass


@dataclass(frozen=True)
class Converge:
    arity: int = 2


ACCUMULATE = Accumulate()

Behavior = Union[Accumulate, Converge]


@dataclass(frozen=True)
class ExecutionTarget:
    language: str   # "python" or "javascript"
    term: QueryTerm


@dataclass(frozen=True)
class PhaseDefinition:
    executor: str
    behaviors: Tuple[Behavior, ...] = ()
    target: Optional[ExecutionTarget] = None


@dataclass(frozen=True)
class Rejected:
    term: Any
    reason: str = "bad_qterm"


@dataclass
class FlowHandle:
    node: Any
    client: Any
    req_id: Any
    phases: Tuple[PhaseDefinition, ...]
    result_transformer: Optional[Callable[..., Any]]
    timeout: int
    payload: bytes = field(default=b"", repr=False)
