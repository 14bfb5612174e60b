from .ir import (
    ACCUMULATE,
    Accumulate,
    Converge,
    ExecutionTarget,
    FlowHandle,
    InlineFunction,
    LinkSpec,
    ModuleFunction,
    PhaseDefinition,
    PhaseKind,
    QueryTerm,
    Rejected,
    RemoteFunctionName,
    RemoteSourceText,
    RemoteStoredSource,
    SourceText,
    link_phase,
    map_phase,
    reduce_phase,
)
from .errors import BadQueryTerm, CompilationError, FetchError, QueryError, QuerySpecError
from .config import QueryConfig, load_query
from .compiler import define_anon, define_anon_erl
from .registry import phase_behavior, phase_executor
from .resolver import fetch_source, resolve_callable
from .validator import check_query_syntax
from .driver import effective_timeout, start
from .backends.local import LocalFlowEngine
from .logging import setup_logging
