"""
Resolves function references into something a phase can use.

- stored scripting source is read from storage with a read quorum of one
- native targets become callables for phase executors
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

import structlog

from .compiler import define_anon
from .errors import FetchError
from .ir import ExecutionTarget, InlineFunction, ModuleFunction, SourceText
from .util import load_callable

log = structlog.get_logger(__name__)

READ_QUORUM = 1


class StorageClient(Protocol):
    def get(self, bucket: str, key: str, r: int = ...) -> Any: ...


def fetch_source(storage: Optional[StorageClient], bucket: str, key: str) -> Any:
    """
    Read the stored source at bucket/key. Any failure is a FetchError.
    """
    if storage is None:
        raise FetchError(bucket, key, "no storage client")
    try:
        obj = storage.get(bucket, key, r=READ_QUORUM)
    except Exception as exc:
        log.warning("query.fetch_failed", bucket=bucket, key=key, error=str(exc))
        raise FetchError(bucket, key) from exc

    value = getattr(obj, "value", obj)
    if value is None or value == b"" or value == "":
        log.warning("query.fetch_failed", bucket=bucket, key=key, error="not found")
        raise FetchError(bucket, key, "not found")
    return value


def resolve_callable(target: ExecutionTarget) -> Callable[..., Any]:
    """
    Callable for a native execution target, called by phase executors
    as fun(value, key_data, arg). Source text is compiled here, so a
    CompilationError surfaces to the executor.
    """
    if target.language != "python":
        raise TypeError(f"Target language {target.language!r} is run by the scripting runtime, not locally")

    ref = target.term.function
    if isinstance(ref, ModuleFunction):
        return load_callable(f"{ref.module}:{ref.function}")
    if isinstance(ref, InlineFunction):
        return ref.handle
    if isinstance(ref, SourceText):
        return define_anon(ref.text)
    raise TypeError(f"Cannot resolve a callable for {ref!r}")
