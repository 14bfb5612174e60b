import threading

import pytest

from mapred_query import (
    InlineFunction,
    LocalFlowEngine,
    ModuleFunction,
    PhaseDefinition,
    check_query_syntax,
    map_phase,
    reduce_phase,
)
from mapred_query.util import thaw_phases


class LockedFun:
    def __init__(self):
        self.lock = threading.Lock()

    def __call__(self, value, key_data, arg):
        return [value]


def test_new_flow_freezes_phases():
    phases = check_query_syntax([
        map_phase(InlineFunction(lambda v, kd, a: [v * a]), arg=2),
        reduce_phase(ModuleFunction("builtins", "sorted"), accumulate=True),
    ])
    handle = LocalFlowEngine().new_flow("n", "c", 1, phases, None, 1100)
    assert handle.phases == tuple(phases)
    assert handle.timeout == 1100

    thawed = thaw_phases(handle.payload)
    assert [p.executor for p in thawed] == ["map_phase", "reduce_phase"]
    assert thawed[0].target.term.function.handle(3, None, 2) == [6]
    assert thawed[1] == phases[1]


def test_new_flow_rejects_unpicklable_phase():
    phases = check_query_syntax([map_phase(InlineFunction(LockedFun()))])
    with pytest.raises(TypeError):
        LocalFlowEngine().new_flow("n", "c", 1, phases, None, 1100)


def test_new_flow_rejects_unknown_executor():
    with pytest.raises(KeyError):
        LocalFlowEngine().new_flow("n", "c", 1, [PhaseDefinition(executor="shuffle_phase")], None, 1100)
