import pytest


class FakeObject:
    def __init__(self, value):
        self.value = value


class FakeStorage:
    """Dict-backed storage client that records every read."""

    def __init__(self, data=None, fail=False):
        self.data = data or {}
        self.fail = fail
        self.calls = []

    def get(self, bucket, key, r=2):
        self.calls.append((bucket, key, r))
        if self.fail:
            raise TimeoutError("storage timeout")
        if (bucket, key) not in self.data:
            raise KeyError("notfound")
        return FakeObject(self.data[(bucket, key)])


class RecordingEngine:
    def __init__(self):
        self.flows = []

    def new_flow(self, node, client, req_id, phases, result_transformer, timeout):
        self.flows.append((node, client, req_id, phases, result_transformer, timeout))
        return ("flow", req_id)


@pytest.fixture
def storage():
    return FakeStorage({("js", "mapper"): b"function(v) { return [v.values[0].data]; }"})


@pytest.fixture
def make_storage():
    return FakeStorage


@pytest.fixture
def engine():
    return RecordingEngine()
