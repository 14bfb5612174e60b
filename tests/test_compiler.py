import pytest

from mapred_query import CompilationError, define_anon, define_anon_erl


def test_define_anon_from_str():
    fun = define_anon("lambda x: x + 1")
    assert fun(2) == 3


def test_define_anon_from_bytes():
    fun = define_anon(b"lambda value, key_data, arg: [value * arg]")
    assert fun(3, None, 2) == [6]


def test_define_anon_uses_safe_builtins():
    fun = define_anon("lambda values, _kd, _arg: [sum(len(v) for v in values)]")
    assert fun(["ab", "cde"], None, None) == [5]


def test_define_anon_erl_alias():
    assert define_anon_erl is define_anon


@pytest.mark.parametrize(
    "source",
    [
        "lambda x: (x + 1",
        "x + 1",
        "lambda x: x, lambda y: y",
        "",
        "import os",
    ],
)
def test_define_anon_rejects_malformed(source):
    with pytest.raises(CompilationError):
        define_anon(source)


@pytest.mark.parametrize(
    "source",
    [
        "lambda: __import__('os')",
        "lambda: ().__class__.__bases__",
        "lambda x: '{0.__class__}'.format(x)",
        "lambda: open('/etc/passwd')",
        "lambda x: (y := x)",
        "lambda l=[]: l.append(x.gi_frame.f_back.f_back.f_globals for x in l) or list(l[0])",
        "lambda g: g.gi_code",
        "lambda e: e.tb_frame.f_globals",
    ],
)
def test_define_anon_rejects_unsafe(source):
    with pytest.raises((CompilationError, NameError)):
        define_anon(source)()


def test_unknown_names_are_not_bound():
    fun = define_anon("lambda: open")
    with pytest.raises(NameError):
        fun()


def test_define_anon_rejects_non_text():
    with pytest.raises(CompilationError):
        define_anon(42)


def test_frame_walk_is_rejected_at_compile_time():
    source = "lambda l=[]: l.append(x.gi_frame.f_back.f_back.f_globals for x in l) or list(l[0])"
    with pytest.raises(CompilationError) as excinfo:
        define_anon(source)
    assert "Attribute not allowed" in str(excinfo.value)


def test_allowed_attributes_still_work():
    fun = define_anon("lambda v, kd, a: [w.lower() for w in v.get('text', '').split()]")
    assert fun({"text": "Map Reduce"}, None, None) == ["map", "reduce"]
