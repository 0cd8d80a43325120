from dataclasses import dataclass, field

import pytest

from snowcore.container import (
    Container,
    DependencyNotFoundError,
    FactoryNotFoundError,
    app,
)


def test_set_singleton():
    app.set_singleton("di1", "1")
    app.set_singleton("di2", 2)
    assert app.get_singleton("di1") == "1"
    assert app.get_singleton("di3") is None


def test_string_and_tags():
    app.set_singleton("di1", "1")
    app.set_singleton("di2", 2)
    name_str = str(app)
    assert name_str
    assert "di1" in name_str and "di2" in name_str

    assert app.is_singleton("di1") is True
    assert app.is_prototype("snow-test") is False
    assert app.inject_name("snow-test,snow-test111") == "snow-test"

    app.set_prototype("snow", lambda: None)
    assert app.get_prototype("snow") is None
    assert "snow" in str(app).split("factories:")[1]

    assert app.inject_name("") == ""
    assert app.is_singleton("prototype") is False
    assert app.is_prototype("prototype") is True


def test_get_prototype_unknown():
    with pytest.raises(FactoryNotFoundError, match="factory not found"):
        Container().get_prototype("missing")


def test_get_prototype_builds_new_each_time():
    c = Container()
    c.set_prototype("list", list)
    first = c.get_prototype("list")
    second = c.get_prototype("list")
    assert first == [] and second == []
    assert first is not second


def test_str_lists_nil_singleton():
    c = Container()
    c.set_singleton("empty", None)
    assert "  empty: <nil> <nil>" in str(c).splitlines()


@dataclass
class _Service:
    shared: object = field(default=None, metadata={"di": "shared"})
    fresh: object = field(default=None, metadata={"di": "fresh,prototype"})
    plain: int = 0


def test_ensure_injects_dataclass_fields():
    c = Container()
    c.set_singleton("shared", "one")
    c.set_prototype("fresh", dict)
    svc = _Service()
    c.ensure(svc)
    assert svc.shared == "one"
    assert svc.fresh == {}
    assert svc.plain == 0


def test_ensure_with_class_tags():
    class Holder:
        __di__ = {"dep": "dep"}
        dep = None

    c = Container()
    c.set_singleton("dep", 5)
    holder = Holder()
    c.ensure(holder)
    assert holder.dep == 5


def test_ensure_missing_singleton():
    c = Container()
    c.set_prototype("fresh", dict)
    with pytest.raises(DependencyNotFoundError, match="shared dependency not found"):
        c.ensure(_Service())


def test_ensure_missing_factory():
    c = Container()
    c.set_singleton("shared", "one")
    with pytest.raises(FactoryNotFoundError):
        c.ensure(_Service())