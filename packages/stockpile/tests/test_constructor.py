import abc
import collections
import logging

import pytest

from stockpile.construction import (
    ConstructionError,
    ConstructorCapability,
    DefaultConstructor,
    MethodNotFoundError,
    ReflectionCache,
    TypeResolutionError,
    VisibilityError,
)


class Service:
    label = "service"

    def __init__(self, name: str, *, retries: int = 1) -> None:
        self.name = name
        self.retries = retries

    def run(self):
        return self.name

    def _helper(self):
        return None

    @staticmethod
    def version():
        return 1


class Base(abc.ABC):
    @abc.abstractmethod
    def go(self): ...


class _Hidden:
    pass


def test_default_constructor_satisfies_protocol():
    assert isinstance(DefaultConstructor(), ConstructorCapability)


def test_resolve_type_id_for_classes_and_names():
    ctor = DefaultConstructor()

    assert ctor.resolve_type_id(collections.OrderedDict) == "collections:OrderedDict"
    assert ctor.resolve_type_id("collections.OrderedDict") == "collections:OrderedDict"
    assert ctor.resolve_type_id("collections/OrderedDict") == "collections:OrderedDict"
    assert ctor.resolve_type_id(Service) == f"{__name__}:Service"


def test_resolve_type_id_rejects_other_values():
    with pytest.raises(TypeError):
        DefaultConstructor().resolve_type_id(42)


def test_resolve_type_id_malformed_name_raises_resolution_error():
    with pytest.raises(TypeResolutionError):
        DefaultConstructor().resolve_type_id("NoModule")


def test_strict_type_ids_import_names_eagerly():
    lenient = DefaultConstructor()
    strict = DefaultConstructor(strict_type_ids=True)

    assert lenient.resolve_type_id("nowhere.Missing") == "nowhere:Missing"
    with pytest.raises(TypeResolutionError):
        strict.resolve_type_id("nowhere.Missing")


def test_construct_passes_args_and_kwargs():
    ctor = DefaultConstructor()
    type_id = ctor.resolve_type_id(Service)

    svc = ctor.construct(type_id, ["api"], {"retries": 3})

    assert isinstance(svc, Service)
    assert (svc.name, svc.retries) == ("api", 3)


def test_construct_local_class_registered_by_object():
    class Local:
        def __init__(self, value):
            self.value = value

    ctor = DefaultConstructor()
    type_id = ctor.resolve_type_id(Local)

    assert "<locals>" in type_id
    assert ctor.construct(type_id, [5]).value == 5


@pytest.mark.parametrize(
    "args, kwargs",
    [
        ((), {}),
        (("a", "b"), {}),
        (("a",), {"unknown": 1}),
    ],
)
def test_construct_bad_arguments_raise_construction_error(args, kwargs):
    ctor = DefaultConstructor()
    type_id = ctor.resolve_type_id(Service)

    with pytest.raises(ConstructionError):
        ctor.construct(type_id, args, kwargs)


def test_construct_wraps_type_error_raised_inside_constructor():
    class Picky:
        def __init__(self, value):
            if not isinstance(value, int):
                raise TypeError("value must be int")

    ctor = DefaultConstructor()
    type_id = ctor.resolve_type_id(Picky)

    with pytest.raises(ConstructionError, match="value must be int"):
        ctor.construct(type_id, ["nope"])


def test_construct_abstract_and_private_types_fail():
    ctor = DefaultConstructor()

    with pytest.raises(ConstructionError, match="abstract"):
        ctor.construct(ctor.resolve_type_id(Base))
    with pytest.raises(ConstructionError, match="NOT for public"):
        ctor.construct(ctor.resolve_type_id(_Hidden))


def test_construct_non_class_target_fails():
    ctor = DefaultConstructor()

    with pytest.raises(TypeResolutionError):
        ctor.construct("os.path:join")
    with pytest.raises(TypeResolutionError):
        ctor.construct("collections:NoSuchThing")


def test_reflection_cache_is_reused():
    cache = ReflectionCache()
    ctor = DefaultConstructor(cache=cache)

    ctor.construct("collections:OrderedDict")
    descriptor = cache.get("collections:OrderedDict")
    ctor.construct("collections:OrderedDict")

    assert "collections:OrderedDict" in cache
    assert cache.get("collections:OrderedDict") is descriptor
    assert len(cache) == 1


def test_reflection_cache_rebinds_when_class_changes(caplog):
    cache = ReflectionCache()

    class First:
        pass

    class Second:
        pass

    cache.register("demo:Thing", First)
    with caplog.at_level(logging.WARNING, logger="stockpile.construction.reflection"):
        cache.register("demo:Thing", Second)

    assert cache.get("demo:Thing").cls is Second
    assert "rebound" in caplog.text


def test_unimportable_type_id_must_be_passed_as_class():
    ctor = DefaultConstructor()

    def make():
        class Local:
            pass

        return Local

    type_id = DefaultConstructor().resolve_type_id(make())

    assert "#" in type_id
    with pytest.raises(TypeResolutionError, match="not importable"):
        ctor.construct(type_id)


def test_check_public_method():
    ctor = DefaultConstructor()
    type_id = ctor.resolve_type_id(Service)

    ctor.check_public_method(type_id, "run")
    ctor.check_public_method(type_id, "version")
    ctor.check_public_method(type_id, "__init__")

    with pytest.raises(VisibilityError, match="NOT for public"):
        ctor.check_public_method(type_id, "_helper")
    with pytest.raises(VisibilityError, match="not callable"):
        ctor.check_public_method(type_id, "label")
    with pytest.raises(MethodNotFoundError):
        ctor.check_public_method(type_id, "missing")
    # a missing method is still a visibility failure for broad handlers
    with pytest.raises(VisibilityError):
        ctor.check_public_method(type_id, "missing")
