"""Tests for bindparams.binding.resolver — path then query, with coercion."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from bindparams.binding.inspector import shape_plan
from bindparams.binding.kinds import Float32, Int8, Uint8
from bindparams.binding.resolver import resolve_flat
from bindparams.config import BindingConfig
from bindparams.errors import CoercionError, UnknownParameterError
from bindparams.http.query import QueryParams

LENIENT = BindingConfig()


@dataclass
class Filters:
    id: int = 0
    name: str = ""
    active: bool = False
    ratio: float = 0.0
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Frozen:
    page: int
    ids: tuple[int, ...]


@dataclass
class Sized:
    small: Int8 = 0
    byte: Uint8 = 0
    half: Float32 = 0.0


@dataclass
class WithDefaults:
    page: int = 1
    label: str = "all"
    seq: Sequence[int] = field(default_factory=lambda: [9])


def _no_path(name: str) -> str:
    return ""


def _path(**params: str):
    def lookup(name: str) -> str:
        return params.get(name, "")

    return lookup


def _resolve(cls: type, query: str = "", path=_no_path, config: BindingConfig = LENIENT):
    return resolve_flat(shape_plan(cls), QueryParams(query), path, config)


class TestPrecedence:
    def test_path_wins_over_query(self) -> None:
        result = _resolve(Filters, "id=99", _path(id="7"))
        assert result.id == 7

    def test_query_used_when_path_empty(self) -> None:
        result = _resolve(Filters, "id=99", _path(id=""))
        assert result.id == 99

    def test_lookup_called_with_external_name(self) -> None:
        @dataclass
        class Aliased:
            post_id: int = field(default=0, metadata={"name": "postId"})

        seen: list[str] = []

        def lookup(name: str) -> str:
            seen.append(name)
            return "5"

        assert _resolve(Aliased, path=lookup).post_id == 5
        assert seen == ["postId"]

    def test_path_value_for_sequence_field(self) -> None:
        result = _resolve(Filters, "tags=a&tags=b", _path(tags="x"))
        assert result.tags == ["x"]

    def test_unparsable_path_value_does_not_fall_back_to_query(self) -> None:
        result = _resolve(Filters, "id=99", _path(id="abc"))
        assert result.id == 0


class TestQuery:
    def test_scalar_takes_first_value(self) -> None:
        assert _resolve(Filters, "name=first&name=second").name == "first"

    def test_sequence_takes_all_values_in_order(self) -> None:
        assert _resolve(Filters, "tags=c&tags=a&tags=b").tags == ["c", "a", "b"]

    def test_bracket_suffix_stripped(self) -> None:
        assert _resolve(Filters, "tags[]=a&tags[]=b").tags == ["a", "b"]

    def test_first_matching_key_wins(self) -> None:
        # "tags" and "tags[]" normalize to the same key; only the first is read.
        assert _resolve(Filters, "tags=a&tags[]=b&tags=c").tags == ["a", "c"]

    def test_unmatched_sequence_is_empty_list(self) -> None:
        result = _resolve(Filters)
        assert result.tags == []
        assert isinstance(result.tags, list)

    def test_unmatched_sequence_ignores_default_factory(self) -> None:
        assert list(_resolve(WithDefaults).seq) == []

    def test_unmatched_scalar_keeps_default(self) -> None:
        result = _resolve(WithDefaults)
        assert result.page == 1
        assert result.label == "all"

    def test_unknown_keys_ignored(self) -> None:
        assert _resolve(Filters, "nope=1&id=2").id == 2

    def test_tuple_field_and_frozen_shape(self) -> None:
        result = _resolve(Frozen, "page=3&ids=1&ids=2")
        assert result == Frozen(page=3, ids=(1, 2))

    def test_fresh_sequence_per_call(self) -> None:
        first = _resolve(Filters)
        second = _resolve(Filters)
        assert first.tags is not second.tags


class TestCoercion:
    def test_primitives(self) -> None:
        result = _resolve(Filters, "id=1234&name=hello&active=true&ratio=2.5e1")
        assert result == Filters(id=1234, name="hello", active=True, ratio=25.0)

    @pytest.mark.parametrize("source", ["path", "query"])
    def test_empty_string_leaves_zero(self, source: str) -> None:
        if source == "path":
            result = _resolve(WithDefaults, path=_path(page=""))
        else:
            result = _resolve(WithDefaults, "page=&label=")
        assert result.page == 1
        assert result.label == "all"

    def test_empty_values_in_sequence_become_zero(self) -> None:
        assert list(_resolve(WithDefaults, "seq=1&seq=&seq=3").seq) == [1, 0, 3]

    def test_malformed_values_silently_zeroed(self) -> None:
        # Lenient policy: unparsable numbers and booleans leave the zero
        # value without any error. BindingConfig(strict_coercion=True)
        # turns these into CoercionError.
        result = _resolve(Filters, "id=12abc&active=yes&ratio=fast")
        assert result.id == 0
        assert result.active is False
        assert result.ratio == 0.0

    def test_malformed_value_keeps_declared_default(self) -> None:
        assert _resolve(WithDefaults, "page=two").page == 1

    def test_malformed_sequence_element_keeps_length(self) -> None:
        assert list(_resolve(WithDefaults, "seq=1&seq=x&seq=3").seq) == [1, 0, 3]

    def test_sized_kinds(self) -> None:
        result = _resolve(Sized, "small=-128&byte=255&half=0.1")
        assert result.small == -128
        assert result.byte == 255
        assert result.half != 0.1
        assert result.half == pytest.approx(0.1)

    def test_sized_overflow_zeroed(self) -> None:
        result = _resolve(Sized, "small=128&byte=-1")
        assert result.small == 0
        assert result.byte == 0


class TestStrictPolicies:
    def test_strict_coercion_raises(self) -> None:
        config = BindingConfig(strict_coercion=True)
        with pytest.raises(CoercionError) as exc_info:
            _resolve(Filters, "id=abc", config=config)
        err = exc_info.value
        assert err.field == "id"
        assert err.value == "abc"
        assert err.kind == "int"
        assert err.status == 400

    def test_strict_coercion_still_skips_empty(self) -> None:
        config = BindingConfig(strict_coercion=True)
        assert _resolve(Filters, "id=", config=config).id == 0

    def test_reject_duplicate_scalars(self) -> None:
        config = BindingConfig(reject_duplicate_scalars=True)
        with pytest.raises(CoercionError, match="takes one value"):
            _resolve(Filters, "id=1&id=2", config=config)

    def test_duplicates_fine_for_sequences(self) -> None:
        config = BindingConfig(reject_duplicate_scalars=True)
        assert _resolve(Filters, "tags=a&tags=b", config=config).tags == ["a", "b"]

    def test_reject_unknown_query_keys(self) -> None:
        config = BindingConfig(reject_unknown_query_keys=True)
        with pytest.raises(UnknownParameterError) as exc_info:
            _resolve(Filters, "id=1&extra=2", config=config)
        assert exc_info.value.key == "extra"

    def test_known_keys_with_brackets_accepted(self) -> None:
        config = BindingConfig(reject_unknown_query_keys=True)
        assert _resolve(Filters, "TAGS[]=a", config=config).tags == ["a"]
