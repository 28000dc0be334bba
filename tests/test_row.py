"""Tests for Row and column addressing."""

import dataclasses

import pytest

from stepcursor.errors import ColumnIndexError, ConversionError, UnknownColumnError
from stepcursor.row import ColumnName, Position, Row, as_row_index
from stepcursor.value import Value


def _make_row() -> Row:
    return Row(
        values=(Value.integer(7), Value.text("ada"), Value.real(9.5)),
        names=("id", "name", "score"),
    )


class TestPositional:
    def test_last_column(self):
        assert _make_row().value_at(2) == Value.real(9.5)

    def test_one_past_end(self):
        with pytest.raises(ColumnIndexError) as exc_info:
            _make_row().value_at(3)
        assert exc_info.value.index == 3

    def test_huge_index(self):
        with pytest.raises(ColumnIndexError):
            _make_row().value_at(2**64 - 1)

    def test_negative_index_is_out_of_range(self):
        with pytest.raises(ColumnIndexError):
            _make_row().value_at(-1)

    def test_column_index_error_is_index_error(self):
        with pytest.raises(IndexError):
            _make_row().value_at(10)


class TestByName:
    def test_column_index(self):
        assert _make_row().column_index("name") == 1

    def test_missing_name(self):
        with pytest.raises(UnknownColumnError) as exc_info:
            _make_row().column_index("missing")
        assert exc_info.value.name == "missing"

    def test_value_at_name(self):
        assert _make_row().value_at("name") == Value.text("ada")

    def test_duplicate_names_first_wins(self):
        row = Row(values=(Value.integer(1), Value.integer(2)), names=("x", "x"))
        assert row.column_index("x") == 0
        assert row.value_at("x") == Value.integer(1)

    def test_names_are_case_sensitive(self):
        with pytest.raises(UnknownColumnError):
            _make_row().value_at("Name")


class TestDecodeAt:
    def test_decode_by_name(self):
        assert _make_row().decode_at("score", float) == 9.5

    def test_decode_by_position(self):
        assert _make_row().decode_at(0, int) == 7

    def test_decode_mismatch(self):
        with pytest.raises(ConversionError):
            _make_row().decode_at("name", int)

    def test_decode_bad_index(self):
        with pytest.raises(ColumnIndexError):
            _make_row().decode_at(5, int)


class TestRowIndex:
    def test_explicit_variants(self):
        row = _make_row()
        assert row.value_at(Position(1)) == Value.text("ada")
        assert row.value_at(ColumnName("id")) == Value.integer(7)

    def test_dispatch(self):
        assert as_row_index(2) == Position(2)
        assert as_row_index("id") == ColumnName("id")

    def test_other_index_types_rejected(self):
        class Last:
            def resolve(self, row):
                return row.column_count() - 1

        with pytest.raises(TypeError):
            _make_row().value_at(Last())

    def test_resolved_index_is_bounds_checked(self):
        class Wrapped(Position):
            def resolve(self, row):
                return self.index

        row = Row.from_values([1, 2, 3])
        with pytest.raises(ColumnIndexError) as exc_info:
            row.value_at(Wrapped(-1))
        assert exc_info.value.index == -1
        with pytest.raises(ColumnIndexError):
            row.value_at(Wrapped(3))

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            _make_row().value_at(True)

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            _make_row().value_at(1.0)


class TestValueOnlyRows:
    """Rows built from raw values carry no column names."""

    def test_positional_access_works(self):
        row = Row.from_values([1, "two", None, b"\x03"])
        assert row.column_count() == 4
        assert row.value_at(1) == Value.text("two")
        assert row.value_at(2) == Value.null()
        assert row.value_at(3) == Value.blob(b"\x03")
        assert row.names == ()

    def test_name_access_fails(self):
        row = Row.from_values([1])
        with pytest.raises(UnknownColumnError):
            row.column_index("id")


class TestRowShape:
    def test_column_count(self):
        assert _make_row().column_count() == 3
        assert len(_make_row()) == 3

    def test_getitem_returns_payload(self):
        row = _make_row()
        assert row["name"] == "ada"
        assert row[0] == 7

    def test_iter_and_keys(self):
        row = _make_row()
        assert list(row) == [7, "ada", 9.5]
        assert row.keys() == ["id", "name", "score"]

    def test_mismatched_names_rejected(self):
        with pytest.raises(ValueError):
            Row(values=(Value.integer(1),), names=("a", "b"))

    def test_immutable(self):
        row = _make_row()
        with pytest.raises(dataclasses.FrozenInstanceError):
            row.values = ()

    def test_empty_row(self):
        row = Row(values=())
        assert row.column_count() == 0
        with pytest.raises(ColumnIndexError):
            row.value_at(0)
