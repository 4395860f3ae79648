"""Unit tests for value type inference and preprocessing."""

import pytest
from datetime import datetime
from decimal import Decimal

from autotable.database.utils.type_mapping import ColumnType, TypeMapper


class TestInferType:
    """Test mapping of runtime values to column types."""

    @pytest.mark.parametrize("value,expected", [
        (datetime(2024, 1, 2, 3, 4, 5), ColumnType.DATETIME),
        (42, ColumnType.INT),
        (-7, ColumnType.INT),
        (3.5, ColumnType.FLOAT),
        (True, ColumnType.BOOLEAN_AS_TINYINT),
        (False, ColumnType.BOOLEAN_AS_TINYINT),
        ("hello", ColumnType.VARCHAR),
        ("", ColumnType.VARCHAR),
        ({'nested': [1, 2]}, ColumnType.TEXT),
        ([1, 2, 3], ColumnType.TEXT),
        (None, ColumnType.TEXT),
        (Decimal('1.5'), ColumnType.TEXT),
    ])
    def test_infer_type(self, value, expected):
        """Test each value shape maps to its column type."""
        assert TypeMapper.infer_type(value) == expected

    def test_bool_is_not_int(self):
        """Test booleans are not mistaken for integers."""
        assert TypeMapper.infer_type(True) != ColumnType.INT

    def test_string_length_boundary(self):
        """Test 255 characters stay VARCHAR and 256 become TEXT."""
        assert TypeMapper.infer_type('a' * 255) == ColumnType.VARCHAR
        assert TypeMapper.infer_type('a' * 256) == ColumnType.TEXT

    def test_length_counts_characters(self):
        """Test multi-byte characters count once each."""
        assert TypeMapper.infer_type('ж' * 255) == ColumnType.VARCHAR

    def test_deterministic(self):
        """Test repeated inference gives the same answer."""
        values = [1, 1.0, 'x', 'x' * 300, True, None, datetime(2024, 1, 1), {'a': 1}]
        first = [TypeMapper.infer_type(v) for v in values]
        second = [TypeMapper.infer_type(v) for v in values]
        assert first == second

    def test_infer_types_keeps_order(self):
        """Test record inference keeps key order."""
        types = TypeMapper.infer_types({'b': 1, 'a': 'x', 'c': 2.0})
        assert list(types) == ['b', 'a', 'c']
        assert types['a'] == ColumnType.VARCHAR

    def test_column_type_compares_as_string(self):
        """Test column types compare equal to their declared spelling."""
        assert ColumnType.VARCHAR == 'VARCHAR(255)'
        assert ColumnType.BOOLEAN_AS_TINYINT == 'TINYINT(1)'
        assert str(ColumnType.TEXT) == 'TEXT'


class TestPreprocess:
    """Test conversion of values to their bind representation."""

    def test_boolean_to_int(self):
        """Test booleans become 0/1."""
        assert TypeMapper.preprocess({'active': True}) == {'active': 1}
        assert TypeMapper.preprocess({'active': False}) == {'active': 0}

    def test_timestamp_format(self):
        """Test timestamps render as YYYY-MM-DD HH:MM:SS."""
        result = TypeMapper.preprocess({'at': datetime(2024, 1, 2, 3, 4, 5)})
        assert result == {'at': '2024-01-02 03:04:05'}

    def test_scalars_pass_through(self):
        """Test other scalars are unchanged."""
        record = {'n': 3, 'f': 1.5, 's': 'text', 'none': None}
        assert TypeMapper.preprocess(record) == record

    def test_nested_values_serialized(self):
        """Test nested structures are stored as JSON text."""
        result = TypeMapper.preprocess({'tags': ['a', 'b'], 'meta': {'k': 1}})
        assert result == {'tags': '["a", "b"]', 'meta': '{"k": 1}'}

    def test_unknown_objects_become_text(self):
        """Test objects without a scalar mapping are stringified."""
        assert TypeMapper.preprocess_value(Decimal('2.50')) == '2.50'

    def test_preserves_key_order(self):
        """Test the processed record keeps insertion order."""
        result = TypeMapper.preprocess({'z': True, 'a': 1, 'm': 'x'})
        assert list(result) == ['z', 'a', 'm']

    def test_does_not_mutate_input(self):
        """Test the input mapping is left untouched."""
        record = {'active': True}
        TypeMapper.preprocess(record)
        assert record == {'active': True}
