"""
Tests for the Key and Checkpoint value objects.

Validates:
- Column order and structural equality of keys
- Construction-time validation of key columns
- Immutability of checkpoints
- Checkpoint persistence helpers
"""

from datetime import date

import pytest

from driving_keys.core.exceptions import MappingError
from driving_keys.core.key import Checkpoint, Key


def test_key_preserves_column_order_and_types():
    """Test that a Key keeps result-set column order and value types."""
    key = Key({"id": 2, "region": "EU", "placed_on": date(2024, 3, 1)})

    assert key.columns == ("id", "region", "placed_on")
    assert key.values == (2, "EU", date(2024, 3, 1))
    assert key["id"] == 2
    assert isinstance(key["placed_on"], date)
    assert list(key) == ["id", "region", "placed_on"]
    assert len(key) == 3


def test_key_accepts_pairs():
    """Test that a Key can be built from (name, value) pairs."""
    assert Key([("id", 1), ("region", "US")]) == Key({"id": 1, "region": "US"})


def test_key_equality_is_ordered():
    """Test that the same columns in a different order make a different key."""
    assert Key({"id": 1, "region": "EU"}) != Key({"region": "EU", "id": 1})
    assert Key({"id": 1, "region": "EU"}) != Key({"id": 2, "region": "EU"})


def test_key_is_hashable():
    """Test that keys can be used in sets to detect duplicates."""
    keys = {Key({"id": 1}), Key({"id": 1}), Key({"id": 2})}
    assert len(keys) == 2


def test_key_is_immutable():
    """Test that a key cannot be modified after creation."""
    key = Key({"id": 1})

    with pytest.raises(TypeError):
        key["id"] = 2

    with pytest.raises(AttributeError):
        key.extra = "value"

    # as_dict() returns a copy
    copy = key.as_dict()
    copy["id"] = 99
    assert key["id"] == 1


def test_key_missing_column_raises_key_error():
    """Test that looking up an unknown column raises KeyError."""
    key = Key({"id": 1})

    assert "id" in key
    assert "region" not in key
    with pytest.raises(KeyError):
        key["region"]


def test_key_rejects_empty_columns():
    """Test that a key needs at least one column."""
    with pytest.raises(MappingError):
        Key({})


def test_key_rejects_duplicate_columns():
    """Test that a column name may only appear once."""
    with pytest.raises(MappingError) as exc_info:
        Key([("id", 1), ("id", 2)])

    assert exc_info.value.column == "id"


@pytest.mark.parametrize("name", ["", "   ", None, 3])
def test_key_rejects_invalid_column_names(name):
    """Test that column names must be non-blank strings."""
    with pytest.raises(MappingError):
        Key([(name, 1)])


def test_key_repr():
    """Test that __repr__ shows columns and values in order."""
    assert repr(Key({"id": 2, "region": "EU"})) == "Key(id=2, region='EU')"


def test_checkpoint_is_immutable():
    """Test that checkpoint entries cannot be modified."""
    checkpoint = Checkpoint({"id": 2, "region": "EU"})

    with pytest.raises(TypeError):
        checkpoint["id"] = 3

    with pytest.raises(TypeError):
        del checkpoint["region"]


def test_checkpoint_copies_its_input():
    """Test that mutating the source dict does not change the checkpoint."""
    source = {"id": 2}
    checkpoint = Checkpoint(source)
    source["id"] = 3

    assert checkpoint["id"] == 2


def test_empty_checkpoint():
    """Test the 'no progress yet' state."""
    for checkpoint in (Checkpoint(), Checkpoint({}), Checkpoint.from_dict(None)):
        assert checkpoint.is_empty
        assert not checkpoint
        assert len(checkpoint) == 0

    assert not Checkpoint({"id": 1}).is_empty


def test_checkpoint_equality_with_mappings():
    """Test that checkpoints compare by content."""
    checkpoint = Checkpoint({"id": 2, "region": "EU"})

    assert checkpoint == Checkpoint({"region": "EU", "id": 2})
    assert checkpoint == {"id": 2, "region": "EU"}
    assert checkpoint != Key({"id": 2, "region": "EU"})


def test_checkpoint_dict_roundtrip():
    """Test that to_dict() output rebuilds an equal checkpoint."""
    original = Checkpoint({"id": 2, "region": "EU"})

    data = original.to_dict()
    assert data == {"id": 2, "region": "EU"}
    assert isinstance(data, dict)

    restored = Checkpoint.from_dict(data)
    assert restored == original
    assert list(restored) == ["id", "region"]


def test_from_dict_returns_existing_checkpoint():
    """Test that from_dict() passes a Checkpoint through unchanged."""
    checkpoint = Checkpoint({"id": 1})
    assert Checkpoint.from_dict(checkpoint) is checkpoint
