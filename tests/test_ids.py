"""Tests for instance and block id generation."""

import string

from markban.ids import generate_block_id, generate_instance_id


def test_generate_instance_id_shape():
    value = generate_instance_id()
    assert len(value) == 9
    assert set(value) <= set(string.ascii_lowercase + string.digits)


def test_generate_instance_id_unique():
    assert len({generate_instance_id() for _ in range(100)}) == 100


def test_generate_block_id_usable_as_anchor():
    """Block ids must survive the trailing ^id grammar."""
    from markban.parser import get_block_id

    block_id = generate_block_id()
    assert len(block_id) == 6
    assert get_block_id(f"card ^{block_id}") == block_id
