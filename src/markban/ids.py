"""Instance id generation for lanes and cards."""

import secrets
import string

_ALPHABET = string.ascii_lowercase + string.digits


def generate_instance_id(length: int = 9) -> str:
    """Return a fresh random id such as "k3x9q0m2a".

    Ids are only stable across parses when persisted in the document
    (lane id comments, block ids).
    """
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_block_id(length: int = 6) -> str:
    """Return a fresh block id usable as a trailing ^anchor."""
    return generate_instance_id(length)
