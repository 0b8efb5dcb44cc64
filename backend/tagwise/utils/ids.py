from __future__ import annotations

from uuid import UUID, uuid4, uuid5

# Namespace for every deterministic id in the system. Changing it re-keys all
# tags, concepts and content-tag links.
ID_NAMESPACE = UUID("1b671a64-40d5-491e-99b0-da01ff1f3341")


def normalize(value: str) -> str:
    """Trim and lowercase a natural key before hashing or comparing it."""
    return value.strip().lower()


def generate_id(*parts: str | UUID) -> UUID:
    """Return a namespaced uuid5 of the joined parts, or a random uuid4 when empty."""
    if parts:
        return uuid5(ID_NAMESPACE, ":".join(str(p) for p in parts))
    return uuid4()


def tag_id_for(name: str, user_id: UUID) -> UUID:
    return generate_id(name, user_id)


def concept_id_for(semantic: str) -> UUID:
    return generate_id(normalize(semantic))


def content_tag_id_for(user_id: UUID, content_id: UUID, tag_id: UUID) -> UUID:
    return generate_id(user_id, content_id, tag_id)
