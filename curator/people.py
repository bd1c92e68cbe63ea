"""
People: creators credited on idea-sets.

Anyone may add a person; only admins may edit one.
"""

from typing import Any, Dict

from curator.models.catalog import Person
from curator.storage.base import ItemStore


PERSON_FIELDS = ("name", "description", "website", "email", "twitter")


def create_person(store: ItemStore, fields: Dict[str, Any]) -> Person:
    """
    Create and store a person.

    Raises:
        ValueError: If the fields do not make a valid person.
    """
    data = {k: fields.get(k) for k in PERSON_FIELDS if fields.get(k) is not None}
    person = Person(**data)
    return store.add_person(person)


def update_person(
    store: ItemStore,
    person_id: str,
    fields: Dict[str, Any],
    actor_is_admin: bool,
) -> Person:
    """
    Overwrite a person's fields.

    Raises:
        PermissionError: If the actor is not an admin.
        KeyError: If no such person exists.
        ValueError: If the new fields are invalid.
    """
    if not actor_is_admin:
        raise PermissionError("Operation not permitted")

    person = store.get_person(person_id)
    if person is None:
        raise KeyError(person_id)

    updated = Person(
        id=person.id,
        name=fields.get("name", person.name),
        description=fields.get("description", person.description) or "",
        website=fields.get("website", person.website),
        email=fields.get("email", person.email),
        twitter=fields.get("twitter", person.twitter),
    )
    return store.update_person(updated)
