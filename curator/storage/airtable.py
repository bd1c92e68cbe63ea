"""
Airtable storage backend for Idea Curator.

Implements the ItemStore interface using Airtable as the persistence layer.
Uses the Airtable REST API for all operations; item filters are rendered to
filterByFormula expressions.

Airtable API Documentation: https://airtable.com/developers/web/api/introduction

=============================================================================
AIRTABLE SCHEMA
=============================================================================

Items
| Column Name          | Field Type       | Description                         |
|----------------------|------------------|-------------------------------------|
| item_id              | Single line text | Primary key (Item.id)               |
| name                 | Single line text | Item name                           |
| item_type            | Single line text | "book", "video", "wiki", ...        |
| idea_set_id          | Single line text | Owning idea-set                     |
| submitter_id         | Single line text | Submitting user                     |
| estimated_time       | Number           | Duration in time_unit               |
| time_unit            | Single line text | "minutes" or "hours"                |
| <quality>_score      | Number           | Six quality ratings, 0-5            |
| image_url            | URL              | Optional image                      |
| typical_age_range    | Single line text | e.g. "8-12"                         |
| description          | Long text        | Free text                           |
| metadata             | Long text        | JSON-encoded structured metadata    |
| created_at           | Date             | ISO format                          |
| updated_at           | Date             | ISO format                          |

Links:    link_id, url, item_id
Topics:   topic_id, name
IdeaSets: idea_set_id, name, description, topic_ids (comma separated),
          creators (JSON list of {person_id, role})
People:   person_id, name, description, website, email, twitter

=============================================================================
"""

import json
import time
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple
import requests

from curator.config import (
    AIRTABLE_API_KEY,
    AIRTABLE_BASE_ID,
    AIRTABLE_ITEMS_TABLE,
    AIRTABLE_LINKS_TABLE,
    AIRTABLE_TOPICS_TABLE,
    AIRTABLE_IDEA_SETS_TABLE,
    AIRTABLE_PEOPLE_TABLE,
    REQUEST_TIMEOUT,
)
from curator.models.item import Item, Link, QUALITY_NAMES
from curator.models.catalog import Topic, IdeaSet, CreatorCredit, Person
from curator.storage.base import ItemStore, StorageError
from curator.storage.filters import ItemFilter, airtable_string, combine_formulas


class AirtableItemStore(ItemStore):
    """
    Airtable-backed item store.

    Every record carries its own id column (item_id, topic_id, ...) which is
    used for lookups; Airtable's record id is only needed for updates.

    Configuration is pulled from environment variables via curator.config:
    - AIRTABLE_API_KEY: API key for authentication
    - AIRTABLE_BASE_ID: Base ID (starts with "app")
    - AIRTABLE_*_TABLE: Table names
    """

    # Airtable API base URL
    API_BASE = "https://api.airtable.com/v0"

    # Rate limiting: Airtable allows 5 requests per second
    REQUEST_DELAY = 0.25

    # Airtable caps pageSize at 100
    PAGE_SIZE = 100

    def __init__(
        self,
        api_key: str = None,
        base_id: str = None,
        tables: Dict[str, str] = None,
    ):
        """
        Initialize AirtableItemStore.

        Args:
            api_key: Airtable API key. Defaults to config.AIRTABLE_API_KEY.
            base_id: Airtable base ID. Defaults to config.AIRTABLE_BASE_ID.
            tables: Overrides for table names, keyed by "items", "links",
                    "topics", "idea_sets", "people".
        """
        # Use provided values, or fall back to config if None (not empty string)
        self.api_key = api_key if api_key is not None else AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else AIRTABLE_BASE_ID
        self.tables = {
            "items": AIRTABLE_ITEMS_TABLE,
            "links": AIRTABLE_LINKS_TABLE,
            "topics": AIRTABLE_TOPICS_TABLE,
            "idea_sets": AIRTABLE_IDEA_SETS_TABLE,
            "people": AIRTABLE_PEOPLE_TABLE,
        }
        self.tables.update(tables or {})

        self._last_request_time = 0.0

    @property
    def name(self) -> str:
        return "airtable"

    def _table_url(self, table: str) -> str:
        """Construct the URL for a table."""
        return f"{self.API_BASE}/{self.base_id}/{self.tables[table]}"

    @property
    def _headers(self) -> Dict[str, str]:
        """Construct headers for API requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self.REQUEST_DELAY:
            time.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = time.time()

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.api_key:
            raise ValueError("AIRTABLE_API_KEY is not configured")
        if not self.base_id:
            raise ValueError("AIRTABLE_BASE_ID is not configured")

    # =========================================================================
    # Serialization: models <-> Airtable fields
    # =========================================================================

    @staticmethod
    def item_to_airtable_fields(item: Item) -> Dict[str, Any]:
        """
        Convert an Item to Airtable field format.

        Optional fields are only included when set.
        """
        fields = {
            "item_id": item.id,
            "name": item.name,
            "item_type": item.item_type,
            "idea_set_id": item.idea_set_id,
            "submitter_id": item.submitter_id,
            "time_unit": item.time_unit,
            "description": item.description,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
        }

        if item.estimated_time is not None:
            fields["estimated_time"] = item.estimated_time

        for quality in QUALITY_NAMES:
            score = item.quality_score(quality)
            if score is not None:
                fields[f"{quality}_score"] = score

        if item.image_url:
            fields["image_url"] = item.image_url

        if item.typical_age_range:
            fields["typical_age_range"] = item.typical_age_range

        if item.metadata:
            fields["metadata"] = json.dumps(item.metadata, sort_keys=True)

        return fields

    @staticmethod
    def airtable_record_to_item(record: Dict[str, Any]) -> Optional[Item]:
        """
        Convert an Airtable record to an Item.

        Returns:
            Item if conversion successful, None for incomplete or invalid rows.
        """
        fields = record.get("fields", {})

        try:
            metadata = json.loads(fields["metadata"]) if fields.get("metadata") else {}
        except ValueError:
            metadata = {}

        data = {
            "id": fields.get("item_id", record.get("id", "")),
            "name": fields.get("name", ""),
            "item_type": fields.get("item_type", ""),
            "idea_set_id": fields.get("idea_set_id", ""),
            "submitter_id": fields.get("submitter_id", ""),
            "estimated_time": fields.get("estimated_time"),
            "time_unit": fields.get("time_unit", "minutes"),
            "image_url": fields.get("image_url"),
            "typical_age_range": fields.get("typical_age_range"),
            "description": fields.get("description", ""),
            "metadata": metadata,
        }
        for quality in QUALITY_NAMES:
            data[f"{quality}_score"] = fields.get(f"{quality}_score")

        for stamp in ("created_at", "updated_at"):
            if fields.get(stamp):
                try:
                    data[stamp] = datetime.fromisoformat(fields[stamp].replace("Z", "+00:00"))
                except (ValueError, AttributeError):
                    pass

        try:
            return Item(**data)
        except (TypeError, ValueError) as e:
            print(f"[airtable] Skipping invalid item record {data['id']}: {e}")
            return None

    @staticmethod
    def idea_set_to_airtable_fields(idea_set: IdeaSet) -> Dict[str, Any]:
        return {
            "idea_set_id": idea_set.id,
            "name": idea_set.name,
            "description": idea_set.description,
            "topic_ids": ",".join(idea_set.topic_ids),
            "creators": json.dumps(
                [{"person_id": c.person_id, "role": c.role} for c in idea_set.creators]
            ),
        }

    @staticmethod
    def airtable_record_to_idea_set(record: Dict[str, Any]) -> IdeaSet:
        fields = record.get("fields", {})
        topic_ids = [t for t in (fields.get("topic_ids") or "").split(",") if t]
        creators = [CreatorCredit(**c) for c in json.loads(fields.get("creators") or "[]")]
        return IdeaSet(
            id=fields["idea_set_id"],
            name=fields.get("name", ""),
            description=fields.get("description", ""),
            topic_ids=topic_ids,
            creators=creators,
        )

    @staticmethod
    def airtable_record_to_person(record: Dict[str, Any]) -> Person:
        fields = record.get("fields", {})
        return Person(
            id=fields["person_id"],
            name=fields.get("name", ""),
            description=fields.get("description", ""),
            website=fields.get("website"),
            email=fields.get("email"),
            twitter=fields.get("twitter"),
        )

    # =========================================================================
    # API Operations
    # =========================================================================

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        """
        Send one API request.

        Raises:
            StorageError: On any HTTP or decoding failure.
        """
        self._validate_config()
        self._rate_limit()

        try:
            response = requests.request(
                method,
                url,
                headers=self._headers,
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            print(f"[{self.name}] {method} {url} failed: {e}")
            raise StorageError(f"Airtable {method} failed: {e}") from e
        except ValueError as e:
            raise StorageError(f"Airtable returned invalid JSON: {e}") from e

    def _list_records(
        self,
        table: str,
        filter_formula: str = None,
        sort_field: str = None,
        sort_direction: str = "asc",
        max_records: int = None,
    ) -> List[Dict]:
        """
        List records from a table with optional filtering and sorting,
        following Airtable's offset pagination.
        """
        params: Dict[str, Any] = {"pageSize": self.PAGE_SIZE}

        if filter_formula:
            params["filterByFormula"] = filter_formula

        if sort_field:
            params["sort[0][field]"] = sort_field
            params["sort[0][direction]"] = sort_direction

        if max_records is not None:
            params["maxRecords"] = max_records

        records: List[Dict] = []
        while True:
            data = self._request("GET", self._table_url(table), params=params)
            records.extend(data.get("records", []))

            offset = data.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break
            params["offset"] = offset

        return records if max_records is None else records[:max_records]

    def _find_record(self, table: str, key_field: str, key: str) -> Optional[Tuple[str, Dict]]:
        """Find one record by its id column; returns (record_id, fields)."""
        records = self._list_records(
            table,
            filter_formula=f"{{{key_field}}}={airtable_string(key)}",
            max_records=1,
        )
        if not records:
            return None
        return records[0]["id"], records[0].get("fields", {})

    def _create_record(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self._table_url(table), json={"fields": fields})

    def _update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "PATCH",
            f"{self._table_url(table)}/{record_id}",
            json={"fields": fields},
        )

    # =========================================================================
    # ItemStore Interface Implementation
    # =========================================================================

    def add_item(self, item: Item) -> Item:
        self._create_record("items", self.item_to_airtable_fields(item))
        return item

    def get_item(self, item_id: str) -> Optional[Item]:
        found = self._find_record("items", "item_id", item_id)
        if found is None:
            return None
        record_id, fields = found
        return self.airtable_record_to_item({"id": record_id, "fields": fields})

    def update_item(self, item: Item) -> Item:
        item.validate()
        found = self._find_record("items", "item_id", item.id)
        if found is None:
            raise KeyError(item.id)
        item.updated_at = datetime.now()
        self._update_record("items", found[0], self.item_to_airtable_fields(item))
        return item

    def add_link(self, link: Link) -> Link:
        self._create_record("links", {"link_id": link.id, "url": link.url, "item_id": link.item_id})
        return link

    def items_for_url(self, url: str, limit: int) -> List[Item]:
        if limit <= 0:
            return []

        links = self._list_records("links", filter_formula=f"{{url}}={airtable_string(url)}")

        items: List[Item] = []
        seen = set()
        for record in links:
            item_id = record.get("fields", {}).get("item_id")
            if not item_id or item_id in seen:
                continue
            seen.add(item_id)
            item = self.get_item(item_id)
            if item is not None:
                items.append(item)
            if len(items) >= limit:
                break
        return items

    def find_items(self, filters: Sequence[ItemFilter], limit: Optional[int] = None) -> List[Item]:
        records = self._list_records(
            "items",
            filter_formula=combine_formulas(filters),
            sort_field="item_id",
            sort_direction="asc",
            max_records=limit,
        )

        items = []
        for record in records:
            item = self.airtable_record_to_item(record)
            if item:
                items.append(item)
        return items

    def add_topic(self, topic: Topic) -> Topic:
        self._create_record("topics", {"topic_id": topic.id, "name": topic.name})
        return topic

    def find_topic_by_name(self, name: str) -> Optional[Topic]:
        records = self._list_records(
            "topics",
            filter_formula=f"{{name}}={airtable_string(name)}",
            sort_field="topic_id",
            max_records=1,
        )
        if not records:
            return None
        fields = records[0].get("fields", {})
        return Topic(id=fields["topic_id"], name=fields["name"])

    def add_idea_set(self, idea_set: IdeaSet) -> IdeaSet:
        self._create_record("idea_sets", self.idea_set_to_airtable_fields(idea_set))
        return idea_set

    def get_idea_set(self, idea_set_id: str) -> Optional[IdeaSet]:
        found = self._find_record("idea_sets", "idea_set_id", idea_set_id)
        if found is None:
            return None
        return self.airtable_record_to_idea_set({"id": found[0], "fields": found[1]})

    def idea_set_ids_for_topics(self, topic_ids: Iterable[str]) -> Set[str]:
        wanted = set(topic_ids)
        if not wanted:
            return set()

        # FIND narrows the scan server-side; exact membership is checked below
        clauses = [f"FIND({airtable_string(t)}, {{topic_ids}})" for t in sorted(wanted)]
        formula = clauses[0] if len(clauses) == 1 else f"OR({', '.join(clauses)})"

        result = set()
        for record in self._list_records("idea_sets", filter_formula=formula):
            idea_set = self.airtable_record_to_idea_set(record)
            if wanted.intersection(idea_set.topic_ids):
                result.add(idea_set.id)
        return result

    def topics_for_item(self, item: Item) -> List[Topic]:
        idea_set = self.get_idea_set(item.idea_set_id)
        if idea_set is None or not idea_set.topic_ids:
            return []
        clauses = [f"{{topic_id}}={airtable_string(t)}" for t in idea_set.topic_ids]
        formula = clauses[0] if len(clauses) == 1 else f"OR({', '.join(clauses)})"
        by_id = {}
        for record in self._list_records("topics", filter_formula=formula):
            fields = record.get("fields", {})
            by_id[fields["topic_id"]] = Topic(id=fields["topic_id"], name=fields["name"])
        return [by_id[t] for t in idea_set.topic_ids if t in by_id]

    def add_person(self, person: Person) -> Person:
        self._create_record("people", {"person_id": person.id, **self._person_fields(person)})
        return person

    def get_person(self, person_id: str) -> Optional[Person]:
        found = self._find_record("people", "person_id", person_id)
        if found is None:
            return None
        return self.airtable_record_to_person({"id": found[0], "fields": found[1]})

    def update_person(self, person: Person) -> Person:
        person.validate()
        found = self._find_record("people", "person_id", person.id)
        if found is None:
            raise KeyError(person.id)
        self._update_record("people", found[0], self._person_fields(person))
        return person

    def find_person_by_name(self, name: str) -> Optional[Person]:
        records = self._list_records(
            "people",
            filter_formula=f"{{name}}={airtable_string(name)}",
            sort_field="person_id",
            max_records=1,
        )
        if not records:
            return None
        return self.airtable_record_to_person(records[0])

    @staticmethod
    def _person_fields(person: Person) -> Dict[str, Any]:
        fields = {"name": person.name, "description": person.description}
        for optional in ("website", "email", "twitter"):
            value = getattr(person, optional)
            if value:
                fields[optional] = value
        return fields
