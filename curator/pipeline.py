"""
Submission Pipeline - turns a submitted URL into a stored item.

    URL → Canonical URL → Dedup (link table) → Metadata → IdeaSet + Item + Links

Steps:
1. Resolve the canonical URL the page declares for itself
2. Return the existing item if the submitted or canonical URL is already linked
3. Extract metadata (title, description, image, creators, topics)
4. Create creator Person records, the IdeaSet, the Item and its Links
5. Return a result with everything that was created

Design principles:
- No partial writes: validation happens before anything is stored
- Idempotency: resubmitting a linked URL returns the existing item
- Dry-run support: resolve and extract without writes
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import traceback

from curator.extraction import FetchError, MetadataExtractor
from curator.models.catalog import IdeaSet, Person
from curator.models.item import Item, Link
from curator.models.metadata import ExtractedMetadata
from curator.search.engine import is_url_query
from curator.storage.base import ItemStore


# Item fields a submitter may set directly
OVERRIDABLE_FIELDS = (
    "name",
    "item_type",
    "description",
    "image_url",
    "estimated_time",
    "time_unit",
    "typical_age_range",
    "inspirational_score",
    "educational_score",
    "challenging_score",
    "entertaining_score",
    "visual_score",
    "interactive_score",
)


# =============================================================================
# Result Data Structures
# =============================================================================

@dataclass
class SubmissionResult:
    """Complete result of one submission."""
    url: str
    started_at: datetime
    finished_at: Optional[datetime] = None

    canonical_url: Optional[str] = None
    metadata: Optional[ExtractedMetadata] = None

    item: Optional[Item] = None
    idea_set: Optional[IdeaSet] = None
    links: List[Link] = field(default_factory=list)
    people: List[Person] = field(default_factory=list)

    created: bool = False
    dry_run: bool = False
    fetch_failed: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def duration_seconds(self) -> float:
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        if self.dry_run:
            mode = "DRY RUN"
        elif self.created:
            mode = "CREATED"
        elif self.item is not None:
            mode = "EXISTING"
        else:
            mode = "FAILED"

        lines = [
            "=" * 60,
            "SUBMISSION SUMMARY",
            "=" * 60,
            f"URL:       {self.url}",
            f"Canonical: {self.canonical_url or '(unresolved)'}",
            f"Duration:  {self.duration_seconds:.2f}s",
            f"Result:    {mode}",
        ]

        if self.item is not None:
            lines.extend([
                "",
                f"Item: {self.item}",
                f"  id:        {self.item.id}",
                f"  idea set:  {self.item.idea_set_id}",
            ])
        elif self.metadata is not None:
            lines.extend(["", f"Title: {self.metadata.title or '(none)'}"])

        if self.metadata is not None:
            topics = ", ".join(t.name for t in self.metadata.topics) or "(none)"
            creators = ", ".join(self.metadata.creators) or "(none)"
            lines.append(f"  topics:    {topics}")
            lines.append(f"  creators:  {creators}")

        if self.links:
            lines.append(f"  links:     {', '.join(l.url for l in self.links)}")

        if self.errors:
            lines.extend(["", "Errors:"])
            for error in self.errors[:5]:
                lines.append(f"  - {error}")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Pipeline Class
# =============================================================================

class SubmissionPipeline:
    """
    Stores submitted URLs as items.

    Usage:
        pipeline = SubmissionPipeline(store, extractor)
        result = pipeline.submit("https://www.goodreads.com/book/show/4671", "user_1")
        print(result.to_summary())
    """

    def __init__(
        self,
        store: ItemStore,
        extractor: MetadataExtractor,
        verbose: bool = False,
    ):
        self.store = store
        self.extractor = extractor
        self.verbose = verbose

    def submit(
        self,
        url: str,
        submitter_id: str,
        overrides: Optional[Dict[str, Any]] = None,
        dry_run: bool = False,
    ) -> SubmissionResult:
        """
        Submit a URL.

        Args:
            url: The page being submitted.
            submitter_id: The submitting user.
            overrides: Item fields to use instead of extracted values.
            dry_run: Resolve and extract only; store nothing.

        Returns:
            SubmissionResult. Fetch and validation problems are reported in
            result.errors; storage errors propagate.
        """
        result = SubmissionResult(url=url, started_at=datetime.now(), dry_run=dry_run)
        overrides = {k: v for k, v in (overrides or {}).items() if k in OVERRIDABLE_FIELDS}

        if not url or not is_url_query(url):
            result.errors.append(f"URL must start with http:// or https://, got {url!r}")
            result.finished_at = datetime.now()
            return result

        try:
            # Step 1: canonical URL
            result.canonical_url = self.extractor.extract_canonical_url(url)
            if self.verbose:
                print(f"[submit] Canonical URL: {result.canonical_url}")

            # Step 2: dedup through the link table
            existing = self._find_existing(url, result.canonical_url)
            if existing is not None:
                result.item = existing
                print(f"[submit] Already linked: {existing}")
                result.finished_at = datetime.now()
                return result

            # Step 3: metadata
            result.metadata = self.extractor.extract_opengraph_data(url)

            # Step 4: build and store
            self._build(result, submitter_id, overrides)
            if not dry_run:
                self._store(result)
                result.created = True
                print(f"[submit] Created {result.item} with {len(result.links)} link(s)")

        except FetchError as e:
            result.fetch_failed = True
            result.errors.append(str(e))
        except ValueError as e:
            result.errors.append(f"Invalid submission: {e}")
            if self.verbose:
                result.errors.append(traceback.format_exc())

        result.finished_at = datetime.now()
        return result

    def _find_existing(self, url: str, canonical_url: str) -> Optional[Item]:
        for candidate in dict.fromkeys([url, canonical_url]):
            items = self.store.items_for_url(candidate, 1)
            if items:
                return items[0]
        return None

    def _build(self, result: SubmissionResult, submitter_id: str, overrides: Dict[str, Any]) -> None:
        """Construct every record in memory; raises ValueError before any write."""
        metadata = result.metadata

        name = overrides.pop("name", None) or metadata.title
        if not name:
            raise ValueError("name could not be extracted and none was given")

        item_type = overrides.pop("item_type", None) or metadata.item_type
        if not item_type:
            raise ValueError("item_type could not be guessed and none was given")

        idea_set = IdeaSet(name=name, description=metadata.description or "")
        for topic in metadata.topics:
            idea_set.add_topic(topic)

        people = []
        for index, creator in enumerate(dict.fromkeys(metadata.creators)):
            person = self.store.find_person_by_name(creator)
            if person is None:
                bio = metadata.creator_bio if index == 0 else None
                person = Person(name=creator, description=bio or "")
                people.append(person)
            idea_set.credit(person.id)

        fields = {
            "description": metadata.description or "",
            "image_url": metadata.image_url,
            "metadata": dict(metadata.structured),
        }
        fields.update(overrides)

        item = Item(
            name=name,
            item_type=item_type,
            idea_set_id=idea_set.id,
            submitter_id=submitter_id,
            **fields,
        )

        links = [Link(url=u, item_id=item.id) for u in dict.fromkeys([result.canonical_url, result.url])]

        result.idea_set = idea_set
        result.people = people
        result.item = item
        result.links = links

    def _store(self, result: SubmissionResult) -> None:
        for person in result.people:
            self.store.add_person(person)
        self.store.add_idea_set(result.idea_set)
        self.store.add_item(result.item)
        for link in result.links:
            self.store.add_link(link)


# =============================================================================
# Convenience Functions
# =============================================================================

def submit_url(
    url: str,
    submitter_id: str,
    store: ItemStore,
    extractor: Optional[MetadataExtractor] = None,
    overrides: Optional[Dict[str, Any]] = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> SubmissionResult:
    """
    Submit one URL with default collaborators.

    Convenience function for programmatic use.
    """
    if extractor is None:
        extractor = MetadataExtractor(store.find_topic_by_name)
    pipeline = SubmissionPipeline(store, extractor, verbose=verbose)
    return pipeline.submit(url, submitter_id, overrides=overrides, dry_run=dry_run)
