"""
Idea Curator - Web API

A small Flask JSON API over metadata extraction, search, discovery and
submission.

Run with: python -m web.app
"""

import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify

from curator.config import DEFAULT_MAX_RESULTS, DEBUG
from curator.extraction import FetchError, MetadataExtractor
from curator.models.item import Item
from curator.people import create_person, update_person
from curator.pipeline import SubmissionPipeline
from curator.search import DiscoveryPicker, SearchEngine, popular_items, recent_items
from curator.storage import ItemStore, InvalidRangeError, StorageError, get_store as create_store

app = Flask(__name__)


# =============================================================================
# Service Wiring
# =============================================================================

# Shared for the life of the process; the metadata cache lives in the extractor
_store: Optional[ItemStore] = None
_extractor: Optional[MetadataExtractor] = None


def get_store() -> ItemStore:
    """Get the configured item store (Airtable or memory)."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


def get_extractor() -> MetadataExtractor:
    """Get the shared metadata extractor."""
    global _extractor
    if _extractor is None:
        _extractor = MetadataExtractor(get_store().find_topic_by_name)
    return _extractor


def configure(store: Optional[ItemStore] = None, extractor: Optional[MetadataExtractor] = None) -> None:
    """Replace the shared services (used by tests and embedding apps)."""
    global _store, _extractor
    _store = store
    _extractor = extractor


def serialize_item(item: Item) -> dict:
    return item.to_dict()


def _flag(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


# =============================================================================
# Error Handlers
# =============================================================================

@app.errorhandler(StorageError)
def handle_storage_error(error):
    return jsonify({"error": "Storage unavailable", "message": str(error)}), 503


# =============================================================================
# Metadata
# =============================================================================

@app.route("/api/extract")
def api_extract():
    """Extract page metadata for ?url=."""
    url = request.args.get("url", "").strip()
    if not url:
        return jsonify({"error": "url parameter required"}), 400

    try:
        metadata = get_extractor().extract_opengraph_data(url)
    except FetchError as e:
        return jsonify({"error": "Fetch failed", "message": str(e)}), 502

    return jsonify(metadata.to_dict())


# =============================================================================
# Search & Discovery
# =============================================================================

@app.route("/api/search")
def api_search():
    """Search by URL or name: ?q=&max=&fuzzy=."""
    query = request.args.get("q", "")
    if not query.strip():
        return jsonify({"error": "q parameter required"}), 400

    try:
        max_results = int(request.args.get("max", DEFAULT_MAX_RESULTS))
    except ValueError:
        return jsonify({"error": "max must be an integer"}), 400

    fuzzy = _flag(request.args.get("fuzzy"))
    results = SearchEngine(get_store()).search(query, max_results, fuzzy=fuzzy)

    return jsonify({"query": query, "results": [serialize_item(i) for i in results]})


@app.route("/api/advanced")
def api_advanced():
    """Advanced search: ?topic=&type=&length=&quality=."""
    engine = SearchEngine(get_store())

    try:
        results = engine.advanced_search(
            topic_name=request.args.get("topic") or None,
            item_type=request.args.get("type") or None,
            length_range=request.args.get("length") or None,
            quality=request.args.get("quality") or None,
        )
    except InvalidRangeError as e:
        return jsonify({"error": "Invalid length range", "message": str(e)}), 400

    return jsonify({"results": [serialize_item(i) for i in results]})


@app.route("/api/discover")
def api_discover():
    """One random item: ?topic=<name>&topic=...&type=<id>&type=..."""
    store = get_store()

    topics = []
    for name in request.args.getlist("topic"):
        topic = store.find_topic_by_name(name)
        if topic is not None:
            topics.append(topic)

    item_types = [t for t in request.args.getlist("type") if t]

    item = DiscoveryPicker(store).discover(topics=topics or None, item_type_ids=item_types or None)
    if item is None:
        return jsonify({"error": "Nothing to discover"}), 404

    return jsonify(serialize_item(item))


@app.route("/api/items/recent")
def api_recent():
    return jsonify({"results": [serialize_item(i) for i in recent_items(get_store())]})


@app.route("/api/items/popular")
def api_popular():
    return jsonify({"results": [serialize_item(i) for i in popular_items(get_store())]})


# =============================================================================
# Submission
# =============================================================================

@app.route("/api/items", methods=["POST"])
def api_submit():
    """Submit a URL as a new item."""
    data = request.get_json(silent=True)

    if not data or not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400

    url = data.get("url")
    submitter_id = data.get("submitter_id")
    overrides = data.get("item") or {}

    if not isinstance(url, str) or not isinstance(submitter_id, str) \
            or not url.strip() or not submitter_id.strip():
        return jsonify({"error": "url and submitter_id required"}), 400
    if not isinstance(overrides, dict):
        return jsonify({"error": "item must be an object"}), 400

    pipeline = SubmissionPipeline(get_store(), get_extractor(), verbose=DEBUG)
    result = pipeline.submit(url.strip(), submitter_id.strip(), overrides=overrides)

    if not result.success:
        status = 502 if result.fetch_failed else 422
        return jsonify({"success": False, "errors": result.errors}), status

    return jsonify({
        "success": True,
        "created": result.created,
        "item": serialize_item(result.item),
        "links": [link.url for link in result.links],
    }), 201 if result.created else 200


# =============================================================================
# People
# =============================================================================

@app.route("/api/people", methods=["POST"])
def api_create_person():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400

    try:
        person = create_person(get_store(), data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 422

    return jsonify(person.to_dict()), 201


@app.route("/api/people/<person_id>", methods=["PUT"])
def api_update_person(person_id):
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "No data provided"}), 400

    is_admin = request.headers.get("X-Admin", "").strip().lower() == "true"

    try:
        person = update_person(get_store(), person_id, data, actor_is_admin=is_admin)
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except KeyError:
        return jsonify({"error": f"Person not found: {person_id}"}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 422

    return jsonify(person.to_dict())


if __name__ == "__main__":
    app.run(debug=DEBUG, port=5000)
