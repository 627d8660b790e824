from __future__ import annotations

import asyncio

import pytest

from endpoints.screen_endpoints import (
    NO_DOC_ID_MESSAGE,
    NOT_CONVERTIBLE_MESSAGE,
    NOT_FOUND_MESSAGE,
    UserScreenController,
)
from persistence.preferences import KEY_DOC_ID, DiskPreferences
from persistence.repositories import AsyncUserDocumentRepository
from persistence.user_store import InMemoryUserDocumentStore


@pytest.fixture
def store() -> InMemoryUserDocumentStore:
    return InMemoryUserDocumentStore()


@pytest.fixture
def prefs(tmp_path) -> DiskPreferences:
    return DiskPreferences(base_dir=tmp_path)


@pytest.fixture
def screen(store, prefs) -> UserScreenController:
    return UserScreenController(AsyncUserDocumentRepository(store), prefs)


def test_first_save_with_blank_form_creates_guest_user(screen, store, prefs):
    text = asyncio.run(screen.save("", "", "abc"))

    assert len(store.allocated_ids) == 1
    doc_id = store.allocated_ids[0]
    assert text == f"Saved user with id: {doc_id}"
    assert screen.result_text == text
    assert prefs.get_string(KEY_DOC_ID) == doc_id
    assert store.get_document(doc_id) == {
        "uid": doc_id,
        "name": "Guest",
        "email": "guest@example.com",
        "score": 0,
    }


def test_second_save_overwrites_same_document(screen, store, prefs):
    async def _run():
        await screen.save("Alice", "a@x.com", "5")
        doc_id = prefs.get_string(KEY_DOC_ID)

        text = await screen.save("Alice B", "b@x.com", "9")
        assert text == f"Updated user {doc_id}"
        return doc_id

    doc_id = asyncio.run(_run())
    assert store.allocated_ids == [doc_id]
    assert store.document_ids() == [doc_id]
    assert prefs.get_string(KEY_DOC_ID) == doc_id
    assert store.get_document(doc_id) == {"uid": doc_id, "name": "Alice B", "email": "b@x.com", "score": 9}


def test_save_then_load_round_trips(screen):
    async def _run():
        await screen.save("Alice", "a@x.com", "5")
        return await screen.load()

    assert asyncio.run(_run()) == "User: Alice\nEmail: a@x.com\nScore: 5"


def test_load_without_cached_id_makes_no_remote_call(screen, store):
    assert asyncio.run(screen.load()) == NO_DOC_ID_MESSAGE
    assert NO_DOC_ID_MESSAGE == "No stored document id. Save first."
    assert store.calls == 0
    assert store.allocated_ids == []


def test_empty_cached_id_counts_as_absent(screen, store, prefs):
    prefs.put_string(KEY_DOC_ID, "")
    assert asyncio.run(screen.load()) == NO_DOC_ID_MESSAGE

    text = asyncio.run(screen.save("Bob", "", ""))
    assert text.startswith("Saved user with id: ")
    assert len(store.allocated_ids) == 1


def test_load_of_deleted_document_reports_not_found(screen, store, prefs):
    asyncio.run(screen.save("Alice", "a@x.com", "5"))
    store.delete_document(prefs.get_string(KEY_DOC_ID) or "")

    assert asyncio.run(screen.load()) == NOT_FOUND_MESSAGE == "Document not found."


def test_load_of_mismatched_document_reports_conversion_failure(screen, store, prefs):
    prefs.put_string(KEY_DOC_ID, "d1")
    store.set_document("d1", {"uid": "d1", "name": "Alice", "score": "high"})

    assert asyncio.run(screen.load()) == NOT_CONVERTIBLE_MESSAGE
    assert NOT_CONVERTIBLE_MESSAGE == "Document exists but could not convert to User."


def test_failed_first_save_does_not_cache_id(screen, store, prefs):
    store.fail_next(RuntimeError("PERMISSION_DENIED: Missing or insufficient permissions."))

    text = asyncio.run(screen.save("Alice", "a@x.com", "5"))
    assert text == "Save failed: PERMISSION_DENIED: Missing or insufficient permissions."
    assert prefs.get_string(KEY_DOC_ID) is None
    assert store.document_ids() == []


def test_failed_update_keeps_cached_id(screen, store, prefs):
    asyncio.run(screen.save("Alice", "a@x.com", "5"))
    doc_id = prefs.get_string(KEY_DOC_ID)

    store.fail_next(TimeoutError("Deadline Exceeded"))
    text = asyncio.run(screen.save("Bob", "b@x.com", "1"))
    assert text == "Update failed: Deadline Exceeded"
    assert prefs.get_string(KEY_DOC_ID) == doc_id
    assert store.get_document(doc_id or "")["name"] == "Alice"


def test_failed_read_shows_error_message(screen, store):
    asyncio.run(screen.save("Alice", "a@x.com", "5"))
    store.fail_next(ConnectionError("UNAVAILABLE"))

    assert asyncio.run(screen.load()) == "Read failed: UNAVAILABLE"


def test_failed_id_allocation_is_reported_as_save_failure(prefs):
    class BrokenStore(InMemoryUserDocumentStore):
        def new_document_id(self) -> str:
            raise RuntimeError("no credentials")

    screen = UserScreenController(AsyncUserDocumentRepository(BrokenStore()), prefs)
    assert asyncio.run(screen.save("Alice", "", "")) == "Save failed: no credentials"
    assert prefs.get_string(KEY_DOC_ID) is None


def test_load_does_not_mutate_state(screen, store, prefs):
    asyncio.run(screen.save("Alice", "a@x.com", "5"))
    before_ids = list(store.allocated_ids)
    before_doc = store.get_document(before_ids[0])

    asyncio.run(screen.load())
    asyncio.run(screen.load())

    assert store.allocated_ids == before_ids
    assert store.get_document(before_ids[0]) == before_doc
    assert prefs.get_string(KEY_DOC_ID) == before_ids[0]


def test_oversized_or_non_ascii_score_saves_as_zero(screen, store, prefs):
    asyncio.run(screen.save("Alice", "a@x.com", str(2**70)))
    doc_id = prefs.get_string(KEY_DOC_ID) or ""
    assert store.get_document(doc_id)["score"] == 0

    text = asyncio.run(screen.save("Alice", "a@x.com", "1_000"))
    assert text == f"Updated user {doc_id}"
    assert store.get_document(doc_id)["score"] == 0


def test_load_renders_document_with_double_score(screen, store, prefs):
    prefs.put_string(KEY_DOC_ID, "d1")
    store.set_document("d1", {"uid": "d1", "name": "Alice", "email": "a@x.com", "score": 5.0})

    assert asyncio.run(screen.load()) == "User: Alice\nEmail: a@x.com\nScore: 5"
