from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import pytest

from face_attendance.core.exceptions import InvalidEmbedding, ValidationError
from face_attendance.identities.store import EmbeddingStore


def _store(repo, clock=None, dimension=3):
    return EmbeddingStore(repo, embedding_dimension=dimension, clock=clock)


def test_register_then_reregister_same_email_updates_in_place(identities_repo, clock):
    store = _store(identities_repo, clock)

    first = store.upsert_identity("Alice", "a@x.com", [1, 0, 0])
    clock.now = clock.now + timedelta(hours=1)
    second = store.upsert_identity("Alice B", "a@x.com", [1, 0, 0.1])

    identities = store.list_identities()
    assert len(identities) == 1
    assert second.identity_id == first.identity_id
    assert identities[0].name == "Alice B"
    assert identities[0].embedding == (1.0, 0.0, 0.1)
    assert identities[0].registered_at == clock.now


def test_email_is_normalized_for_dedup(identities_repo):
    store = _store(identities_repo)

    a = store.upsert_identity("Alice", " A@X.com ", [1, 0, 0])
    b = store.upsert_identity("Alice", "a@x.com", [1, 0, 0])

    assert a.identity_id == b.identity_id
    assert a.email == "a@x.com"


def test_new_emails_get_distinct_ids_in_registration_order(identities_repo):
    store = _store(identities_repo)

    ids = [store.upsert_identity(n, f"{n}@x.com", [0, 0, i]).identity_id for i, n in enumerate("abc")]

    assert len(set(ids)) == 3
    assert [i.identity_id for i in store.list_identities()] == ids
    assert [label for label, _ in store.labeled_embeddings()] == ids


def test_find_by_id(identities_repo):
    store = _store(identities_repo)
    alice = store.upsert_identity("Alice", "a@x.com", [1, 0, 0])

    assert store.find_by_id(alice.identity_id) == alice
    assert store.find_by_id("missing") is None


def test_registered_at_is_aware_utc(identities_repo):
    identity = _store(identities_repo).upsert_identity("Alice", "a@x.com", [1, 0, 0])
    assert identity.registered_at.tzinfo is not None
    assert identity.registered_at.utcoffset() == timedelta(0)


@pytest.mark.parametrize(
    "embedding",
    [
        [1, 0],
        [1, 0, 0, 0],
        [1, float("nan"), 0],
        [1, float("inf"), 0],
        [[1, 0, 0]],
        "abc",
        None,
        ["x", 0, 0],
    ],
)
def test_invalid_embedding_rejected(identities_repo, embedding):
    store = _store(identities_repo)
    with pytest.raises(InvalidEmbedding):
        store.upsert_identity("Alice", "a@x.com", embedding)
    assert store.list_identities() == []


@pytest.mark.parametrize(
    "name,email",
    [
        ("", "a@x.com"),
        ("  ", "a@x.com"),
        ("Alice", ""),
        ("Alice", "not-an-email"),
        (123, "a@x.com"),
        ("Alice", ["a@x.com"]),
    ],
)
def test_invalid_name_or_email_rejected(identities_repo, name, email):
    with pytest.raises(ValidationError):
        _store(identities_repo).upsert_identity(name, email, [1, 0, 0])


def test_concurrent_registration_of_one_email_creates_one_identity(identities_repo):
    store = _store(identities_repo)
    barrier = threading.Barrier(8)
    results = []

    def worker(i):
        barrier.wait()
        results.append(store.upsert_identity(f"Alice {i}", "a@x.com", [1, 0, i]))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.list_identities()) == 1
    assert len({r.identity_id for r in results}) == 1


def test_default_clock_is_used_when_none_given(identities_repo):
    before = datetime.now(timezone.utc)
    identity = _store(identities_repo).upsert_identity("Alice", "a@x.com", [1, 0, 0])
    assert identity.registered_at >= before


def test_reregister_recreates_identity_that_vanished_before_update(identities_repo, monkeypatch):
    store = _store(identities_repo)
    first = store.upsert_identity("Alice", "a@x.com", [1, 0, 0])

    def vanished(identity):
        identities_repo._by_id.pop(identity.identity_id, None)
        return False

    monkeypatch.setattr(identities_repo, "update", vanished)
    second = store.upsert_identity("Alice B", "a@x.com", [1, 0, 0.1])

    assert second.identity_id != first.identity_id
    assert store.list_identities() == [second]
    assert store.find_by_id(second.identity_id).name == "Alice B"
