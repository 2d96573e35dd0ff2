"""Tests for catalog search and binding."""

import asyncio

import pytest

from nfc_bridge.domain.catalog import Candidate, CommitStatus, MediaKind, RejectReason
from nfc_bridge.domain.errors import (
    MediaServerError,
    UserNotFoundError,
    ValidationError,
)
from nfc_bridge.services.catalog import CatalogService
from tests.conftest import TARGET_USERNAME, FakeMediaClient, InMemoryCatalogRepository


def _service(
    client: FakeMediaClient | None = None,
) -> tuple[CatalogService, InMemoryCatalogRepository]:
    repository = InMemoryCatalogRepository()
    return (
        CatalogService(repository, client or FakeMediaClient(), TARGET_USERNAME),
        repository,
    )


def test_search_movies_scopes_to_target_user() -> None:
    client = FakeMediaClient(
        items=[
            {"Name": "Inception", "Id": "m1", "ProductionYear": 2010},
            {"Name": "Inception: Jump", "Id": "m2"},
        ]
    )
    service, _ = _service(client)

    candidates = asyncio.run(service.search(MediaKind.MOVIE, "Inception"))

    assert client.searches == [("user-1", "Inception", "Movie")]
    assert candidates == [
        Candidate("Inception (2010)", "m1"),
        Candidate("Inception: Jump (N/A)", "m2"),
    ]


def test_search_albums_uses_album_artist() -> None:
    client = FakeMediaClient(
        items=[{"Name": "Blue", "Id": "a1", "AlbumArtist": "Joni Mitchell"}]
    )
    service, _ = _service(client)

    candidates = asyncio.run(service.search(MediaKind.ALBUM, "blue"))

    assert client.searches[0][2] == "MusicAlbum"
    assert candidates == [Candidate("Blue (Joni Mitchell)", "a1")]


def test_search_with_no_matches_returns_empty_list() -> None:
    service, _ = _service(FakeMediaClient(items=[]))

    assert asyncio.run(service.search(MediaKind.MOVIE, "Inception")) == []


def test_search_fails_when_target_user_missing() -> None:
    service, _ = _service(FakeMediaClient(users=[{"Name": "other", "Id": "x"}]))

    with pytest.raises(UserNotFoundError):
        asyncio.run(service.search(MediaKind.MOVIE, "Inception"))


def test_search_propagates_media_server_errors() -> None:
    service, _ = _service(FakeMediaClient(list_error=MediaServerError("timeout")))

    with pytest.raises(MediaServerError):
        asyncio.run(service.search(MediaKind.ALBUM, "Blue"))


def test_commit_lowercases_trigger_and_rejects_duplicate() -> None:
    service, repository = _service()
    candidate = Candidate("Inception (2010)", "m1")

    first = asyncio.run(service.commit(MediaKind.MOVIE, candidate, "Dream"))
    second = asyncio.run(service.commit(MediaKind.MOVIE, candidate, "Dream"))

    assert first.status is CommitStatus.COMMITTED
    assert first.entry is not None
    assert first.entry.trigger_word == "dream"
    assert second.status is CommitStatus.REJECTED
    assert second.reason is RejectReason.ALREADY_EXISTS
    assert len(repository.entries[MediaKind.MOVIE]) == 1


def test_commit_rejects_item_already_bound_to_other_trigger() -> None:
    service, repository = _service()
    asyncio.run(service.commit(MediaKind.MOVIE, Candidate("A (1)", "m1"), "first"))

    result = asyncio.run(
        service.commit(MediaKind.MOVIE, Candidate("A (1)", "m1"), "second")
    )

    assert not result.committed
    assert [e.trigger_word for e in repository.entries[MediaKind.MOVIE].values()] == [
        "first"
    ]


def test_concurrent_commits_bind_once() -> None:
    service, repository = _service()
    candidate = Candidate("Example (2000)", "m1")

    async def scenario():
        return await asyncio.gather(
            service.commit(MediaKind.MOVIE, candidate, "dup"),
            service.commit(MediaKind.MOVIE, candidate, "dup"),
        )

    results = asyncio.run(scenario())

    statuses = sorted(result.status for result in results)
    assert statuses == [CommitStatus.COMMITTED, CommitStatus.REJECTED]
    assert len(repository.entries[MediaKind.MOVIE]) == 1


def test_same_trigger_allowed_in_different_kinds() -> None:
    service, _ = _service()

    movie = asyncio.run(service.commit(MediaKind.MOVIE, Candidate("M", "m1"), "x"))
    album = asyncio.run(service.commit(MediaKind.ALBUM, Candidate("A", "a1"), "x"))

    assert movie.committed
    assert album.committed


@pytest.mark.parametrize(
    "trigger", ["", "   ", "a/b", "a?b", "a#b", "sessions", "Health"]
)
def test_commit_rejects_invalid_trigger_words(trigger: str) -> None:
    service, repository = _service()

    with pytest.raises(ValidationError):
        asyncio.run(service.commit(MediaKind.MOVIE, Candidate("M", "m1"), trigger))
    assert repository.entries[MediaKind.MOVIE] == {}


def test_delete_frees_trigger_for_reuse() -> None:
    service, _ = _service()
    first = asyncio.run(service.commit(MediaKind.ALBUM, Candidate("A", "a1"), "tag"))
    assert first.entry is not None

    asyncio.run(service.delete(MediaKind.ALBUM, first.entry.id))
    asyncio.run(service.delete(MediaKind.ALBUM, first.entry.id))
    again = asyncio.run(service.commit(MediaKind.ALBUM, Candidate("B", "a2"), "tag"))

    assert again.committed


def test_seed_examples_only_fills_empty_collections() -> None:
    service, repository = _service()
    asyncio.run(service.commit(MediaKind.ALBUM, Candidate("Mine", "a1"), "mine"))

    asyncio.run(service.seed_examples())
    asyncio.run(service.seed_examples())

    movies = asyncio.run(service.list_entries(MediaKind.MOVIE))
    albums = asyncio.run(service.list_entries(MediaKind.ALBUM))
    assert [entry.trigger_word for entry in movies] == ["examplemovie"]
    assert [entry.trigger_word for entry in albums] == ["mine"]
    assert len(repository.entries[MediaKind.MOVIE]) == 1
