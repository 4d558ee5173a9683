"""Tests for the SQLite chat and request store."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sevalink.models import (
    Category,
    ChatRecord,
    InputMethod,
    Language,
    Priority,
    RequestType,
    SynthesizedRequest,
)
from sevalink.requests.materializer import build_request
from sevalink.storage.db import PersistenceFailure, SevaLinkStore
from tests.conftest import make_classification, make_entities, make_message


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SevaLinkStore]:
    db = SevaLinkStore(str(tmp_path / "nested" / "sevalink.db"))
    yield db
    db.close()


def _complaint(message_id: str = "msg-1") -> SynthesizedRequest:
    request = build_request(
        make_message(text="street light not working", message_id=message_id),
        make_classification(category=Category.COMPLAINT),
        make_entities(),
        "street light not working",
    )
    assert request is not None
    return request


def _chat(**kwargs: object) -> ChatRecord:
    defaults: dict[str, object] = {
        "id": "msg-1",
        "user_id": "user-1",
        "message": "hello",
        "reply": "Hello!",
        "category": Category.GENERAL_INQUIRY,
        "priority": Priority.LOW,
        "language": Language.ENGLISH,
        "input_method": InputMethod.TEXT,
        "using_fallback": True,
    }
    defaults.update(kwargs)
    return ChatRecord(**defaults)  # type: ignore[arg-type]


class TestRequests:
    def test_save_and_get_round_trip(self, store: SevaLinkStore) -> None:
        request = _complaint()
        assert store.save(request) == request.id
        loaded = store.get_request(request.id)
        assert loaded == request

    def test_duplicate_source_message_is_ignored(self, store: SevaLinkStore) -> None:
        first = _complaint("msg-1")
        retry = _complaint("msg-1")
        assert first.id != retry.id
        store.save(first)
        store.save(first)
        store.save(retry)
        assert [r.id for r in store.list_requests()] == [first.id]

    def test_list_filters_by_type(self, store: SevaLinkStore) -> None:
        store.save(_complaint("a"))
        blood = build_request(
            make_message(message_id="b"),
            make_classification(category=Category.BLOOD_REQUEST),
            make_entities(blood_type="O+"),
            "I need O+ blood",
        )
        assert blood is not None
        store.save(blood)
        assert [r.type for r in store.list_requests(RequestType.BLOOD)] == [RequestType.BLOOD]
        assert len(store.list_requests()) == 2

    def test_missing_request(self, store: SevaLinkStore) -> None:
        assert store.get_request("nope") is None


class TestChats:
    def test_save_chat(self, store: SevaLinkStore) -> None:
        store.save(_chat(request_id="req-1"))
        chats = store.list_chats("user-1")
        assert len(chats) == 1
        assert chats[0].request_id == "req-1"
        assert chats[0].using_fallback is True

    def test_unicode_preserved(self, store: SevaLinkStore) -> None:
        store.save(_chat(message="मुझे खून चाहिए", language=Language.HINDI))
        assert store.list_chats("user-1")[0].message == "मुझे खून चाहिए"


def test_closed_store_raises_persistence_failure(tmp_path: Path) -> None:
    db = SevaLinkStore(str(tmp_path / "x.db"))
    db.close()
    with pytest.raises(PersistenceFailure):
        db.save(_chat())


def test_context_manager_closes(tmp_path: Path) -> None:
    with SevaLinkStore(str(tmp_path / "x.db")) as db:
        db.save(_chat())
    with pytest.raises(PersistenceFailure):
        db.save(_chat())
