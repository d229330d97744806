"""Wire <-> domain key mapping."""

from __future__ import annotations

import pytest

from zimbra_batch.normalize import Entity, denormalize, normalize
from zimbra_batch.normalize import entities

pytestmark = pytest.mark.unit


def test_folder_tree_is_renamed_recursively() -> None:
    wire = {
        "id": "1",
        "l": "11",
        "folder": [
            {"id": "2", "name": "Inbox", "u": 3, "folder": [{"id": "9", "l": "2"}]},
        ],
        "link": [{"id": "300", "rid": "7", "zid": "abc"}],
    }

    folder = normalize(entities.Folder)(wire)

    assert folder["parentFolderId"] == "11"
    inbox = folder["folders"][0]
    assert inbox["unread"] == 3
    assert inbox["name"] == "Inbox"
    assert inbox["folders"][0]["parentFolderId"] == "2"
    assert folder["linkedFolders"][0] == {
        "id": "300",
        "sharedItemId": "7",
        "ownerZimbraId": "abc",
    }


def test_denormalize_inverts_and_drops_none() -> None:
    domain = {
        "message": {
            "subject": "hi",
            "emailAddresses": [{"address": "a@b.c", "type": "t"}],
            "draftId": None,
        }
    }

    wire = denormalize(entities.SendMessageInfo)(domain)

    assert wire == {"m": {"su": "hi", "e": [{"a": "a@b.c", "t": "t"}]}}


def test_lists_and_scalars_pass_through() -> None:
    entity = Entity("Thing", {"x": "ex"})
    assert normalize(entity)([{"x": 1}, {"y": 2}]) == [{"ex": 1}, {"y": 2}]
    assert normalize(entity)(None) is None
    assert denormalize(entity)("text") == "text"


def test_nested_without_rename_keeps_key() -> None:
    wire = {"signature": {"name": "work", "content": [{"type": "text/plain", "_content": "--"}]}}

    domain = normalize(entities.CreateSignatureRequest)(wire)

    assert domain == {
        "signature": {"name": "work", "content": [{"type": "text/plain", "value": "--"}]}
    }
    assert denormalize(entities.CreateSignatureRequest)(domain) == wire
