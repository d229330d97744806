"""Typed option objects for ZimbraBatchClient operations.

Field names are snake_case; ``to_domain`` turns them into the camelCase
domain keys the entity mappers expect.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest)


def to_domain(options: object) -> dict[str, Any]:
    """Dataclass -> camelCase dict, dropping unset (None) fields."""
    return {
        _camel(f.name): getattr(options, f.name)
        for f in fields(options)
        if getattr(options, f.name) is not None
    }


class ActionType(str, Enum):
    contact = "ContactAction"
    conversation = "ConvAction"
    folder = "FolderAction"
    item = "ItemAction"
    message = "MsgAction"


class FolderView(str, Enum):
    appointment = "appointment"
    contact = "contact"
    message = "message"
    task = "task"


@dataclass(frozen=True)
class ActionOptions:
    op: str
    id: str | None = None
    ids: list[str] | None = None
    folder_id: str | None = None
    flags: str | None = None
    tag_names: str | None = None
    name: str | None = None
    color: int | None = None
    constraints: str | None = None
    zimbra_id: str | None = None
    grant_type: str | None = None


@dataclass(frozen=True)
class AutoCompleteOptions:
    name: str
    type: str | None = None
    need_exp: bool | None = None
    folders: str | None = None
    include_gal: bool | None = None


@dataclass(frozen=True)
class ChangePasswordOptions:
    username: str
    password: str
    login_new_password: str


@dataclass(frozen=True)
class CreateFolderOptions:
    name: str
    parent_folder_id: str | None = None
    view: str | None = None
    flags: str | None = None
    fetch_if_exists: bool | None = None
    color: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class CreateSearchFolderOptions:
    name: str
    query: str
    parent_folder_id: str | None = None
    types: str | None = None
    sort_by: str | None = None


@dataclass(frozen=True)
class FolderOptions:
    id: str | None = None
    uuid: str | None = None
    view: str | None = None


@dataclass(frozen=True)
class GetFolderOptions:
    view: str | None = None
    folder: dict | None = None
    depth: int | None = None
    traverse_mountpoints: bool | None = None


@dataclass(frozen=True)
class FreeBusyOptions:
    start: int
    end: int
    names: list[str]


@dataclass(frozen=True)
class GetContactOptions:
    id: str


@dataclass(frozen=True)
class GetContactFrequencyOptions:
    email: str
    by: str
    offset_in_minutes: str | None = None


@dataclass(frozen=True)
class GetConversationOptions:
    id: str
    fetch: str | None = None
    html: bool | None = None
    max: int | None = None
    need_exp: bool | None = None


@dataclass(frozen=True)
class GetMessageOptions:
    id: str
    html: bool | None = None
    raw: bool | None = None
    headers: list[str] | None = None
    read: bool | None = None
    max: int | None = None
    rid_z: str | None = None


@dataclass(frozen=True)
class GetSMimePublicCertsOptions:
    contact_addr: str
    store: str


@dataclass(frozen=True)
class LoginOptions:
    username: str
    password: str | None = None
    recovery_code: str | None = None


@dataclass(frozen=True)
class RecoverAccountOptions:
    channel: str
    email: str
    op: str


@dataclass(frozen=True)
class RelatedContactsOptions:
    email: str


@dataclass(frozen=True)
class ResetPasswordOptions:
    password: str


@dataclass(frozen=True)
class SearchOptions:
    query: str
    types: str | None = None
    limit: int | None = None
    offset: int | None = None
    sort_by: str | None = None
    fetch: str | None = None
    recip: int | None = None
    full_conversation: bool = False


@dataclass(frozen=True)
class SetRecoveryAccountOptions:
    channel: str
    op: str
    recovery_account: str | None = None
    recovery_account_verification_code: str | None = None
