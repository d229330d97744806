"""High-level Zimbra client.

Every operation builds one ``Request`` and funnels it through the
``RequestRouter``: unscoped requests issued concurrently (e.g. under
``asyncio.gather``) share a single BatchRequest, account-scoped ones go out
alone.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from zimbra_batch.config import ZimbraClientConfig, get_client_config
from zimbra_batch.dispatch import RequestRouter
from zimbra_batch.normalize import denormalize, normalize
from zimbra_batch.normalize import entities
from zimbra_batch.options import (
    ActionOptions,
    ActionType,
    AutoCompleteOptions,
    ChangePasswordOptions,
    CreateFolderOptions,
    CreateSearchFolderOptions,
    FolderOptions,
    FolderView,
    FreeBusyOptions,
    GetContactFrequencyOptions,
    GetContactOptions,
    GetConversationOptions,
    GetFolderOptions,
    GetMessageOptions,
    GetSMimePublicCertsOptions,
    LoginOptions,
    RecoverAccountOptions,
    RelatedContactsOptions,
    ResetPasswordOptions,
    SearchOptions,
    SetRecoveryAccountOptions,
    to_domain,
)
from zimbra_batch.request import HttpTransport, Namespace, NotificationHandler, Request, Transport
from zimbra_batch.utils.coerce import (
    coerce_boolean_to_int,
    coerce_boolean_to_string,
    coerce_string_to_boolean,
    map_values_deep,
)
from zimbra_batch.utils.messages import normalize_email_addresses, normalize_mime_parts


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


class ZimbraBatchClient:
    def __init__(
        self,
        config: ZimbraClientConfig | None = None,
        *,
        transport: Transport | None = None,
        notification_handler: NotificationHandler | None = None,
    ):
        self.config = config or get_client_config()
        self.origin = self.config.origin
        self._transport = transport or HttpTransport(self.config)
        self._router = RequestRouter(
            self._transport,
            notification_handler=notification_handler,
            debug=self.config.debug,
        )

    @property
    def session_id(self) -> str:
        return self._router.session_id

    async def __aenter__(self) -> ZimbraBatchClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._router.drain()
        await self._transport.aclose()

    def resolve(self, path: str) -> str:
        return f"{self.origin}{path}"

    def json_request(
        self,
        name: str,
        body: Mapping[str, Any] | None = None,
        *,
        namespace: Namespace = Namespace.Mail,
        account_name: str | None = None,
    ) -> asyncio.Future:
        request = Request(
            name=name, namespace=namespace, body=body, account_name=account_name
        )
        return self._router.submit(request)

    def _shape_message(self, message: Any) -> Any:
        """Post-process an already normalized message."""
        if not isinstance(message, dict):
            return message
        return normalize_email_addresses(normalize_mime_parts(message, self.origin))

    def _normalize_message(self, message: Any) -> Any:
        return self._shape_message(normalize(entities.MessageInfo)(message))

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def account_info(self) -> dict:
        res = await self.json_request("GetInfo", namespace=Namespace.Account)
        info = dict(res)
        info["attrs"] = map_values_deep(res.get("attrs", {}).get("_attrs", {}), coerce_string_to_boolean)
        info["prefs"] = map_values_deep(res.get("prefs", {}).get("_attrs", {}), coerce_string_to_boolean)
        license_ = res.get("license")
        if isinstance(license_, dict) and license_.get("attr"):
            info["license"] = {
                "status": license_.get("status"),
                "attr": map_values_deep(license_["attr"], coerce_string_to_boolean),
            }
        return info

    async def change_password(self, options: ChangePasswordOptions) -> Any:
        return await self.json_request(
            "ChangePassword",
            {
                "account": {"by": "name", "_content": options.username},
                "oldPassword": options.password,
                "password": options.login_new_password,
            },
            namespace=Namespace.Account,
        )

    async def login(self, options: LoginOptions) -> Any:
        body: dict[str, Any] = {"account": {"by": "name", "_content": options.username}}
        if options.password:
            body["password"] = options.password
        if options.recovery_code:
            body["recoveryCode"] = {"verifyAccount": True, "_content": options.recovery_code}
        return await self.json_request("Auth", body, namespace=Namespace.Account)

    async def logout(self) -> Any:
        return await self.json_request(
            "EndSession", {"logoff": True}, namespace=Namespace.Account
        )

    async def preferences(self) -> dict:
        res = await self.json_request("GetPrefs", namespace=Namespace.Account)
        return map_values_deep(res.get("_attrs", {}), coerce_string_to_boolean)

    async def modify_prefs(self, prefs: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "ModifyPrefs",
            {"_attrs": map_values_deep(dict(prefs), coerce_boolean_to_string)},
            namespace=Namespace.Account,
        )

    async def recover_account(self, options: RecoverAccountOptions) -> Any:
        return await self.json_request(
            "RecoverAccount",
            {"channel": options.channel, "email": options.email, "op": options.op},
        )

    async def reset_password(self, options: ResetPasswordOptions) -> Any:
        return await self.json_request(
            "ResetPassword", to_domain(options), namespace=Namespace.Account
        )

    async def set_recovery_account(self, options: SetRecoveryAccountOptions) -> Any:
        return await self.json_request("SetRecoveryAccount", to_domain(options))

    async def get_smime_public_certs(self, options: GetSMimePublicCertsOptions) -> Any:
        return await self.json_request(
            "GetSMIMEPublicCerts",
            {
                "store": {"_content": options.store},
                "email": {"_content": options.contact_addr},
            },
            namespace=Namespace.Account,
        )

    async def create_signature(self, signature: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "CreateSignature",
            denormalize(entities.CreateSignatureRequest)(dict(signature)),
            namespace=Namespace.Account,
        )

    async def modify_signature(self, signature: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "ModifySignature",
            denormalize(entities.CreateSignatureRequest)(dict(signature)),
            namespace=Namespace.Account,
        )

    async def delete_signature(self, signature: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "DeleteSignature", dict(signature), namespace=Namespace.Account
        )

    async def share_infos(self, addresses: list[str]) -> list:
        return list(
            await asyncio.gather(
                *(
                    self.json_request(
                        "GetShareInfo",
                        {
                            "includeSelf": 0,
                            "owner": {"by": "name", "_content": address},
                            "_jsns": Namespace.Account.value,
                        },
                    )
                    for address in addresses
                )
            )
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def action(self, type: ActionType, options: ActionOptions) -> Any:
        rest = to_domain(options)
        ids = rest.pop("ids", None) or []
        item_id = rest.pop("id", None) or ",".join(ids)
        return await self.json_request(
            ActionType(type).value,
            {"action": {"id": item_id, **denormalize(entities.ActionOptions)(rest)}},
        )

    async def contact_action(self, options: ActionOptions) -> Any:
        return await self.action(ActionType.contact, options)

    async def conversation_action(self, options: ActionOptions) -> Any:
        return await self.action(ActionType.conversation, options)

    async def folder_action(self, options: ActionOptions) -> Any:
        return await self.action(ActionType.folder, options)

    async def item_action(self, options: ActionOptions) -> Any:
        return await self.action(ActionType.item, options)

    async def message_action(self, options: ActionOptions) -> Any:
        return await self.action(ActionType.message, options)

    async def noop(self) -> Any:
        return await self.json_request("NoOp")

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(self, options: CreateFolderOptions) -> Any:
        folder = to_domain(options)
        for domain_key, wire_key in (
            ("flags", "f"),
            ("fetchIfExists", "fie"),
            ("parentFolderId", "l"),
        ):
            if domain_key in folder:
                folder[wire_key] = folder.pop(domain_key)
        res = await self.json_request("CreateFolder", {"folder": folder})
        return normalize(entities.Folder)(_first(res.get("folder")))

    async def create_mountpoint(self, mountpoint: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "CreateMountpoint",
            denormalize(entities.CreateMountpointRequest)(dict(mountpoint)),
        )

    async def create_search_folder(self, options: CreateSearchFolderOptions) -> Any:
        search = to_domain(options)
        parent = search.pop("parentFolderId", None)
        if parent is not None:
            search["l"] = parent
        res = await self.json_request("CreateSearchFolder", {"search": search})
        return normalize(entities.Folder)(_first(res.get("search")))

    async def folder(self, options: FolderOptions) -> Any:
        body: dict[str, Any] = {"tr": True}
        if options.view:
            body["view"] = options.view
        if options.id or options.uuid:
            body["folder"] = {
                k: v for k, v in (("id", options.id), ("uuid", options.uuid)) if v
            }
        res = await self.json_request("GetFolder", body)
        return normalize(entities.Folder)(_first(res.get("folder")).get("folder"))

    async def folders(self, ids: list[str]) -> list:
        responses = await asyncio.gather(
            *(
                self.json_request(
                    "GetFolder",
                    {"view": FolderView.appointment.value, "tr": True, "folder": {"id": folder_id}},
                )
                for folder_id in ids
            )
        )
        return [normalize(entities.Folder)(res) for res in responses]

    async def get_folder(self, options: GetFolderOptions) -> Any:
        body = to_domain(options)
        traverse = body.pop("traverseMountpoints", None)
        if traverse is not None:
            body["tr"] = traverse
        return normalize(entities.Folder)(await self.json_request("GetFolder", body))

    async def get_search_folder(self) -> dict:
        res = await self.json_request("GetSearchFolder")
        if res.get("search"):
            return {"folders": normalize(entities.Folder)(res["search"])}
        return {}

    async def task_folders(self) -> Any:
        res = await self.json_request(
            "GetFolder", {"view": FolderView.task.value, "tr": True}
        )
        return normalize(entities.Folder)(_first(res.get("folder")).get("folder"))

    async def get_mailbox_metadata(self, section: str) -> Any:
        res = await self.json_request("GetMailboxMetadata", {"meta": {"section": section}})
        res = dict(res)
        # Every section gets an _attrs map, even when the server omits it.
        res["meta"] = [
            {**entry, "_attrs": entry.get("_attrs") or {}} for entry in res.get("meta", [])
        ]
        return map_values_deep(res, coerce_string_to_boolean)

    # ------------------------------------------------------------------
    # Mail
    # ------------------------------------------------------------------

    async def auto_complete(self, options: AutoCompleteOptions) -> Any:
        res = await self.json_request(
            "AutoComplete", denormalize(entities.AutoComplete)(to_domain(options))
        )
        return normalize(entities.AutoCompleteResponse)(res)

    async def get_conversation(self, options: GetConversationOptions) -> Any:
        res = await self.json_request(
            "GetConv",
            {"c": {k: coerce_boolean_to_int(v) for k, v in to_domain(options).items()}},
        )
        conversation = normalize(entities.Conversation)(_first(res.get("c")))
        conversation["messages"] = [
            self._shape_message(m) for m in conversation.get("messages", [])
        ]
        return conversation

    async def get_message(self, options: GetMessageOptions) -> Any:
        m: dict[str, Any] = {
            "id": options.id,
            "html": 1 if options.html is not False and options.raw is not True else 0,
            # expand available expansions
            "needExp": 1,
            "neuter": 0,
            # max body length (look for mp.truncated=1)
            "max": options.max or 250000,
            "raw": 1 if options.raw else 0,
        }
        if options.headers:
            m["header"] = [{"n": name} for name in options.headers]
        if options.read is True:
            m["read"] = 1
        if options.rid_z:
            m["ridZ"] = options.rid_z

        res = await self.json_request("GetMsg", {"m": m})
        if not res or not res.get("m"):
            return None
        return self._normalize_message(_first(res["m"]))

    async def get_filter_rules(self) -> Any:
        res = await self.json_request("GetFilterRules")
        rules = _first(res.get("filterRules") or [])
        return normalize(entities.Filter)((rules or {}).get("filterRule") or [])

    async def modify_filter_rules(self, filters: list[Mapping[str, Any]]) -> Any:
        return await self.json_request(
            "ModifyFilterRules",
            {
                "filterRules": [
                    {"filterRule": denormalize(entities.Filter)([dict(f) for f in filters])}
                ]
            },
        )

    async def save_draft(self, message: Mapping[str, Any]) -> dict:
        res = await self.json_request(
            "SaveDraft", denormalize(entities.SendMessageInfo)(dict(message))
        )
        messages = res.get("m")
        return {
            "message": [self._normalize_message(m) for m in messages] if messages else None
        }

    async def search(self, options: SearchOptions) -> Any:
        body = to_domain(options)
        body["fullConversation"] = 1 if options.full_conversation else 0
        normalized = normalize(entities.SearchResponse)(await self.json_request("Search", body))
        if normalized.get("messages"):
            normalized["messages"] = [self._shape_message(m) for m in normalized["messages"]]
        return normalized

    async def send_message(self, message: Mapping[str, Any]) -> Any:
        res = await self.json_request(
            "SendMsg", denormalize(entities.SendMessageInfo)(dict(message))
        )
        return normalize(entities.SendMessageInfo)(res)

    async def send_share_notification(self, notification: Mapping[str, Any]) -> Any:
        return await self.json_request(
            "SendShareNotification",
            denormalize(entities.ShareNotification)(dict(notification)),
        )

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    async def get_contact(self, options: GetContactOptions) -> Any:
        return await self.json_request("GetContacts", {"cn": to_domain(options)})

    async def get_contact_frequency(self, options: GetContactFrequencyOptions) -> Any:
        return await self.json_request("GetContactFrequency", to_domain(options))

    async def related_contacts(self, options: RelatedContactsOptions) -> Any:
        return await self.json_request(
            "GetRelatedContacts", {"targetContact": {"cn": options.email}}
        )

    # ------------------------------------------------------------------
    # Calendar and tasks
    # ------------------------------------------------------------------

    async def _calendar_item(self, name: str, item: Mapping[str, Any], account_name: str | None = None) -> Any:
        return await self.json_request(
            name,
            denormalize(entities.CalendarItemCreateModifyRequest)(dict(item)),
            account_name=account_name,
        )

    async def create_appointment(self, account_name: str, appointment: Mapping[str, Any]) -> Any:
        return await self._calendar_item("CreateAppointment", appointment, account_name)

    async def create_appointment_exception(
        self, account_name: str, appointment: Mapping[str, Any]
    ) -> Any:
        return await self._calendar_item("CreateAppointmentException", appointment, account_name)

    async def modify_appointment(self, account_name: str, appointment: Mapping[str, Any]) -> Any:
        return await self._calendar_item("ModifyAppointment", appointment, account_name)

    async def create_task(self, task: Mapping[str, Any]) -> Any:
        return await self._calendar_item("CreateTask", task)

    async def modify_task(self, task: Mapping[str, Any]) -> Any:
        return await self._calendar_item("ModifyTask", task)

    async def cancel_task(self, invite_id: str) -> Any:
        return await self.json_request("CancelTask", {"comp": "0", "id": invite_id})

    async def free_busy(self, options: FreeBusyOptions) -> Any:
        res = await self.json_request(
            "GetFreeBusy",
            {"s": options.start, "e": options.end, "name": ",".join(options.names)},
        )
        return normalize(entities.FreeBusy)(res.get("usr"))

    async def send_invite_reply(self, reply: Mapping[str, Any]) -> Any:
        res = await self.json_request(
            "SendInviteReply", denormalize(entities.InviteReply)(dict(reply))
        )
        return normalize(entities.CalendarItemHitInfo)(res)
