"""Entity declarations for the Zimbra objects the client touches."""

from __future__ import annotations

from zimbra_batch.normalize import Entity

EmailAddress = Entity(
    "EmailAddress",
    {"a": "address", "d": "name", "p": "displayName", "t": "type"},
)

MimePart = Entity(
    "MimePart",
    {
        "ct": "contentType",
        "cd": "contentDisposition",
        "ci": "contentId",
        "cl": "contentLocation",
        "s": "size",
    },
)
MimePart.nest("mp", MimePart, "mimeParts")

Folder = Entity(
    "Folder",
    {
        "l": "parentFolderId",
        "n": "nonFolderItemCount",
        "s": "size",
        "u": "unread",
        "f": "flags",
        "rev": "revision",
        "ms": "changeDate",
        "rest": "url",
        "zid": "ownerZimbraId",
        "rid": "sharedItemId",
        "oname": "ownerFolderName",
    },
)
Folder.nest("folder", Folder, "folders").nest("link", Folder, "linkedFolders").nest(
    "search", Folder
)

MessageInfo = Entity(
    "MessageInfo",
    {
        "d": "date",
        "l": "folderId",
        "f": "flags",
        "s": "size",
        "su": "subject",
        "fr": "excerpt",
        "cid": "conversationId",
        "rev": "revision",
        "sd": "sentDate",
        "mid": "messageId",
        "irt": "inReplyTo",
        "t": "tags",
        "tn": "tagNames",
    },
)
MessageInfo.nest("e", EmailAddress, "emailAddresses").nest("mp", MimePart, "mimeParts")

Conversation = Entity(
    "Conversation",
    {
        "d": "date",
        "f": "flags",
        "su": "subject",
        "fr": "excerpt",
        "n": "numMessages",
        "u": "unread",
        "t": "tags",
    },
)
Conversation.nest("m", MessageInfo, "messages").nest("e", EmailAddress, "emailAddresses")

SearchResponse = Entity("SearchResponse")
SearchResponse.nest("m", MessageInfo, "messages").nest("c", Conversation, "conversations")

FreeBusyInstance = Entity("FreeBusyInstance", {"s": "start", "e": "end"})

FreeBusy = Entity("FreeBusy")
for _wire, _domain in (
    ("f", "free"),
    ("b", "busy"),
    ("t", "tentative"),
    ("u", "unavailable"),
    ("n", "nodata"),
):
    FreeBusy.nest(_wire, FreeBusyInstance, _domain)

Filter = Entity(
    "Filter",
    {"filterActions": "actions", "filterTests": "conditions"},
)

ActionOptions = Entity(
    "ActionOptions",
    {
        "l": "folderId",
        "f": "flags",
        "tn": "tagNames",
        "zid": "zimbraId",
        "tcon": "constraints",
        "gt": "grantType",
    },
)

AutoComplete = Entity("AutoComplete", {"t": "type"})

AutoCompleteMatch = Entity(
    "AutoCompleteMatch",
    {"display": "displayName", "first": "firstName", "last": "lastName", "full": "fullName"},
)
AutoCompleteResponse = Entity("AutoCompleteResponse")
AutoCompleteResponse.nest("match", AutoCompleteMatch, "matches")

InviteComponent = Entity(
    "InviteComponent",
    {
        "loc": "location",
        "s": "start",
        "e": "end",
        "at": "attendees",
        "or": "organizer",
        "fb": "freeBusy",
        "transp": "transparency",
        "desc": "description",
    },
)
Invitation = Entity("Invitation")
Invitation.nest("comp", InviteComponent, "components")

CalendarItemMessage = Entity("CalendarItemMessage", {"l": "folderId", "su": "subject"})
CalendarItemMessage.nest("inv", Invitation, "invitations").nest(
    "mp", MimePart, "mimeParts"
).nest("e", EmailAddress, "emailAddresses")

CalendarItemCreateModifyRequest = Entity(
    "CalendarItemCreateModifyRequest",
    {"ms": "modifiedSequence", "rev": "revision", "comp": "componentNum"},
)
CalendarItemCreateModifyRequest.nest("m", CalendarItemMessage, "message")

CalendarItemHitInfo = Entity(
    "CalendarItemHitInfo",
    {
        "calItemId": "calendarItemId",
        "invId": "inviteId",
        "apptId": "appointmentId",
        "rev": "revision",
        "ms": "modifiedSequence",
    },
)

OutgoingMessage = Entity(
    "OutgoingMessage",
    {
        "su": "subject",
        "attach": "attachments",
        "irt": "inReplyTo",
        "origid": "origId",
        "rt": "replyType",
        "did": "draftId",
        "f": "flags",
    },
)
OutgoingMessage.nest("e", EmailAddress, "emailAddresses").nest("mp", MimePart, "mimeParts")

SendMessageInfo = Entity("SendMessageInfo")
SendMessageInfo.nest("m", OutgoingMessage, "message")

InviteReply = Entity("InviteReply", {"compNum": "componentNum"})
InviteReply.nest("m", OutgoingMessage, "message")

ShareNotification = Entity("ShareNotification")
ShareNotification.nest("e", EmailAddress, "address")

SignatureContent = Entity("SignatureContent", {"_content": "value"})
Signature = Entity("Signature")
Signature.nest("content", SignatureContent)
CreateSignatureRequest = Entity("CreateSignatureRequest")
CreateSignatureRequest.nest("signature", Signature)

Mountpoint = Entity(
    "Mountpoint",
    {
        "l": "parentFolderId",
        "f": "flags",
        "rid": "sharedItemId",
        "zid": "ownerZimbraId",
    },
)
CreateMountpointRequest = Entity("CreateMountpointRequest")
CreateMountpointRequest.nest("link", Mountpoint)
