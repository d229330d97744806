"""JSON SOAP envelope building and reply parsing."""

from __future__ import annotations

import pytest

from zimbra_batch.errors import ZimbraFaultError, ZimbraProtocolError
from zimbra_batch.request.envelope import (
    build_soap_payload,
    fault_error,
    parse_reply,
    soap_url,
)
from zimbra_batch.request.models import Envelope, Failure, Namespace, Request, Success

pytestmark = pytest.mark.unit


def _batch(*requests: Request, session_id: str = "1") -> Envelope:
    return Envelope(requests=tuple(requests), session_id=session_id)


def _single(request: Request, session_id: str = "1") -> Envelope:
    return Envelope(
        requests=(request,),
        session_id=session_id,
        account_name=request.account_name,
        batch=False,
    )


FAULT = {
    "Code": {"Value": "soap:Sender"},
    "Reason": {"Text": "no such folder id: 999"},
    "Detail": {"Error": {"_jsns": "urn:zimbra", "Code": "mail.NO_SUCH_FOLDER"}},
}


class TestBuildPayload:
    def test_batch_groups_by_name_with_positions(self) -> None:
        envelope = _batch(
            Request("GetFolder", body={"tr": True}),
            Request("GetPrefs", namespace=Namespace.Account),
            Request("GetFolder", body={"view": "task"}),
            session_id="s7",
        )

        payload = build_soap_payload(envelope, user_agent="ua", auth_token="tok")

        context = payload["Header"]["context"]
        assert context["session"] == {"id": "s7"}
        assert context["userAgent"] == {"name": "ua"}
        assert context["authToken"] == "tok"
        assert "account" not in context

        batch = payload["Body"]["BatchRequest"]
        assert batch["onerror"] == "continue"
        assert batch["GetFolderRequest"] == [
            {"_jsns": "urn:zimbraMail", "tr": True, "requestId": 0},
            {"_jsns": "urn:zimbraMail", "view": "task", "requestId": 2},
        ]
        assert batch["GetPrefsRequest"] == [{"_jsns": "urn:zimbraAccount", "requestId": 1}]

    def test_single_carries_account_scope(self) -> None:
        envelope = _single(
            Request("CreateAppointment", body={"m": {}}, account_name="b@example.com")
        )

        payload = build_soap_payload(envelope, user_agent="ua")

        assert payload["Header"]["context"]["account"] == {
            "by": "name",
            "_content": "b@example.com",
        }
        assert "authToken" not in payload["Header"]["context"]
        assert payload["Body"] == {
            "CreateAppointmentRequest": {"_jsns": "urn:zimbraMail", "m": {}}
        }

    def test_body_namespace_override(self) -> None:
        envelope = _single(
            Request("GetShareInfo", body={"_jsns": "urn:zimbraAccount"}, account_name="a")
        )
        payload = build_soap_payload(envelope, user_agent="ua")
        assert payload["Body"]["GetShareInfoRequest"]["_jsns"] == "urn:zimbraAccount"

    def test_body_is_snapshotted_at_construction(self) -> None:
        body = {"folder": {"l": "2"}}
        request = Request("GetFolder", body=body)

        body["folder"]["l"] = "7"
        body["depth"] = 0
        payload = build_soap_payload(_batch(request), user_agent="ua")

        assert request.body == {"folder": {"l": "2"}}
        assert payload["Body"]["BatchRequest"]["GetFolderRequest"] == [
            {"_jsns": "urn:zimbraMail", "folder": {"l": "2"}, "requestId": 0}
        ]
        with pytest.raises(TypeError):
            request.body["depth"] = 0  # type: ignore[index]

    def test_urls(self) -> None:
        assert soap_url("http://z", "/service/soap", _batch(Request("NoOp"))) == (
            "http://z/service/soap/BatchRequest"
        )
        assert soap_url(
            "http://z", "/service/soap", _single(Request("NoOp", account_name="a"))
        ) == "http://z/service/soap/NoOpRequest"


class TestParseBatch:
    def test_demultiplexes_by_request_id(self) -> None:
        envelope = _batch(Request("GetFolder"), Request("GetMsg"), Request("GetFolder"))
        payload = {
            "Header": {
                "context": {
                    "session": {"id": "s2", "_content": "s2"},
                    "notify": [{"seq": 4}, {"seq": 5}],
                }
            },
            "Body": {
                "BatchResponse": {
                    "_jsns": "urn:zimbra",
                    "GetFolderResponse": [
                        {"requestId": "2", "folder": ["b"]},
                        {"requestId": "0", "folder": ["a"]},
                    ],
                    "Fault": [dict(FAULT, requestId="1")],
                }
            },
        }

        reply = parse_reply(envelope, payload)

        assert reply.session_id == "s2"
        assert reply.notification == {"seq": 4}
        assert reply.results[0] == Success({"folder": ["a"]})
        assert reply.results[2] == Success({"folder": ["b"]})
        failure = reply.results[1]
        assert isinstance(failure, Failure)
        assert failure.error.code == "mail.NO_SUCH_FOLDER"
        assert failure.error.request_name == "GetMsg"

    def test_rejected_batch_fails_every_request(self) -> None:
        envelope = _batch(Request("GetFolder"), Request("GetMsg"))
        expired = {
            "Reason": {"Text": "auth credentials have expired"},
            "Detail": {"Error": {"Code": "service.AUTH_EXPIRED"}},
        }

        reply = parse_reply(envelope, {"Body": {"Fault": expired}})

        assert [type(result) for result in reply.results] == [Failure, Failure]
        assert [result.error.code for result in reply.results] == [
            "service.AUTH_EXPIRED",
            "service.AUTH_EXPIRED",
        ]
        assert [result.error.request_name for result in reply.results] == ["GetFolder", "GetMsg"]

    def test_missing_position_is_a_protocol_error(self) -> None:
        envelope = _batch(Request("NoOp"), Request("NoOp"))
        payload = {"Body": {"BatchResponse": {"NoOpResponse": [{"requestId": "0"}]}}}

        with pytest.raises(ZimbraProtocolError, match=r"\[1\]"):
            parse_reply(envelope, payload)

    def test_duplicate_position_is_a_protocol_error(self) -> None:
        envelope = _batch(Request("NoOp"), Request("NoOp"))
        payload = {
            "Body": {
                "BatchResponse": {
                    "NoOpResponse": [{"requestId": "0"}, {"requestId": "0"}]
                }
            }
        }

        with pytest.raises(ZimbraProtocolError):
            parse_reply(envelope, payload)

    def test_missing_body_is_a_protocol_error(self) -> None:
        with pytest.raises(ZimbraProtocolError):
            parse_reply(_batch(Request("NoOp")), {"Header": {}})
        with pytest.raises(ZimbraProtocolError):
            parse_reply(_batch(Request("NoOp")), ["not", "an", "object"])


class TestParseSingle:
    def test_success(self) -> None:
        envelope = _single(Request("GetInfo", account_name="a"))
        payload = {
            "Header": {"context": {"session": "s3"}},
            "Body": {"GetInfoResponse": {"name": "a"}},
        }

        reply = parse_reply(envelope, payload)

        assert reply.results == (Success({"name": "a"}),)
        assert reply.session_id == "s3"
        assert reply.notification is None

    def test_fault(self) -> None:
        envelope = _single(Request("GetFolder", account_name="a"))
        reply = parse_reply(envelope, {"Body": {"Fault": FAULT}})

        (result,) = reply.results
        assert isinstance(result, Failure)
        assert str(result.error) == "GetFolder: no such folder id: 999 (mail.NO_SUCH_FOLDER)"

    def test_missing_response_is_a_protocol_error(self) -> None:
        envelope = _single(Request("GetFolder", account_name="a"))
        with pytest.raises(ZimbraProtocolError, match="GetFolderResponse"):
            parse_reply(envelope, {"Body": {"OtherResponse": {}}})


def test_fault_error_tolerates_odd_shapes() -> None:
    error = fault_error("plain text")
    assert isinstance(error, ZimbraFaultError)
    assert error.reason == "plain text"
    assert error.code is None

    assert fault_error({}).reason == "Unknown SOAP fault"
