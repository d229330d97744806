"""Single calls for account-scoped requests."""

from __future__ import annotations

import asyncio

import pytest

from zimbra_batch.dispatch import NotificationRelay, SessionState, SingleCallExecutor
from zimbra_batch.errors import ZimbraFaultError, ZimbraHTTPError
from zimbra_batch.request.models import Failure, Reply, Request, Success

pytestmark = pytest.mark.unit


@pytest.fixture
def notifications() -> list:
    return []


@pytest.fixture
def session(notifications) -> SessionState:
    return SessionState(NotificationRelay(notifications.append))


async def test_each_scoped_request_is_its_own_call(transport, session) -> None:
    executor = SingleCallExecutor(transport, session)

    results = await asyncio.gather(
        *(executor.submit(Request("CreateAppointment", account_name="b")) for _ in range(3))
    )

    assert results == [{"name": "CreateAppointment"}] * 3
    assert len(transport.envelopes) == 3
    for envelope in transport.envelopes:
        assert envelope.batch is False
        assert envelope.account_name == "b"
        assert len(envelope.requests) == 1


async def test_dispatch_is_immediate(transport, session) -> None:
    executor = SingleCallExecutor(transport, session)

    future = executor.submit(Request("ModifyAppointment", account_name="b"))
    await asyncio.sleep(0)

    assert len(transport.envelopes) == 1
    await future


async def test_fault_rejects_the_caller(transport, session) -> None:
    transport.queue(Reply(results=(Failure(ZimbraFaultError("denied", code="service.PERM_DENIED")),)))
    executor = SingleCallExecutor(transport, session)

    with pytest.raises(ZimbraFaultError, match="denied"):
        await executor.submit(Request("CreateAppointment", account_name="b"))


async def test_transport_failure_rejects_the_caller(transport, session) -> None:
    transport.queue(ZimbraHTTPError(502, method="POST", url="http://x/service/soap"))
    executor = SingleCallExecutor(transport, session)

    with pytest.raises(ZimbraHTTPError):
        await executor.submit(Request("CreateAppointment", account_name="b"))
    assert session.id == "1"


async def test_scoped_reply_updates_the_shared_session(transport, session, notifications) -> None:
    transport.queue(Reply(results=(Success({}),), session_id="s9", notification="n1"))
    executor = SingleCallExecutor(transport, session)

    await executor.submit(Request("CreateAppointment", account_name="b"))

    assert session.id == "s9"
    assert notifications == ["n1"]


async def test_unscoped_request_is_refused(transport, session) -> None:
    executor = SingleCallExecutor(transport, session)

    with pytest.raises(ValueError):
        executor.submit(Request("NoOp"))
