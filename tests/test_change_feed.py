"""
Tests for the change feed and the claim long-poll built on it.
"""

import asyncio

import pytest

from hospitalflow.application.dto.claim_dto import WatchClaimsRequest
from hospitalflow.application.services import change_feed as topics
from hospitalflow.application.services.change_feed import ChangeFeed
from hospitalflow.application.use_cases.hmo_claims import WatchClaimsUseCase


def test_publish_bumps_topic_revision_only():
    feed = ChangeFeed()
    event = feed.publish(topics.CLAIM, "HMO-CONS-P-1001-BILL-1001", 1)

    assert event.revision == 1
    assert feed.revision(topics.CLAIM) == 1
    assert feed.revision(topics.BILL) == 0


def test_subscribers_receive_events_until_unsubscribed():
    feed = ChangeFeed()
    received = []
    unsubscribe = feed.subscribe(topics.BILL, received.append)

    feed.publish(topics.BILL, "BILL-1001", 1)
    unsubscribe()
    feed.publish(topics.BILL, "BILL-1001", 2)

    assert [e.version for e in received] == [1]


def test_failing_subscriber_does_not_block_others():
    feed = ChangeFeed()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    feed.subscribe(topics.PATIENT, broken)
    feed.subscribe(topics.PATIENT, received.append)
    feed.publish(topics.PATIENT, "P-1001", 1)

    assert len(received) == 1


def test_changes_since_respects_history_size():
    feed = ChangeFeed(history_size=2)
    for version in range(1, 4):
        feed.publish(topics.BILL, "BILL-1001", version)

    assert [e.revision for e in feed.changes_since(topics.BILL, 0)] == [2, 3]
    assert [e.revision for e in feed.changes_since(topics.BILL, 2)] == [3]


@pytest.mark.asyncio
async def test_wait_returns_immediately_when_already_ahead():
    feed = ChangeFeed()
    feed.publish(topics.CLAIM, "c1", 1)
    assert await feed.wait_for_change(topics.CLAIM, 0, timeout=5) == 1


@pytest.mark.asyncio
async def test_wait_times_out_without_change():
    feed = ChangeFeed()
    assert await feed.wait_for_change(topics.CLAIM, 0, timeout=0.05) == 0


@pytest.mark.asyncio
async def test_wait_wakes_on_publish():
    feed = ChangeFeed()

    async def publish_later():
        await asyncio.sleep(0.01)
        feed.publish(topics.CLAIM, "c1", 1)

    waiter = asyncio.create_task(feed.wait_for_change(topics.CLAIM, 0, timeout=5))
    await publish_later()
    assert await waiter == 1


@pytest.mark.asyncio
async def test_watch_claims_without_revision_returns_snapshot(store, register, walk_in):
    patient = await register(hmo=True)
    await walk_in(patient)

    result = await WatchClaimsUseCase(store).execute(WatchClaimsRequest())
    assert result.changed is True
    assert result.revision == store.feed.revision(topics.CLAIM)
    assert len(result.claims) == 1


@pytest.mark.asyncio
async def test_watch_claims_reports_no_change_after_timeout(store, register, walk_in):
    patient = await register(hmo=True)
    await walk_in(patient)
    revision = store.feed.revision(topics.CLAIM)

    result = await WatchClaimsUseCase(store).execute(
        WatchClaimsRequest(since=revision, timeout=0.05)
    )
    assert result.changed is False
    assert result.claims == []
    assert result.revision == revision


@pytest.mark.asyncio
async def test_watch_claims_wakes_when_a_claim_opens(store, register, walk_in):
    patient = await register(hmo=True)
    revision = store.feed.revision(topics.CLAIM)

    watcher = asyncio.create_task(
        WatchClaimsUseCase(store).execute(WatchClaimsRequest(since=revision, timeout=5))
    )
    await asyncio.sleep(0)
    await walk_in(patient)

    result = await watcher
    assert result.changed is True
    assert result.revision > revision
    assert result.claims[0].patient_id == patient.patient_id
