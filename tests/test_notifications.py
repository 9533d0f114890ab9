import asyncio

from conftest import notifications_for
from skillswap.database import async_session
from skillswap.services import notifications as notifications_service
from skillswap.services.ws_updates import updates_hub


def _pile_up(client, make_user, target, count):
    """Give target a few Rating notifications."""
    for score in range(1, count + 1):
        r = client.post(
            "/api/ratings", json={"targetProfileId": target.profile_id, "score": score}, headers=make_user().headers
        )
        assert r.status_code == 200


def test_unread_count_and_mark_read(client, make_user):
    target = make_user()
    _pile_up(client, make_user, target, 2)
    assert client.get("/api/notifications/unread", headers=target.headers).json() == {"unreadCount": 2}

    latest = notifications_for(client, target)[0]
    assert latest["isRead"] is False
    r = client.post(f"/api/notifications/{latest['id']}/read", headers=target.headers)
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get("/api/notifications/unread", headers=target.headers).json()["unreadCount"] == 1
    assert notifications_for(client, target)[0]["isRead"] is True


def test_paging_newest_first(client, make_user):
    target = make_user()
    _pile_up(client, make_user, target, 3)
    everything = notifications_for(client, target)
    assert [n["content"][-4:] for n in everything] == ["3/5.", "2/5.", "1/5."]

    page1 = client.get("/api/notifications", params={"pageSize": 2, "pageNumber": 1}, headers=target.headers).json()
    page2 = client.get("/api/notifications", params={"pageSize": 2, "pageNumber": 2}, headers=target.headers).json()
    assert [n["id"] for n in page1 + page2] == [n["id"] for n in everything]
    assert len(page2) == 1


def test_cannot_touch_someone_elses_notification(client, make_user):
    target, stranger = make_user(), make_user()
    _pile_up(client, make_user, target, 1)
    notification_id = notifications_for(client, target)[0]["id"]
    assert client.post(f"/api/notifications/{notification_id}/read", headers=stranger.headers).status_code == 404
    assert client.delete(f"/api/notifications/{notification_id}", headers=stranger.headers).status_code == 404
    assert client.get("/api/notifications/unread", headers=target.headers).json()["unreadCount"] == 1


def test_delete_notification(client, make_user):
    target = make_user()
    _pile_up(client, make_user, target, 1)
    notification_id = notifications_for(client, target)[0]["id"]
    assert client.delete(f"/api/notifications/{notification_id}", headers=target.headers).status_code == 204
    assert notifications_for(client, target) == []
    assert client.delete(f"/api/notifications/{notification_id}", headers=target.headers).status_code == 404


def test_notifications_require_auth(client):
    assert client.get("/api/notifications").status_code == 401
    assert client.get("/api/notifications/unread").status_code == 401


def test_websocket_hint_on_new_notification(client, make_user):
    target = make_user()
    token = target.headers["Authorization"].split(" ", 1)[1]
    with client.websocket_connect(f"/ws/updates?token={token}") as ws:
        _pile_up(client, make_user, target, 1)
        assert ws.receive_json() == {"type": "notifications"}


def test_hint_is_sent_after_the_notification_is_committed(client, make_user, monkeypatch):
    target = make_user()
    user_id = client.get("/api/auth/me", headers=target.headers).json()["id"]
    seen = []

    async def recording_push(uid, kind):
        # a fresh session only sees committed rows
        async with async_session() as db:
            seen.append((uid, kind, await notifications_service.unread_count(db, uid)))

    monkeypatch.setattr(updates_hub, "push", recording_push)
    _pile_up(client, make_user, target, 1)
    assert seen == [(user_id, "notifications", 1)]


class _SessionInfo:
    def __init__(self):
        self.info = {}


def test_deferred_hints_are_deduplicated_and_dropped_on_rollback(monkeypatch):
    pushed = []

    async def recording_push(uid, kind):
        pushed.append((uid, kind))

    monkeypatch.setattr(updates_hub, "push", recording_push)

    committed = _SessionInfo()
    updates_hub.defer(committed, 1)
    updates_hub.defer(committed, 1)
    updates_hub.defer(committed, 2)
    asyncio.run(updates_hub.flush_deferred(committed))
    assert sorted(pushed) == [(1, "notifications"), (2, "notifications")]
    assert committed.info == {}

    pushed.clear()
    rolled_back = _SessionInfo()
    updates_hub.defer(rolled_back, 3)
    updates_hub.discard_deferred(rolled_back)
    asyncio.run(updates_hub.flush_deferred(rolled_back))
    assert pushed == []
