from conftest import notifications_for


def _join(client, session_id, user, message=None):
    body = {"message": message} if message is not None else None
    return client.post(f"/api/sessions/{session_id}/requests", json=body, headers=user.headers)


def _respond(client, request_id, host, accept, message=None):
    return client.post(
        f"/api/sessions/requests/{request_id}/respond",
        json={"accept": accept, "message": message},
        headers=host.headers,
    )


def test_create_requires_profile(client, make_user):
    user = make_user(with_profile=False)
    r = client.post("/api/sessions", json={"title": "No profile", "durationMinutes": 30}, headers=user.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "User must create a profile before creating sessions."


def test_session_starts_open_even_if_closed_requested(client, make_user, make_session):
    host = make_user()
    session = make_session(host, isOpen=False)
    assert session["isOpen"] is True
    assert session["hostProfileId"] == host.profile_id
    assert session["scheduledAt"]


def test_create_with_unknown_skill_is_404(client, make_user):
    host = make_user()
    r = client.post(
        "/api/sessions", json={"title": "Mystery", "durationMinutes": 30, "skillId": 999999}, headers=host.headers
    )
    assert r.status_code == 404


def test_duration_bounds(client, make_user):
    host = make_user()
    for minutes in (0, 601):
        r = client.post("/api/sessions", json={"title": "Bad", "durationMinutes": minutes}, headers=host.headers)
        assert r.status_code == 400


def test_first_accept_closes_session(client, make_user, make_session):
    host, alice, bob = make_user(), make_user(), make_user()
    session = make_session(host)
    req_a = _join(client, session["id"], alice).json()
    req_b = _join(client, session["id"], bob).json()
    assert req_a["status"] == "Pending"

    r = _respond(client, req_a["id"], host, True)
    assert r.status_code == 200
    assert r.json()["status"] == "Accepted"
    assert client.get(f"/api/sessions/{session['id']}").json()["isOpen"] is False

    # a pending request made before the close can still be answered
    assert _respond(client, req_b["id"], host, False).json()["status"] == "Rejected"


def test_join_closed_session_fails(client, make_user, make_session):
    host, alice, carol = make_user(), make_user(), make_user()
    session = make_session(host)
    req = _join(client, session["id"], alice).json()
    _respond(client, req["id"], host, True)

    r = _join(client, session["id"], carol)
    assert r.status_code == 400
    assert r.json()["detail"] == "Session is not open for requests."


def test_responded_request_cannot_change_again(client, make_user, make_session):
    host, alice = make_user(), make_user()
    session = make_session(host)
    req = _join(client, session["id"], alice).json()
    assert _respond(client, req["id"], host, False).status_code == 200
    for accept in (True, False):
        r = _respond(client, req["id"], host, accept)
        assert r.status_code == 400
    detail = client.get(f"/api/sessions/{session['id']}").json()
    assert detail["requests"][0]["status"] == "Rejected"
    assert detail["isOpen"] is True


def test_only_host_may_respond(client, make_user, make_session):
    host, alice, mallory = make_user(), make_user(), make_user()
    session = make_session(host)
    req = _join(client, session["id"], alice).json()
    r = _respond(client, req["id"], mallory, True)
    assert r.status_code == 403
    assert _respond(client, 999999, host, True).status_code == 404


def test_join_rules(client, make_user, make_session):
    host, alice = make_user(), make_user()
    no_profile = make_user(with_profile=False)
    session = make_session(host)

    assert _join(client, 999999, alice).status_code == 404
    assert _join(client, session["id"], host).status_code == 400
    assert _join(client, session["id"], no_profile).status_code == 400
    assert _join(client, session["id"], alice).status_code == 200
    r = _join(client, session["id"], alice)
    assert r.status_code == 400
    assert "active request" in r.json()["detail"]


def test_join_notifies_host_with_message(client, make_user, make_session):
    host = make_user()
    alice = make_user(display_name="Alice")
    session = make_session(host, title="Knife skills")
    _join(client, session["id"], alice, message="Count me in")
    latest = notifications_for(client, host)[0]
    assert latest["type"] == "JoinRequest"
    assert latest["relatedSessionId"] == session["id"]
    assert latest["content"].startswith("Alice wants to join your session 'Knife skills'.")
    assert latest["content"].endswith("Message: Count me in")


def test_accept_message_is_appended(client, make_user, make_session):
    host, alice = make_user(), make_user()
    session = make_session(host, title="Scales")
    req = _join(client, session["id"], alice).json()
    _respond(client, req["id"], host, True, message="See you at 5")
    latest = notifications_for(client, alice)[0]
    assert latest["type"] == "RequestAccepted"
    assert latest["title"] == "Request Accepted"
    assert latest["content"].endswith("See you at 5")


def test_reject_notifies_requester(client, make_user, make_session):
    host, alice = make_user(), make_user()
    session = make_session(host, title="Openings")
    req = _join(client, session["id"], alice).json()
    _respond(client, req["id"], host, False)
    latest = notifications_for(client, alice)[0]
    assert latest["type"] == "RequestRejected"
    assert latest["content"] == "Your request to join 'Openings' has been declined."


def test_session_created_fans_out_by_wanted_skill(client, make_user, make_session, skill_ids):
    guitar = skill_ids["Guitar"]
    host = make_user(wanted=[guitar])
    fan = make_user(wanted=[guitar])
    bystander = make_user(wanted=[skill_ids["Chess"]])
    session = make_session(host, title="Blues riffs", skill_id=guitar)

    def created(user):
        return [
            n
            for n in notifications_for(client, user)
            if n["type"] == "SessionCreated" and n["relatedSessionId"] == session["id"]
        ]

    assert len(created(fan)) == 1
    assert created(fan)[0]["title"] == "New Session Available"
    assert created(bystander) == []
    assert created(host) == []


def test_partial_update(client, make_user, make_session):
    host, other = make_user(), make_user()
    session = make_session(host, title="Original")
    r = client.put(f"/api/sessions/{session['id']}", json={"title": "Renamed"}, headers=host.headers)
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Renamed"
    assert body["description"] == "Bring a laptop"
    assert body["durationMinutes"] == 60

    r = client.put(f"/api/sessions/{session['id']}", json={"isOpen": False}, headers=host.headers)
    assert r.json()["isOpen"] is False
    r = client.put(f"/api/sessions/{session['id']}", json={"isOpen": True}, headers=host.headers)
    assert r.json()["isOpen"] is True

    r = client.put(f"/api/sessions/{session['id']}", json={"title": "Stolen"}, headers=other.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "You can only manage sessions you created"


def test_admin_cannot_edit_someone_elses_session(client, make_user, make_session, admin_headers):
    host = make_user()
    session = make_session(host)
    r = client.put(f"/api/sessions/{session['id']}", json={"title": "Admin"}, headers=admin_headers)
    assert r.status_code == 403


def test_delete_cascades(client, make_user, make_session, admin_headers):
    host, alice = make_user(), make_user()
    session = make_session(host)
    req = _join(client, session["id"], alice).json()
    _respond(client, req["id"], host, True)
    r = client.post(
        "/api/ratings",
        json={"targetProfileId": alice.profile_id, "score": 5, "sessionId": session["id"]},
        headers=host.headers,
    )
    assert r.status_code == 200

    assert client.delete(f"/api/sessions/{session['id']}", headers=alice.headers).status_code == 403
    assert client.delete(f"/api/sessions/{session['id']}", headers=host.headers).status_code == 204

    assert client.get(f"/api/sessions/{session['id']}").status_code == 404
    assert client.get(f"/api/ratings/profile/{alice.profile_id}").json() == []
    for user in (host, alice):
        assert all(n["relatedSessionId"] != session["id"] for n in notifications_for(client, user))
    assert client.get("/api/sessions/my-participations", headers=alice.headers).json() == []
    assert client.delete(f"/api/sessions/{session['id']}", headers=host.headers).status_code == 404


def test_active_sessions_for_profile(client, make_user, make_session):
    host = make_user()
    open_one = make_session(host, title="Open")
    closed_one = make_session(host, title="Closed")
    client.put(f"/api/sessions/{closed_one['id']}", json={"isOpen": False}, headers=host.headers)
    r = client.get(f"/api/sessions/profile/{host.profile_id}/active")
    assert [s["id"] for s in r.json()] == [open_one["id"]]


def test_my_participations(client, make_user, make_session):
    host, alice = make_user(), make_user()
    s1 = make_session(host, title="First")
    s2 = make_session(host, title="Second")
    s3 = make_session(host, title="Third")
    r1 = _join(client, s1["id"], alice).json()
    _join(client, s2["id"], alice)
    r3 = _join(client, s3["id"], alice).json()
    _respond(client, r1["id"], host, True)
    _respond(client, r3["id"], host, False)

    rows = client.get("/api/sessions/my-participations", headers=alice.headers).json()
    by_session = {row["sessionId"]: row for row in rows}
    assert set(by_session) == {s1["id"], s2["id"]}
    assert by_session[s1["id"]]["status"] == "Accepted"
    assert by_session[s2["id"]]["status"] == "Pending"
    assert by_session[s1["id"]]["sessionTitle"] == "First"
    assert by_session[s1["id"]]["hostProfileId"] == host.profile_id


def test_participations_empty_without_profile(client, make_user):
    user = make_user(with_profile=False)
    r = client.get("/api/sessions/my-participations", headers=user.headers)
    assert r.status_code == 200
    assert r.json() == []


def test_requests_for_host_newest_first(client, make_user, make_session):
    host, alice, bob = make_user(), make_user(), make_user()
    session = make_session(host, title="Popular")
    first = _join(client, session["id"], alice).json()
    second = _join(client, session["id"], bob).json()
    rows = client.get("/api/sessions/requests/pending", headers=host.headers).json()
    assert [row["id"] for row in rows] == [second["id"], first["id"]]
    assert rows[0]["sessionTitle"] == "Popular"
    assert rows[0]["requesterDisplayName"] == bob.profile["displayName"]


def test_session_detail_lists_requests(client, make_user, make_session):
    host = make_user()
    alice = make_user(display_name="Alice D")
    session = make_session(host)
    _join(client, session["id"], alice, message="hello")
    detail = client.get(f"/api/sessions/{session['id']}").json()
    assert detail["requests"][0]["requesterDisplayName"] == "Alice D"
    assert detail["requests"][0]["message"] == "hello"
    assert any(s["id"] == session["id"] for s in client.get("/api/sessions").json())


def test_scheduled_at_is_returned_in_utc(client, make_user, make_session):
    host = make_user()
    session = make_session(host, scheduledAt="2030-01-01T10:00:00+02:00")
    assert _is_utc(session["scheduledAt"])
    assert session["scheduledAt"].startswith("2030-01-01T08:00:00")

    stored = client.get(f"/api/sessions/{session['id']}").json()
    assert _is_utc(stored["scheduledAt"])
    assert stored["scheduledAt"].startswith("2030-01-01T08:00:00")

    # omitted scheduledAt defaults to now, still labelled as UTC
    assert _is_utc(make_session(host)["scheduledAt"])


def _is_utc(value: str) -> bool:
    return value.endswith("Z") or value.endswith("+00:00")
