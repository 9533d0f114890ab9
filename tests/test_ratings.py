import asyncio

import pytest

from conftest import notifications_for
from skillswap.errors import BadRequestError
from skillswap.services.ratings import submit_rating


def _rate(client, rater, target_profile_id, score, **extra):
    body = {"targetProfileId": target_profile_id, "score": score, **extra}
    return client.post("/api/ratings", json=body, headers=rater.headers)


def _ratings(client, profile_id):
    return client.get(f"/api/ratings/profile/{profile_id}").json()


def test_average_is_zero_without_ratings(client, make_user):
    user = make_user()
    r = client.get(f"/api/ratings/profile/{user.profile_id}/average")
    assert r.status_code == 200
    assert r.json() == {"average": 0.0}


def test_average_is_mean(client, make_user):
    target = make_user()
    for score in (4, 5, 3):
        assert _rate(client, make_user(), target.profile_id, score).status_code == 200
    assert client.get(f"/api/ratings/profile/{target.profile_id}/average").json()["average"] == 4.0
    assert len(_ratings(client, target.profile_id)) == 3


def test_score_out_of_range_is_rejected(client, make_user):
    rater, target = make_user(), make_user()
    for score in (0, 6):
        assert _rate(client, rater, target.profile_id, score).status_code == 400
    assert _ratings(client, target.profile_id) == []


def test_rating_requires_profile(client, make_user):
    rater = make_user(with_profile=False)
    target = make_user()
    r = _rate(client, rater, target.profile_id, 5)
    assert r.status_code == 400


def test_rating_unknown_target(client, make_user):
    assert _rate(client, make_user(), 999999, 5).status_code == 404


def test_general_self_rating_is_accepted(client, make_user):
    user = make_user()
    r = _rate(client, user, user.profile_id, 5)
    assert r.status_code == 200
    assert r.json()["raterProfileId"] == r.json()["targetProfileId"] == user.profile_id
    assert client.get(f"/api/ratings/profile/{user.profile_id}/average").json()["average"] == 5.0


@pytest.mark.parametrize("score", [0, 6, -1])
def test_service_rejects_score_out_of_range(score):
    # the bounds check runs before any database access
    with pytest.raises(BadRequestError) as exc_info:
        asyncio.run(submit_rating(None, None, target_profile_id=1, score=score))
    assert exc_info.value.detail == "Score must be between 1 and 5."


def test_session_rating_requires_participation(client, make_user, make_session):
    host, attendee, outsider = make_user(), make_user(), make_user()
    session = make_session(host)
    req = client.post(f"/api/sessions/{session['id']}/requests", headers=attendee.headers).json()

    # attendee is still pending, so the host cannot rate them for this session yet
    r = _rate(client, host, attendee.profile_id, 5, sessionId=session["id"])
    assert r.status_code == 400
    assert r.json()["detail"] == "Target profile did not participate in the session."

    # an outsider is not a participant at all
    r = _rate(client, outsider, host.profile_id, 2, sessionId=session["id"])
    assert r.status_code == 403

    assert _ratings(client, attendee.profile_id) == []
    assert _ratings(client, host.profile_id) == []

    client.post(f"/api/sessions/requests/{req['id']}/respond", json={"accept": True}, headers=host.headers)
    r = _rate(client, attendee, host.profile_id, 5, sessionId=session["id"], comment="Great host")
    assert r.status_code == 200
    assert r.json()["sessionId"] == session["id"]


def test_rating_unknown_session(client, make_user):
    rater, target = make_user(), make_user()
    assert _rate(client, rater, target.profile_id, 3, sessionId=999999).status_code == 404


def test_rating_notifies_target(client, make_user, make_session):
    host = make_user(display_name="Grace")
    attendee = make_user()
    session = make_session(host, title="Sourdough")
    req = client.post(f"/api/sessions/{session['id']}/requests", headers=attendee.headers).json()
    client.post(f"/api/sessions/requests/{req['id']}/respond", json={"accept": True}, headers=host.headers)

    rating = _rate(client, host, attendee.profile_id, 4, sessionId=session["id"], comment="Keen learner").json()
    latest = notifications_for(client, attendee)[0]
    assert latest["type"] == "Rating"
    assert latest["title"] == "New Rating"
    assert latest["relatedRatingId"] == rating["id"]
    assert latest["content"] == "Grace rated you 4/5 for 'Sourdough'. Comment: Keen learner"


def test_ratings_listed_newest_first_with_rater_name(client, make_user):
    target = make_user()
    first_rater = make_user(display_name="First")
    second_rater = make_user(display_name="Second")
    _rate(client, first_rater, target.profile_id, 3)
    _rate(client, second_rater, target.profile_id, 5)
    rows = _ratings(client, target.profile_id)
    assert [row["raterDisplayName"] for row in rows] == ["Second", "First"]
