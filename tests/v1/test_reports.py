# tests/v1/test_reports.py
"""Tests for report filing and moderator review endpoints."""

from fastapi import status


def _send(client, auth_headers, room, user, content) -> None:
    response = client.post(
        f"/api/v1/chat/rooms/{room.id}/messages",
        json={"content": content},
        headers=auth_headers(user),
    )
    assert response.status_code == status.HTTP_201_CREATED


def _file_report(client, auth_headers, reporter, **payload):
    return client.post("/api/v1/reports", json=payload, headers=auth_headers(reporter))


def test_report_lifecycle(client, auth_headers, room, buyer, seller, moderator, listing) -> None:
    _send(client, auth_headers, room, buyer, "oi")
    _send(client, auth_headers, room, seller, "quanto custa?")

    filed = _file_report(
        client,
        auth_headers,
        buyer,
        target_type="listing",
        target_id=listing.id,
        reason="scam",
        chat_room_id=room.id,
    )
    assert filed.status_code == status.HTTP_201_CREATED
    report = filed.json()
    assert report["status"] == "pending"
    assert report["has_chat_log"] is True
    assert "encrypted_chat_log" not in report

    queue = client.get("/api/v1/reports/queue", headers=auth_headers(moderator)).json()
    assert [item["id"] for item in queue] == [report["id"]]

    detail = client.get(f"/api/v1/reports/{report['id']}", headers=auth_headers(moderator)).json()
    assert [(e["sender_id"], e["content"]) for e in detail["chat_log"]] == [
        (buyer.id, "oi"),
        (seller.id, "quanto custa?"),
    ]

    resolved = client.post(
        f"/api/v1/reports/{report['id']}/resolve",
        json={"action": "ban_user", "resolution": "RMT attempt"},
        headers=auth_headers(moderator),
    )
    assert resolved.status_code == status.HTTP_200_OK
    assert resolved.json()["status"] == "resolved"
    assert resolved.json()["resolution"] == "RMT attempt"

    ban = client.get("/api/v1/moderation/ban-status", headers=auth_headers(seller)).json()
    assert ban == {"is_banned": True}

    after = client.get(f"/api/v1/reports/{report['id']}", headers=auth_headers(moderator)).json()
    assert after["chat_log"] is None
    assert client.get("/api/v1/reports/queue", headers=auth_headers(moderator)).json() == []


def test_duplicate_report_conflicts(client, auth_headers, buyer, listing) -> None:
    payload = {"target_type": "listing", "target_id": listing.id, "reason": "spam"}

    assert _file_report(client, auth_headers, buyer, **payload).status_code == status.HTTP_201_CREATED
    response = _file_report(client, auth_headers, buyer, **payload)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"kind": "conflict", "detail": "Report already submitted"}


def test_unknown_reason_is_rejected(client, auth_headers, buyer, listing) -> None:
    response = _file_report(
        client,
        auth_headers,
        buyer,
        target_type="listing",
        target_id=listing.id,
        reason="bad_vibes",
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_my_reports(client, auth_headers, buyer, outsider, listing) -> None:
    _file_report(client, auth_headers, buyer, target_type="listing", target_id=listing.id, reason="spam")

    mine = client.get("/api/v1/reports/mine", headers=auth_headers(buyer)).json()
    assert len(mine) == 1
    assert mine[0]["reporter_id"] == buyer.id
    assert client.get("/api/v1/reports/mine", headers=auth_headers(outsider)).json() == []


def test_moderator_endpoints_reject_players(client, auth_headers, buyer, listing) -> None:
    report = _file_report(
        client, auth_headers, buyer, target_type="listing", target_id=listing.id, reason="spam"
    ).json()

    for response in (
        client.get("/api/v1/reports/queue", headers=auth_headers(buyer)),
        client.get(f"/api/v1/reports/{report['id']}", headers=auth_headers(buyer)),
        client.post(
            f"/api/v1/reports/{report['id']}/resolve",
            json={"action": "dismiss"},
            headers=auth_headers(buyer),
        ),
    ):
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"kind": "forbidden", "detail": "Moderator access required"}


def test_resolving_twice_is_rejected(client, auth_headers, buyer, moderator, listing) -> None:
    report = _file_report(
        client, auth_headers, buyer, target_type="listing", target_id=listing.id, reason="spam"
    ).json()
    url = f"/api/v1/reports/{report['id']}/resolve"

    first = client.post(url, json={"action": "dismiss"}, headers=auth_headers(moderator))
    assert first.json()["status"] == "dismissed"

    second = client.post(url, json={"action": "remove_listing"}, headers=auth_headers(moderator))
    assert second.status_code == status.HTTP_400_BAD_REQUEST
    assert second.json() == {"kind": "bad_request", "detail": "Report already resolved"}


def test_unknown_report(client, auth_headers, moderator) -> None:
    response = client.get("/api/v1/reports/missing-report", headers=auth_headers(moderator))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["kind"] == "not_found"
