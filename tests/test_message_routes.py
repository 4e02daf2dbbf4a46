"""
HTTP status mapping for /api/messages.

Failure categories come from the exception type: ValidationError -> 400,
NotOwnedError -> 403, NotFoundError -> 404, UnknownError -> 500.
"""

from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from app.exceptions import UnknownError


@pytest.mark.asyncio
async def test_send_returns_201(test_client, add_user):
    ana, bob = await add_user("Ana"), await add_user("Bob")

    response = await test_client.post(f"/api/messages/{ana['_id']}/{bob['_id']}", json={"content": " hi "})

    assert response.status_code == 201
    body = response.json()
    assert body["content"] == "hi"
    assert body["sender"] == str(ana["_id"])
    assert body["receiver"] == str(bob["_id"])
    assert body["read"] is False
    assert "createdAt" in body and "_id" in body


@pytest.mark.asyncio
async def test_send_blank_content_is_400(test_client, add_user):
    ana, bob = await add_user("Ana"), await add_user("Bob")

    response = await test_client.post(f"/api/messages/{ana['_id']}/{bob['_id']}", json={"content": "  "})

    assert response.status_code == 400
    assert response.json() == {"error": "validation_error", "message": "Message content is required",
                               "field": "content"}


@pytest.mark.asyncio
async def test_send_with_invalid_receiver_names_the_field(test_client, add_user):
    ana = await add_user("Ana")

    response = await test_client.post(f"/api/messages/{ana['_id']}/nope", json={"content": "hi"})

    assert response.status_code == 400
    assert response.json()["field"] == "receiver id"


@pytest.mark.asyncio
async def test_send_without_body_is_400(test_client, add_user):
    ana, bob = await add_user("Ana"), await add_user("Bob")

    response = await test_client.post(f"/api/messages/{ana['_id']}/{bob['_id']}")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_send_to_unavailable_user_is_404(test_client, add_user):
    ana, bob = await add_user("Ana"), await add_user("Bob", available=False)

    response = await test_client.post(f"/api/messages/{ana['_id']}/{bob['_id']}", json={"content": "hi"})

    assert response.status_code == 404
    assert response.json() == {"error": "not_found", "message": "Receiver not found or unavailable"}


@pytest.mark.asyncio
async def test_conversation_returns_expanded_list(test_client, add_user, add_message):
    ana, bob = await add_user("Ana"), await add_user("Bob")
    await add_message(ana, bob, "older", minutes_ago=5)
    await add_message(bob, ana, "newer")

    response = await test_client.get(f"/api/messages/{bob['_id']}/{ana['_id']}")

    assert response.status_code == 200
    body = response.json()
    assert [m["content"] for m in body] == ["newer", "older"]
    assert body[0]["sender"] == {"_id": str(bob["_id"]), "name": "Bob", "email": bob["email"]}


@pytest.mark.asyncio
async def test_empty_conversation_is_404(test_client, add_user):
    ana, bob = await add_user("Ana"), await add_user("Bob")

    response = await test_client.get(f"/api/messages/{ana['_id']}/{bob['_id']}")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_conversation_with_invalid_id_is_400(test_client):
    response = await test_client.get(f"/api/messages/abc/{ObjectId()}")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_conversation_storage_failure_is_500(test_client, services, monkeypatch):
    monkeypatch.setattr(services["messages"].records, "find_between",
                        AsyncMock(side_effect=UnknownError("database unavailable")))

    response = await test_client.get(f"/api/messages/{ObjectId()}/{ObjectId()}")

    assert response.status_code == 500
    assert response.json()["error"] == "unknown_error"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["PUT", "PATCH"])
async def test_update_by_sender(test_client, add_user, add_message, method):
    ana, bob = await add_user("Ana"), await add_user("Bob")
    message = await add_message(ana, bob, "hi")

    response = await test_client.request(
        method, f"/api/messages/{message['_id']}", json={"content": "hi there", "senderId": str(ana["_id"])}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["content"] == "hi there"
    assert body["updatedAt"] is not None
    assert body["sender"]["name"] == "Ana"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"content": "x"}, {"senderId": str(ObjectId())}, {}])
async def test_update_missing_fields_is_400(test_client, payload):
    response = await test_client.put(f"/api/messages/{ObjectId()}", json=payload)

    assert response.status_code == 400
    assert "required" in response.json()["message"]


@pytest.mark.asyncio
async def test_update_invalid_message_id_is_400(test_client):
    response = await test_client.put("/api/messages/xyz", json={"content": "x", "senderId": str(ObjectId())})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_by_other_user_is_403(test_client, add_user, add_message):
    ana, bob = await add_user("Ana"), await add_user("Bob")
    message = await add_message(ana, bob, "hi")

    response = await test_client.put(
        f"/api/messages/{message['_id']}", json={"content": "mine now", "senderId": str(bob["_id"])}
    )

    assert response.status_code == 403
    assert response.json()["error"] == "no_permission"


@pytest.mark.asyncio
async def test_update_missing_message_looks_like_not_owned(test_client, add_user, add_message):
    ana, bob = await add_user("Ana"), await add_user("Bob")
    message = await add_message(ana, bob, "hi")
    payload = {"content": "changed", "senderId": str(bob["_id"])}

    not_owned = await test_client.put(f"/api/messages/{message['_id']}", json=payload)
    missing = await test_client.put(f"/api/messages/{ObjectId()}", json=payload)

    assert missing.status_code == not_owned.status_code == 403
    assert missing.json() == not_owned.json()


@pytest.mark.asyncio
async def test_delete_flow(test_client, add_user, add_message):
    ana, bob = await add_user("Ana"), await add_user("Bob")
    message = await add_message(ana, bob, "hi")
    url = f"/api/messages/{message['_id']}"

    not_owner = await test_client.request("DELETE", url, json={"senderId": str(bob["_id"])})
    assert not_owner.status_code == 403

    deleted = await test_client.request("DELETE", url, json={"senderId": str(ana["_id"])})
    assert deleted.status_code == 200
    assert deleted.json()["_id"] == str(message["_id"])

    again = await test_client.request("DELETE", url, json={"senderId": str(ana["_id"])})
    assert again.status_code == 403
    assert again.json() == {"error": "no_permission", "message": "Message not found or no permission to delete"}


@pytest.mark.asyncio
async def test_delete_without_sender_is_400(test_client):
    response = await test_client.request("DELETE", f"/api/messages/{ObjectId()}", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "senderId is required"
