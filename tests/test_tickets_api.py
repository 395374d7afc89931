import asyncio

from helpdesk.config import Role

from support import api_client, bearer, open_database, seed_user


async def _people():
    user = await seed_user("Uma User", "uma@example.com")
    agent = await seed_user("Abe Agent", "abe@example.com", Role.AGENT)
    admin = await seed_user("Ada Admin", "ada@example.com", Role.ADMIN)
    return user, agent, admin


async def _open_ticket(client, user, priority="HIGH", title="VPN drops every hour"):
    response = await client.post(
        "/api/tickets",
        json={"title": title, "description": "Since the last update.", "priority": priority},
        headers=bearer(user),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_ticket_returns_full_record(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, _, _ = await _people()
            async with api_client() as client:
                return await _open_ticket(client, user), user

    body, user = asyncio.run(scenario())

    assert set(body) == {
        "id", "title", "description", "priority", "status", "creatorId",
        "agentId", "slaDeadline", "version", "createdAt", "updatedAt",
    }
    assert body["status"] == "OPEN"
    assert body["version"] == 0
    assert body["creatorId"] == user.id
    assert body["agentId"] is None


def test_create_ticket_validation(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, _, _ = await _people()
            async with api_client() as client:
                bad_priority = await client.post(
                    "/api/tickets",
                    json={"title": "x", "description": "y", "priority": "URGENT"},
                    headers=bearer(user),
                )
                missing_title = await client.post(
                    "/api/tickets",
                    json={"description": "y", "priority": "LOW"},
                    headers=bearer(user),
                )
                anonymous = await client.post(
                    "/api/tickets",
                    json={"title": "x", "description": "y", "priority": "LOW"},
                )
                return bad_priority, missing_title, anonymous

    bad_priority, missing_title, anonymous = asyncio.run(scenario())

    assert bad_priority.status_code == 400
    assert bad_priority.json()["error"] == "Invalid request."
    assert missing_title.status_code == 400
    assert anonymous.status_code == 401
    assert anonymous.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_rejected(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            async with api_client() as client:
                return await client.get(
                    "/api/tickets", headers={"Authorization": "Bearer not-a-jwt"}
                )

    response = asyncio.run(scenario())
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token."


def test_update_flow(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, agent, admin = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                url = f"/api/tickets/{ticket['id']}"

                moved = await client.patch(
                    url, json={"status": "IN_PROGRESS", "version": 0}, headers=bearer(agent)
                )
                assigned = await client.patch(
                    url, json={"agentId": agent.id, "version": 1}, headers=bearer(admin)
                )
                stale = await client.patch(
                    url, json={"status": "CLOSED", "version": 1}, headers=bearer(agent)
                )
                detail = await client.get(url, headers=bearer(user))
                return moved, assigned, stale, detail

    moved, assigned, stale, detail = asyncio.run(scenario())

    assert moved.status_code == 200
    assert moved.json()["version"] == 1
    assert moved.json()["status"] == "IN_PROGRESS"

    assert assigned.status_code == 200
    assert assigned.json()["version"] == 2
    assert assigned.json()["status"] == "IN_PROGRESS"

    assert stale.status_code == 409
    assert "refresh" in stale.json()["error"]
    assert stale.json()["correlationId"] == stale.headers["X-Correlation-ID"]

    body = detail.json()
    assert body["version"] == 2
    assert body["agent"]["email"] == "abe@example.com"
    assert [e["action"] for e in body["timelineEvents"]] == ["TICKET_CREATED", "STATUS_CHANGED"]


def test_unassign_with_explicit_null(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, agent, _ = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                url = f"/api/tickets/{ticket['id']}"
                await client.patch(url, json={"agentId": agent.id, "version": 0}, headers=bearer(agent))
                kept = await client.patch(url, json={"version": 1}, headers=bearer(agent))
                cleared = await client.patch(url, json={"agentId": None, "version": 2}, headers=bearer(agent))
                return kept, cleared, agent

    kept, cleared, agent = asyncio.run(scenario())

    assert kept.json()["agentId"] == agent.id
    assert kept.json()["version"] == 2
    assert cleared.json()["agentId"] is None
    assert cleared.json()["version"] == 3


def test_update_errors(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, agent, _ = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                url = f"/api/tickets/{ticket['id']}"
                return {
                    "as_user": await client.patch(
                        url, json={"status": "CLOSED", "version": 0}, headers=bearer(user)
                    ),
                    "missing": await client.patch(
                        "/api/tickets/9999", json={"status": "CLOSED", "version": 0}, headers=bearer(agent)
                    ),
                    "no_version": await client.patch(
                        url, json={"status": "CLOSED"}, headers=bearer(agent)
                    ),
                    "string_version": await client.patch(
                        url, json={"status": "CLOSED", "version": "0"}, headers=bearer(agent)
                    ),
                    "bad_status": await client.patch(
                        url, json={"status": "DONE", "version": 0}, headers=bearer(agent)
                    ),
                    "user_as_agent": await client.patch(
                        url, json={"agentId": user.id, "version": 0}, headers=bearer(agent)
                    ),
                    "future_version": await client.patch(
                        url, json={"status": "CLOSED", "version": 5}, headers=bearer(agent)
                    ),
                    "after": await client.get(url, headers=bearer(agent)),
                }

    responses = asyncio.run(scenario())

    assert responses["as_user"].status_code == 403
    assert responses["missing"].status_code == 404
    assert responses["no_version"].status_code == 400
    assert responses["string_version"].status_code == 400
    assert responses["bad_status"].status_code == 400
    assert responses["user_as_agent"].status_code == 400
    assert responses["future_version"].status_code == 409
    after = responses["after"].json()
    assert after["version"] == 0
    assert after["status"] == "OPEN"


def test_concurrent_patches_one_wins(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, agent, admin = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                url = f"/api/tickets/{ticket['id']}"
                first, second = await asyncio.gather(
                    client.patch(url, json={"status": "IN_PROGRESS", "version": 0}, headers=bearer(agent)),
                    client.patch(url, json={"status": "CLOSED", "version": 0}, headers=bearer(admin)),
                )
                detail = await client.get(url, headers=bearer(user))
                return first, second, detail

    first, second, detail = asyncio.run(scenario())

    assert sorted([first.status_code, second.status_code]) == [200, 409]
    body = detail.json()
    assert body["version"] == 1
    assert sum(1 for e in body["timelineEvents"] if e["action"] == "STATUS_CHANGED") == 1


def test_list_envelope(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, _, _ = await _people()
            async with api_client() as client:
                for n in range(3):
                    await _open_ticket(client, user, title=f"Issue {n}")
                page = await client.get("/api/tickets?limit=2&offset=2", headers=bearer(user))
                searched = await client.get("/api/tickets?q=issue%201", headers=bearer(user))
                open_only = await client.get("/api/tickets?status=OPEN", headers=bearer(user))
                too_big = await client.get("/api/tickets?limit=101", headers=bearer(user))
                return page, searched, open_only, too_big

    page, searched, open_only, too_big = asyncio.run(scenario())

    body = page.json()
    assert body["total"] == 3
    assert body["page"] == 2
    assert body["totalPages"] == 2
    assert len(body["data"]) == 1
    item = body["data"][0]
    assert item["creator"] == {"name": "Uma User"}
    assert item["isBreached"] is False

    assert [t["title"] for t in searched.json()["data"]] == ["Issue 1"]
    assert open_only.json()["total"] == 3
    assert too_big.status_code == 400


def test_detail_and_comments(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user, agent, _ = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                url = f"/api/tickets/{ticket['id']}"
                comment = await client.post(
                    f"{url}/comments", json={"content": "Any news?"}, headers=bearer(user)
                )
                reply = await client.post(
                    f"{url}/comments", json={"content": "On it."}, headers=bearer(agent)
                )
                empty = await client.post(
                    f"{url}/comments", json={"content": ""}, headers=bearer(user)
                )
                orphan = await client.post(
                    "/api/tickets/9999/comments", json={"content": "Hello?"}, headers=bearer(user)
                )
                detail = await client.get(url, headers=bearer(user))
                missing = await client.get("/api/tickets/9999", headers=bearer(user))
                return comment, reply, empty, orphan, detail, missing

    comment, reply, empty, orphan, detail, missing = asyncio.run(scenario())

    assert comment.status_code == 201
    assert comment.json()["author"] == {"name": "Uma User"}
    assert reply.status_code == 201
    assert empty.status_code == 400
    assert orphan.status_code == 404
    assert missing.status_code == 404

    body = detail.json()
    assert body["creator"] == {"id": body["creatorId"], "name": "Uma User", "email": "uma@example.com"}
    assert body["agent"] is None
    assert body["isBreached"] is False
    assert [c["content"] for c in body["comments"]] == ["Any news?", "On it."]
    assert [c["author"]["name"] for c in body["comments"]] == ["Uma User", "Abe Agent"]
    assert body["timelineEvents"][0]["details"] == "Ticket created with priority HIGH"
    assert body["timelineEvents"][0]["actor"] == {"name": "Uma User"}


def test_out_of_range_ids_are_not_found(database_url) -> None:
    huge = 99999999999999999999
    int4_overflow = 2**31

    async def scenario():
        async with open_database(database_url):
            user, agent, _ = await _people()
            async with api_client() as client:
                ticket = await _open_ticket(client, user)
                return {
                    "get": await client.get(f"/api/tickets/{huge}", headers=bearer(user)),
                    "get_int4": await client.get(f"/api/tickets/{int4_overflow}", headers=bearer(user)),
                    "patch": await client.patch(
                        f"/api/tickets/{huge}", json={"status": "CLOSED", "version": 0}, headers=bearer(agent)
                    ),
                    "comment": await client.post(
                        f"/api/tickets/{huge}/comments", json={"content": "Hello?"}, headers=bearer(user)
                    ),
                    "assign": await client.patch(
                        f"/api/tickets/{ticket['id']}", json={"agentId": huge, "version": 0}, headers=bearer(agent)
                    ),
                }

    responses = asyncio.run(scenario())

    for key in ("get", "get_int4", "patch", "comment"):
        assert responses[key].status_code == 404, key
        assert "not found" in responses[key].json()["error"]
    assert responses["assign"].status_code == 400
