import asyncio
from datetime import timedelta

import pytest

from helpdesk.accounts.application import AuthService
from helpdesk.accounts.infrastructure import SQLAlchemyUserRepository
from helpdesk.config import Role
from helpdesk.core import ValidationException
from helpdesk.infrastructure.database import get_session_context
from helpdesk.shared.infrastructure.security import create_access_token, decode_access_token

from support import api_client, open_database, seed_user


def test_register_hides_password(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            async with api_client() as client:
                created = await client.post(
                    "/api/auth/register",
                    json={"name": "Rita", "email": "rita@example.com", "password": "hunter22"},
                )
                duplicate = await client.post(
                    "/api/auth/register",
                    json={"name": "Rita Again", "email": "rita@example.com", "password": "other"},
                )
                bad_email = await client.post(
                    "/api/auth/register",
                    json={"name": "Nope", "email": "not-an-email", "password": "x"},
                )
                return created, duplicate, bad_email

    created, duplicate, bad_email = asyncio.run(scenario())

    assert created.status_code == 201
    body = created.json()
    assert body["role"] == "USER"
    assert body["email"] == "rita@example.com"
    assert "password" not in body
    assert "createdAt" in body

    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Email already in use."
    assert bad_email.status_code == 400


def test_login_issues_token_with_claims(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            agent = await seed_user("Abe Agent", "abe@example.com", Role.AGENT, password="pa55word")
            async with api_client() as client:
                ok = await client.post(
                    "/api/auth/login", json={"email": "abe@example.com", "password": "pa55word"}
                )
                wrong = await client.post(
                    "/api/auth/login", json={"email": "abe@example.com", "password": "nope"}
                )
                unknown = await client.post(
                    "/api/auth/login", json={"email": "ghost@example.com", "password": "pa55word"}
                )
                return agent, ok, wrong, unknown

    agent, ok, wrong, unknown = asyncio.run(scenario())

    assert ok.status_code == 200
    claims = decode_access_token(ok.json()["token"])
    assert claims["userId"] == agent.id
    assert claims["email"] == "abe@example.com"
    assert claims["role"] == "AGENT"

    for response in (wrong, unknown):
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials."


def test_expired_token_is_rejected(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            user = await seed_user("Uma User", "uma@example.com")
            token = create_access_token(user.id, user.email, user.role, timedelta(minutes=-1))
            async with api_client() as client:
                return await client.get(
                    "/api/tickets", headers={"Authorization": f"Bearer {token}"}
                )

    response = asyncio.run(scenario())
    assert response.status_code == 401


def test_health_and_root(database_url) -> None:
    async def scenario():
        async with open_database(database_url):
            async with api_client() as client:
                return await client.get("/health"), await client.get("/")

    health, root = asyncio.run(scenario())
    assert health.json()["status"] == "healthy"
    assert root.json()["modules"]["tickets"]["prefix"] == "/api/tickets"


def test_concurrent_registrations_with_same_email(database_url) -> None:
    payload = {"name": "Twin", "email": "twin@example.com", "password": "hunter22"}

    async def scenario():
        async with open_database(database_url):
            async with api_client() as client:
                return await asyncio.gather(
                    client.post("/api/auth/register", json=payload),
                    client.post("/api/auth/register", json=payload),
                )

    first, second = asyncio.run(scenario())

    assert sorted([first.status_code, second.status_code]) == [201, 400]
    loser = first if first.status_code == 400 else second
    assert loser.json()["error"] == "Email already in use."


def test_unique_email_violation_is_a_validation_error(database_url) -> None:
    class StaleLookupRepository(SQLAlchemyUserRepository):
        async def get_by_email(self, email):
            # Behaves as if the other registration had not committed yet
            return None

    async def scenario():
        async with open_database(database_url):
            await seed_user("Rita", "rita@example.com")
            async with get_session_context() as session:
                service = AuthService(StaleLookupRepository(session))
                with pytest.raises(ValidationException) as excinfo:
                    await service.register("Rita Again", "rita@example.com", "other")
            async with get_session_context() as session:
                survivor = await SQLAlchemyUserRepository(session).get_by_email("rita@example.com")
            return excinfo.value, survivor

    error, survivor = asyncio.run(scenario())
    assert error.message == "Email already in use."
    assert survivor.name == "Rita"
