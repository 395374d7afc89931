from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from helpdesk.accounts.application import AuthService
from helpdesk.accounts.infrastructure import SQLAlchemyUserRepository
from helpdesk.config import Role
from helpdesk.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)
from helpdesk.main import app
from helpdesk.shared.infrastructure.security import create_access_token
from helpdesk.tickets.application import TicketService
from helpdesk.tickets.infrastructure import SQLAlchemyTicketRepository


@asynccontextmanager
async def open_database(database_url: str) -> AsyncIterator[None]:
    init_database(database_url)
    try:
        await create_tables()
        yield
    finally:
        await close_database()


async def seed_user(name: str, email: str, role: Role = Role.USER, password: str = "secret123"):
    async with get_session_context() as session:
        return await AuthService(SQLAlchemyUserRepository(session)).register(
            name, email, password, role
        )


def bearer(user) -> dict[str, str]:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


def api_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")


@asynccontextmanager
async def ticket_service(clock=None, ticket_repository_class=SQLAlchemyTicketRepository) -> AsyncIterator[TicketService]:
    async with get_session_context() as session:
        kwargs = {"clock": clock} if clock is not None else {}
        yield TicketService(
            ticket_repository_class(session),
            SQLAlchemyUserRepository(session),
            **kwargs,
        )
