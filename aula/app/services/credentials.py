# aula/app/services/credentials.py
"""
Credential store: the users table.

Only create and verify exist. bcrypt is deliberately slow, so hashing and
checking run in the threadpool instead of on the event loop.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from aula.app.core.exceptions import CredentialNotFound, PasswordMismatch, UserAlreadyExists
from aula.app.models.user import User
from aula.app.security import hashing


class CredentialStore:
    def __init__(self, db: AsyncSession, rounds: int = 10):
        self.db = db
        self.rounds = rounds

    async def _get(self, username: str):
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def exists(self, username: str) -> bool:
        return await self._get(username) is not None

    async def create(self, username: str, password: str) -> None:
        if await self.exists(username):
            raise UserAlreadyExists()

        hashed = await run_in_threadpool(hashing.get_password_hash, password, self.rounds)
        self.db.add(User(username=username, hashed_password=hashed))
        try:
            await self.db.commit()
        except IntegrityError as exc:
            # Someone registered the same name between the check and the insert
            await self.db.rollback()
            raise UserAlreadyExists() from exc

    async def verify(self, username: str, password: str) -> None:
        user = await self._get(username)
        if user is None:
            raise CredentialNotFound()

        ok = await run_in_threadpool(hashing.verify_password, password, user.hashed_password)
        if not ok:
            raise PasswordMismatch()


async def ensure_user(db: AsyncSession, username: str, password: str, rounds: int = 10) -> bool:
    """Create the account unless it exists. Returns True when it was created."""
    store = CredentialStore(db, rounds=rounds)
    if await store.exists(username):
        return False
    try:
        await store.create(username, password)
    except UserAlreadyExists:
        return False
    return True
