"""
DB-backed credential store: the local "remember me" vault.

Public methods:
- find() -> Credential | None
- add(name, password, auth_token) -> Credential | None
- remove(credential) -> None

Only accounts tagged with our account type are visible. Each call opens its
own short session, because the sync flow may call in from a worker thread
long after the HTTP request that started it has finished.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import Account as AccountORM

logger = logging.getLogger(__name__)


# DTO: plain copy of the row so callers never hold a live ORM object
@dataclass(frozen=True)
class Credential:
    name: str
    password: str
    auth_token: int


def _to_credential(account: AccountORM) -> Credential:
    return Credential(name=account.name, password=account.password, auth_token=account.auth_token)


class CredentialStore:
    def __init__(self, session_factory: Callable[[], Session], account_type: str):
        self._session_factory = session_factory
        self.account_type = account_type

    def find(self) -> Optional[Credential]:
        with self._session_factory() as db:
            account = (
                db.execute(
                    select(AccountORM)
                    .where(AccountORM.account_type == self.account_type)
                    .order_by(AccountORM.id.asc())
                )
                .scalars()
                .first()
            )
            if account is None:
                logger.info("No stored account of type %s", self.account_type)
                return None
            logger.info("Stored account found: %s", account.name)
            return _to_credential(account)

    def add(self, name: str, password: str, auth_token: int) -> Optional[Credential]:
        with self._session_factory() as db:
            account = AccountORM(
                name=name,
                password=password,
                auth_token=auth_token,
                account_type=self.account_type,
            )
            db.add(account)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning("Account %s NOT added; it already exists", name)
                return None
            logger.info("Account %s added", name)
            return _to_credential(account)

    def remove(self, credential: Credential) -> None:
        with self._session_factory() as db:
            db.execute(
                delete(AccountORM).where(
                    AccountORM.account_type == self.account_type,
                    AccountORM.name == credential.name,
                )
            )
            db.commit()
        logger.info("Account %s removed", credential.name)
