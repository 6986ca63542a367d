"""
SQLAlchemy ORM models for the local credential store.

Tables:
- accounts: remembered logins (name, password, server-assigned token),
  tagged with an account type so several apps can share one DB file.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("account_type", "name", name="uq_account_type_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    password: Mapped[str] = mapped_column(String(64), nullable=False)

    # Server-assigned user id (the "identifier" returned by verify)
    auth_token: Mapped[int] = mapped_column(Integer, nullable=False)

    account_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
