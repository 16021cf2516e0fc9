from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class User:
    id: str
    email: str
    username: str
    role: UserRole = UserRole.USER
    age: int | None = None
    phone: str | None = None
    registered_at: str | None = None


@dataclass(frozen=True)
class SignupForm:
    name: str
    age: str
    email: str
    phone: str
    password: str
