"""身份与权限能力解析。

权限判断只依赖布尔能力位，不关心具体的套餐命名。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .config import AuthConfig

STUDENT_PLANS = frozenset({"student"})
PRO_PLANS = frozenset({"pro", "premium"})


@dataclass(frozen=True)
class Identity:
    user_id: str
    plans: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Capabilities:
    is_student: bool = False
    is_pro: bool = False

    @property
    def is_paid(self) -> bool:
        return self.is_student or self.is_pro


def resolve_capabilities(identity: Identity) -> Capabilities:
    return Capabilities(
        is_student=bool(identity.plans & STUDENT_PLANS),
        is_pro=bool(identity.plans & PRO_PLANS),
    )


class IdentityResolver(Protocol):
    def resolve(self, authorization: str | None) -> Identity | None: ...


class TokenIdentityResolver:
    """根据 `Authorization: Bearer <token>` 头查找配置中的用户。"""

    def __init__(self, config: AuthConfig) -> None:
        self._config = config

    def resolve(self, authorization: str | None) -> Identity | None:
        if not authorization:
            return None
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        user = self._config.tokens.get(token.strip())
        if user is None:
            return None
        return Identity(user_id=user.user_id, plans=frozenset(user.plans))
