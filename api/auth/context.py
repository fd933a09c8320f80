"""
The identity a request carries once it has passed the gate.
"""

from __future__ import annotations

from dataclasses import dataclass

from .schemas import AccountView


@dataclass(frozen=True)
class RequestContext:
    session_id: str
    account: AccountView

    @property
    def user_id(self) -> int:
        return self.account.user_id
