# qnnect/context.py

# Per-request application context and view selection.
# The caller's identity comes from the external auth provider as an opaque account id.
# resolve_view() is a pure function of (authenticated?, chosen portal).

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Optional


class Portal(str, enum.Enum):
    user = "user"
    business = "business"


class View(str, enum.Enum):
    landing = "landing"
    role_chooser = "role_chooser"
    user_dashboard = "user_dashboard"
    business_dashboard = "business_dashboard"


@dataclass(frozen=True)
class RequestContext:
    user_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.user_id)

    def display_name(self) -> str:
        """Name for a freshly created profile: explicit name, else email local part, else 'User'."""
        if self.full_name:
            return self.full_name
        if self.email and self.email.split("@")[0]:
            return self.email.split("@")[0]
        return "User"


def resolve_view(authenticated: bool, portal: Optional[Portal]) -> View:
    if not authenticated:
        return View.landing
    if portal is None:
        return View.role_chooser
    if Portal(portal) is Portal.business:
        return View.business_dashboard
    return View.user_dashboard
