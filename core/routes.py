"""Route table and the login guard."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.constants import MENU_CASH, MENU_DASHBOARD, MENU_EVENTS, MENU_GOALS, MENU_INVENTORY

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


@dataclass(frozen=True)
class Route:
    pattern: str
    page: str
    protected: bool = True

    @property
    def regex(self) -> "re.Pattern[str]":
        expr = re.sub(r":(\w+)", r"(?P<\1>[^/]+)", self.pattern)
        return re.compile(f"^{expr}$")


ROUTES: List[Route] = [
    Route("/login", "login", protected=False),
    Route("/dashboard", "dashboard"),
    Route("/events", "events"),
    Route("/events/new", "event_new"),
    Route("/events/:id/edit", "event_edit"),
    Route("/inventory", "inventory"),
    Route("/goals", "goals"),
    Route("/cash", "cash"),
]

NAV_ITEMS: List[Tuple[str, str]] = [
    (MENU_DASHBOARD, "/dashboard"),
    (MENU_EVENTS, "/events"),
    (MENU_INVENTORY, "/inventory"),
    (MENU_GOALS, "/goals"),
    (MENU_CASH, "/cash"),
]


@dataclass(frozen=True)
class Resolution:
    page: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)
    redirect: Optional[str] = None
    from_path: Optional[str] = None


def normalize(path: Optional[str]) -> str:
    path = (path or "/").split("?")[0].strip() or "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def match(path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
    for route in ROUTES:
        found = route.regex.match(path)
        if found:
            return route, found.groupdict()
    return None


def resolve(path: Optional[str], authenticated: bool) -> Resolution:
    """Map a requested path to a page, or to a redirect.

    Unmatched paths go to the login page. Protected pages without a session
    also go there, carrying the requested path so login can send the user
    back afterwards.
    """
    path = normalize(path)
    if path == "/":
        return Resolution(redirect=HOME_PATH)
    found = match(path)
    if found is None:
        return Resolution(redirect=LOGIN_PATH)
    route, params = found
    if route.page == "login" and authenticated:
        return Resolution(redirect=HOME_PATH)
    if route.protected and not authenticated:
        return Resolution(redirect=LOGIN_PATH, from_path=path)
    return Resolution(page=route.page, params=params)


def after_login_path(from_path: Optional[str]) -> str:
    """Where to go once signed in: the originally requested page, if valid."""
    if from_path:
        found = match(normalize(from_path))
        if found is not None and found[0].protected:
            return normalize(from_path)
    return HOME_PATH


def event_edit_path(event_id) -> str:
    return f"/events/{event_id}/edit"


def nav_label_for(path: Optional[str]) -> Optional[str]:
    """Menu label whose target is exactly ``path``; None on sub-pages."""
    path = normalize(path)
    for label, target in NAV_ITEMS:
        if path == target:
            return label
    return None
