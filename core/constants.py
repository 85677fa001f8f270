# ---------- constants.py ----------
"""Project-wide constants."""
from typing import Dict, List, Tuple

INVENTORY_CATEGORIES: List[Tuple[str, str]] = [
    ("beans", "Beans"),
    ("milk", "Milk"),
    ("syrup", "Syrups"),
    ("cups", "Cups & Lids"),
    ("other", "Other"),
]

EVENT_TYPES: List[Tuple[str, str]] = [
    ("market", "Farmers Market"),
    ("wedding", "Wedding"),
    ("corporate", "Corporate"),
    ("private", "Private Event"),
    ("popup", "Pop-up"),
    ("other", "Other"),
]

EVENT_STATUSES: List[Tuple[str, str]] = [
    ("inquiry", "Inquiry"),
    ("proposal_sent", "Proposal Sent"),
    ("booked", "Booked"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
]

CATEGORY_LABELS: Dict[str, str] = dict(INVENTORY_CATEGORIES)
EVENT_TYPE_LABELS: Dict[str, str] = dict(EVENT_TYPES)
STATUS_LABELS: Dict[str, str] = dict(EVENT_STATUSES)

DEFAULT_EVENT_TYPE = "market"
DEFAULT_EVENT_STATUS = "inquiry"

# Bills counted in the drawer, largest first
DENOMINATIONS: Tuple[int, ...] = (100, 50, 20, 10, 5, 1)

UPCOMING_DAYS_DEFAULT: int = 30
RECURRING_WEEKS_DEFAULT: int = 4
RECENT_CASH_SESSIONS: int = 20

# Dashboard list sizes
DASHBOARD_EVENTS_SHOWN = 6
DASHBOARD_GOALS_SHOWN = 5
DASHBOARD_LOW_ITEMS_SHOWN = 6

# Sidebar menu labels (keep in sync with core.routes.NAV_ITEMS)
MENU_DASHBOARD = "\U0001F4C8 Dashboard"
MENU_EVENTS = "\U0001F4C5 Events"
MENU_INVENTORY = "\U0001F5C2\ufe0f Inventory"
MENU_GOALS = "\U0001F3AF Goals"
MENU_CASH = "\U0001F4B5 Cash Drawer"

APP_TITLE = "Foolhardy Admin"
