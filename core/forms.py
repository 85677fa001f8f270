"""Form helpers shared by the pages."""
from typing import Any, List, Mapping, Optional


def clean_optional(value: Any) -> Optional[str]:
    """Trimmed text, or None when blank (stored as NULL)."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def missing_required(values: Mapping[str, Any], required: Mapping[str, str]) -> List[str]:
    """Labels of required fields left empty.

    ``required`` maps field name -> label shown to the user.
    """
    missing = []
    for name, label in required.items():
        value = values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(label)
    return missing


def parse_non_negative_int(raw: Any) -> int:
    """Quantity / threshold inputs: blank or invalid -> 0, never negative."""
    if raw is None or raw == "":
        return 0
    try:
        return max(0, int(float(raw)))
    except (TypeError, ValueError, OverflowError):
        return 0
