import re
from datetime import datetime
from zoneinfo import ZoneInfo
from typing import Optional

NO_WEEKDAYS = ["Mandag", "Tirsdag", "Onsdag", "Torsdag", "Fredag"]

def now_local(timezone: str = "Europe/Oslo") -> datetime:
    """Current time in the cafeteria's timezone"""
    return datetime.now(ZoneInfo(timezone))

def weekday_label(moment: datetime) -> Optional[str]:
    """
    Norwegian weekday label used as a heading on the menu page.
    Saturday and Sunday have no label and return None.
    """
    idx = moment.weekday()  # 0=Monday
    if idx < len(NO_WEEKDAYS):
        return NO_WEEKDAYS[idx]
    return None

def weekday_name(moment: datetime) -> str:
    """Full weekday name as formatted by the process locale, e.g. 'Tuesday'"""
    return moment.strftime("%A")

def clean_text(text: str) -> str:
    """Collapse whitespace runs inside lines and drop blank lines."""
    if not text:
        return ""
    text = text.replace("\u00a0", " ")
    lines = [re.sub(r"[ \t\x0b\x0c\r]+", " ", line).strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)
