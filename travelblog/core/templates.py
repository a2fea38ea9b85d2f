from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi.templating import Jinja2Templates

from travelblog.core.config import settings
from travelblog.core.dates import utcnow
from travelblog.services.pagination import page_window

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def format_date(value: Optional[datetime], fmt: str = "%B %d, %Y") -> str:
    if not value:
        return ""
    return value.strftime(fmt)


def excerpt(text: Optional[str], length: int = 160) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    if len(text) <= length:
        return text
    return text[:length].rsplit(" ", 1)[0] + "..."


templates.env.filters["datefmt"] = format_date
templates.env.filters["excerpt"] = excerpt
templates.env.globals["page_window"] = page_window
templates.env.globals["settings"] = settings
templates.env.globals["current_year"] = lambda: utcnow().year
