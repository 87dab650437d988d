"""
Jinja2 template environment shared by page routes and error handlers.
"""

from pathlib import Path
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_price(value) -> str:
    """Render an integer minor-unit amount as a decimal string."""
    if value is None:
        return "-"
    return f"{int(value) / 100:,.2f}"


templates.env.filters["price"] = format_price
