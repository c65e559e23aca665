"""
CanarIAgentic Web - Landing Page Route
======================================

What:  Serves the single marketing page at GET /.
How:   The document is a fixed file shipped inside the package
       (static/index.html); its script is served by the /static mount
       registered in main.py.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
INDEX_HTML = (STATIC_DIR / "index.html").read_text(encoding="utf-8")

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    return HTMLResponse(content=INDEX_HTML)
