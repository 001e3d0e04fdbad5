"""
Server-rendered pages
"""
from pathlib import Path

from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from walletbook.api.deps import get_store
from walletbook.application.dashboard import DashboardService
from walletbook.infrastructure.store import FinanceStore
from walletbook.utils.money import format_money


router = APIRouter(tags=["pages"])

# Templates
templates_dir = Path(__file__).parent.parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))
templates.env.filters["money"] = format_money


@router.get("/", response_class=HTMLResponse)
def dashboard_page(request: Request, store: FinanceStore = Depends(get_store)):
    """Dashboard: total balance, wallets, recent activity"""
    summary = DashboardService(store).summary()
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "summary": summary,
            "wallets": store.list_wallets(),
        },
    )
