import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ..core.rate_limit import enforce_rate_limit, hit_rate_limit
from ..core.security import add_nonce_to_inline_tags, require_admin
from ..services.tracking import record_click
from ..utils.html import message_page
from ..utils.validators import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/")
async def track_and_redirect(request: Request, background_tasks: BackgroundTasks):
    """
    Tracking link.

    The hit is recorded in a background task after the redirect is sent,
    so a slow geolocation lookup or a broken database never delays it.
    Clients over the rate limit are still redirected but not recorded.
    """
    settings = request.app.state.settings

    client_ip = get_client_ip(request, trust_proxy=settings.TRUST_PROXY)
    logger.debug("Hit from %s", client_ip)

    if hit_rate_limit(request):
        background_tasks.add_task(
            record_click,
            request.app.state.database.session_factory,
            client_ip,
            request.headers.get("user-agent"),
            request.headers.get("referer"),
            request.app.state.geo_resolver
        )

    return RedirectResponse(url=settings.REDIRECT_URL, status_code=302, headers=NO_CACHE_HEADERS)


@router.get("/inicio", response_class=HTMLResponse, dependencies=[Depends(enforce_rate_limit)])
async def landing_page(request: Request):
    """Informational landing page"""
    nonce = request.state.nonce
    return HTMLResponse(content=f"""<!DOCTYPE html>
<html><head><meta charset="UTF-8"><title>Link Tracker</title>
<style nonce="{nonce}">
    body{{font-family:Arial;text-align:center;padding:50px;background:linear-gradient(135deg,#667eea 0%,#764ba2 100%);color:#fff}}
    a{{display:inline-block;margin:10px;padding:10px 20px;background:rgba(255,255,255,0.2);color:#fff;text-decoration:none;border-radius:5px}}
</style>
</head>
<body>
    <h1>Link Tracker</h1>
    <p>Service is running.</p>
    <div>
        <a href="/">Try the tracking link</a>
        <a href="/admin">Open the admin panel</a>
    </div>
</body></html>
""")


# Admin panel endpoint
@router.get("/admin", response_class=HTMLResponse, dependencies=[Depends(enforce_rate_limit)])
@router.get("/admin/", response_class=HTMLResponse, dependencies=[Depends(enforce_rate_limit)])
async def admin_panel(request: Request, username: str = Depends(require_admin)):
    """Serve the admin panel with inline tags bound to this response's nonce"""
    admin_file = request.app.state.settings.FRONTEND_DIR / "admin.html"
    if not admin_file.exists():
        return HTMLResponse(
            content=message_page(
                "Error: admin.html not found",
                f"The admin page is missing from {admin_file.parent.name}/."
            ),
            status_code=404
        )

    html = admin_file.read_text(encoding="utf-8")
    return HTMLResponse(
        content=add_nonce_to_inline_tags(html, request.state.nonce),
        headers={"Cache-Control": "no-store"}
    )


# Health check endpoint
@router.get("/health", dependencies=[Depends(enforce_rate_limit)])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Link Tracker"}
