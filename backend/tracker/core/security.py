import re
import base64
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

ADMIN_REALM = "Admin Panel"

# HTTP Basic scheme for the admin panel
basic_scheme = HTTPBasic(realm=ADMIN_REALM, auto_error=False)

_SCRIPT_TAG = re.compile(r'<script(?![^>]*\bnonce\b)([^>]*)>', re.IGNORECASE)
_STYLE_TAG = re.compile(r'<style(?![^>]*\bnonce\b)([^>]*)>', re.IGNORECASE)


def generate_nonce() -> str:
    """Random base64 token for inline script/style tags"""
    return base64.b64encode(secrets.token_bytes(16)).decode("ascii")


def add_nonce_to_inline_tags(html: str, nonce: str) -> str:
    """Add nonce="..." to every <script>/<style> tag that does not have one"""
    html = _SCRIPT_TAG.sub(lambda m: f'<script nonce="{nonce}"{m.group(1)}>', html)
    return _STYLE_TAG.sub(lambda m: f'<style nonce="{nonce}"{m.group(1)}>', html)


def check_credentials(credentials: HTTPBasicCredentials, username: str, password: str) -> bool:
    """Constant-time comparison of submitted credentials"""
    user_ok = secrets.compare_digest(credentials.username.encode("utf-8"), username.encode("utf-8"))
    pass_ok = secrets.compare_digest(credentials.password.encode("utf-8"), password.encode("utf-8"))
    return user_ok and pass_ok


async def require_admin(
    request: Request,
    credentials: HTTPBasicCredentials = Depends(basic_scheme)
) -> str:
    """
    Require valid admin credentials.

    Raises:
        HTTPException: 401 with a Basic challenge if authentication fails
    """
    settings = request.app.state.settings

    if credentials is None or not check_credentials(credentials, settings.ADMIN_USER, settings.ADMIN_PASS):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": f'Basic realm="{ADMIN_REALM}"'},
        )

    return credentials.username
