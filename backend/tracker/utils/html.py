from html import escape


def message_page(title: str, message: str = "") -> str:
    """Small centered HTML page with a link back to the landing page"""
    body = f"<p>{escape(message)}</p>" if message else ""
    return f"""<!DOCTYPE html>
<html><head><meta charset="UTF-8"><title>{escape(title)}</title></head>
<body>
    <div style="text-align:center;padding:50px;">
        <h2>{escape(title)}</h2>
        {body}
        <a href="/inicio">Back to home</a>
    </div>
</body></html>
"""


def get_404_page() -> str:
    return message_page("404 - Page not found")
