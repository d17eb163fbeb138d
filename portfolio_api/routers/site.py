"""robots.txt and sitemap.xml."""

from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from portfolio_api.config import get_settings
from portfolio_api.services.content import ContentService, get_content_service

router = APIRouter(tags=["site"])


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots() -> str:
    site_url = get_settings().site_url.rstrip("/")
    return (
        "User-agent: Googlebot\n"
        "Allow: /\n"
        "\n"
        "User-agent: Applebot\n"
        "User-agent: Bingbot\n"
        "Allow: /\n"
        "\n"
        f"Sitemap: {site_url}/sitemap.xml\n"
    )


@router.get("/sitemap.xml")
async def sitemap(service: ContentService = Depends(get_content_service)) -> Response:
    """Site root plus one entry per blog post."""
    site_url = get_settings().site_url.rstrip("/")
    entries = [f"<url><loc>{escape(site_url)}</loc><changefreq>daily</changefreq><priority>1.0</priority></url>"]
    for post in service.list_metadata():
        loc = escape(f"{site_url}/blog/{post.slug}")
        lastmod = f"<lastmod>{escape(post.last_modified)}</lastmod>" if post.last_modified else ""
        entries.append(f"<url><loc>{loc}</loc>{lastmod}<changefreq>weekly</changefreq></url>")

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>\n"
    )
    return Response(content=body, media_type="application/xml")
