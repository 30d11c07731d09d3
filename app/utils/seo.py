"""
robots.txt / sitemap.xml 생성
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import List, Optional, Tuple

# SITE_URL 의 프론트엔드 사이트 기준 경로 (Next.js 내부 경로와 테스트 페이지 포함)
ROBOTS_DISALLOW = ["/api/", "/auth-test/", "/storage-test/", "/_next/", "/admin/"]

# (경로, 변경 빈도, 우선순위)
SITEMAP_PAGES: List[Tuple[str, str, float]] = [
    ("", "daily", 1.0),
    ("/bookmarks", "weekly", 0.8),
]

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def build_robots_txt(site_url: str) -> str:
    """robots.txt 본문 생성"""
    base_url = site_url.rstrip("/")
    lines = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {path}" for path in ROBOTS_DISALLOW)
    lines.append("")
    lines.append(f"Sitemap: {base_url}/sitemap.xml")
    return "\n".join(lines) + "\n"


def build_sitemap_xml(site_url: str, now: Optional[datetime] = None) -> str:
    """정적 페이지 sitemap.xml 생성"""
    base_url = site_url.rstrip("/")
    last_modified = (now or datetime.now(timezone.utc)).isoformat()

    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for path, change_frequency, priority in SITEMAP_PAGES:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = f"{base_url}{path}"
        ET.SubElement(url, "lastmod").text = last_modified
        ET.SubElement(url, "changefreq").text = change_frequency
        ET.SubElement(url, "priority").text = f"{priority:.1f}"

    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
