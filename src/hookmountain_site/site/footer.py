"""Shared footer injection for the static site pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

PLACEHOLDER_ID = "footer-placeholder"
INJECTED_ATTR = "data-injected-footer"
LINK_ATTR = "data-footer-link"
COPYRIGHT_TEXT = "© Hook Mountain Handmade"

FOOTER_TEMPLATE = """
<footer>
    <div class="footer-container">
        <div>
            <h4>Join my Newsletter</h4>
            <a href="https://dashboard.mailerlite.com/forms/936047/120780277461025946/share" class="btn">Sign up here!</a>
        </div>
        <div>
            <h4>Sitemap</h4>
            <ul>
                <li><a href="index.html" data-footer-link="home">Home</a></li>
                <li><a href="whats-new/sweater-pattern-main-page.html" data-footer-link="sweaters">Sweaters</a></li>
                <li><a href="whats-new/summer-styles.html" data-footer-link="summer">Summer Styles</a></li>
                <li><a href="whats-new/accessories.html" data-footer-link="accessories">Accessories</a></li>
                <li><a href="about-me.html" data-footer-link="about">About me</a></li>
            </ul>
        </div>
        <div>
            <h4>Useful Links</h4>
            <ul>
                <li><a href="https://www.ravelry.com/stores/hook-mountain-handmade-designs">Shop on Ravelry</a></li>
                <li><a href="https://gosadi.com/designer/hookmountainhandmade">Shop on GoSadi</a></li>
                <li><a href="https://payhip.com/hookmountainhandmade">Shop on Payhip</a></li>
                <li><a href="test-knitting.html" data-footer-link="test-knitting">Open Test Knits</a></li>
            </ul>
        </div>
        <div>
            <h4>Follow Along</h4>
            <div class="social-links">
                <a href="https://www.facebook.com/hookmountainhandmade" aria-label="Facebook">
                    <svg width="20" height="20" fill="white" viewBox="0 0 24 24"><path d="M18 2h-3a5 5 0 0 0-5 5v3H7v4h3v8h4v-8h3l1-4h-4V7a1 1 0 0 1 1-1h3z"/></svg>
                </a>
                <a href="https://www.instagram.com/hookmountainhandmade/" aria-label="Instagram">
                    <svg width="20" height="20" fill="white" viewBox="0 0 24 24"><rect x="2" y="2" width="20" height="20" rx="5" ry="5" fill="none" stroke="white" stroke-width="2"/><path d="M16 11.37A4 4 0 1 1 12.63 8 4 4 0 0 1 16 11.37z" fill="none" stroke="white" stroke-width="2"/><circle cx="17.5" cy="6.5" r="1.5" fill="white"/></svg>
                </a>
            </div>
        </div>
    </div>
    <div class="footer-bottom">
        <p>© Hook Mountain Handmade</p>
    </div>
</footer>
""".strip()


class FooterTemplateError(ValueError):
    pass


@dataclass(frozen=True)
class FooterLinkMap:
    """Link targets for pages at the site root and inside the marker directory."""

    marker: str = "/whats-new/"
    root_links: Mapping[str, str] = field(default_factory=dict)
    nested_links: Mapping[str, str] = field(default_factory=dict)

    def is_nested(self, document_path: str) -> bool:
        return self.marker in document_path

    def resolve(self, document_path: str) -> Dict[str, str]:
        links = self.nested_links if self.is_nested(document_path) else self.root_links
        return dict(links)


DEFAULT_LINK_MAP = FooterLinkMap(
    marker="/whats-new/",
    root_links={
        "home": "index.html",
        "sweaters": "whats-new/sweater-pattern-main-page.html",
        "summer": "whats-new/summer-styles.html",
        "accessories": "whats-new/accessories.html",
        "about": "about-me.html",
        "test-knitting": "test-knitting.html",
    },
    nested_links={
        "home": "../index.html",
        "sweaters": "sweater-pattern-main-page.html",
        "summer": "summer-styles.html",
        "accessories": "accessories.html",
        "about": "../about-me.html",
        "test-knitting": "../test-knitting.html",
    },
)


class FooterInjector:
    def __init__(
        self,
        link_map: FooterLinkMap = DEFAULT_LINK_MAP,
        template: str = FOOTER_TEMPLATE,
        copyright_text: str = COPYRIGHT_TEXT,
    ) -> None:
        self.link_map = link_map
        self.template = template
        self.copyright_text = copyright_text

    def build_footer(self, document_path: str) -> Tag:
        fragment = BeautifulSoup(self.template, "html.parser")
        footer = fragment.find("footer")
        if not isinstance(footer, Tag):
            raise FooterTemplateError("Footer element not found")

        links = self.link_map.resolve(document_path)
        for anchor in footer.select(f"a[{LINK_ATTR}]"):
            target = links.get(anchor.get(LINK_ATTR))
            if target:
                anchor["href"] = target
        footer[INJECTED_ATTR] = ""
        return footer

    def fallback_footer(self) -> Tag:
        fragment = BeautifulSoup("", "html.parser")
        footer = fragment.new_tag("footer", attrs={INJECTED_ATTR: ""})
        bottom = fragment.new_tag("div", attrs={"class": "footer-bottom"})
        paragraph = fragment.new_tag("p")
        paragraph.string = self.copyright_text
        bottom.append(paragraph)
        footer.append(bottom)
        return footer

    def inject(self, html: str, document_path: str) -> str:
        """Return *html* with the shared footer placed for *document_path*."""

        soup = BeautifulSoup(html, "html.parser")
        try:
            footer = self.build_footer(document_path)
        except Exception as exc:  # noqa: BLE001 - a page must never end up without a footer
            logger.error("Error loading footer for %s: %s", document_path, exc)
            footer = self.fallback_footer()
        self._place(soup, footer)
        return str(soup)

    def inject_file(self, path: Path, site_root: Path) -> Path:
        document_path = "/" + path.resolve().relative_to(site_root.resolve()).as_posix()
        html = path.read_text(encoding="utf-8")
        path.write_text(self.inject(html, document_path), encoding="utf-8")
        logger.info("Injected footer into %s", document_path)
        return path

    def _place(self, soup: BeautifulSoup, footer: Tag) -> None:
        # re-runs replace the footer injected last time
        existing = soup.find("footer", attrs={INJECTED_ATTR: True})
        placeholder = existing or soup.find(id=PLACEHOLDER_ID)
        if isinstance(placeholder, Tag):
            placeholder.replace_with(footer)
        elif soup.body is not None:
            soup.body.append(footer)
        else:
            soup.append(footer)
