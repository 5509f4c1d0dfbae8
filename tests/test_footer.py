from __future__ import annotations

import logging
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from hookmountain_site.site.footer import FooterInjector, FooterLinkMap

PAGE = "<html><body><main>Hello</main><div id=\"footer-placeholder\"></div></body></html>"


def _links(html: str) -> dict[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    return {anchor["data-footer-link"]: anchor["href"] for anchor in soup.select("a[data-footer-link]")}


@pytest.mark.parametrize(
    "document_path, expected",
    [
        ("/whats-new/summer-styles.html", {"home": "../index.html", "summer": "summer-styles.html"}),
        ("/index.html", {"home": "index.html", "summer": "whats-new/summer-styles.html"}),
        ("/about-me.html", {"about": "about-me.html", "test-knitting": "test-knitting.html"}),
    ],
)
def test_links_follow_document_location(document_path: str, expected: dict[str, str]) -> None:
    links = _links(FooterInjector().inject(PAGE, document_path))
    for key, href in expected.items():
        assert links[key] == href


def test_placeholder_is_replaced() -> None:
    html = FooterInjector().inject(PAGE, "/index.html")
    soup = BeautifulSoup(html, "html.parser")

    assert soup.find(id="footer-placeholder") is None
    assert len(soup.find_all("footer")) == 1
    assert soup.body.contents[-1].name == "footer"


def test_footer_appended_to_body_without_placeholder() -> None:
    html = FooterInjector().inject("<html><body><p>Text</p></body></html>", "/index.html")
    soup = BeautifulSoup(html, "html.parser")

    assert soup.body.find_all(recursive=False)[-1].name == "footer"
    assert "Sitemap" in soup.footer.get_text()


def test_unparseable_template_falls_back_to_copyright(caplog: pytest.LogCaptureFixture) -> None:
    injector = FooterInjector(template="<div>no footer in here</div>")

    with caplog.at_level(logging.ERROR):
        html = injector.inject(PAGE, "/index.html")

    soup = BeautifulSoup(html, "html.parser")
    footers = soup.find_all("footer")
    assert len(footers) == 1
    assert footers[0].get_text(strip=True) == "© Hook Mountain Handmade"
    assert footers[0].find("a") is None
    assert "Footer element not found" in caplog.text


def test_custom_link_map() -> None:
    link_map = FooterLinkMap(
        marker="/shop/",
        root_links={"home": "/"},
        nested_links={"home": "../"},
    )
    injector = FooterInjector(link_map=link_map)

    assert _links(injector.inject(PAGE, "/shop/item.html"))["home"] == "../"
    assert _links(injector.inject(PAGE, "/whats-new/a.html"))["home"] == "/"


def test_inject_file_is_repeatable(tmp_path: Path) -> None:
    page = tmp_path / "whats-new" / "accessories.html"
    page.parent.mkdir()
    page.write_text(PAGE, encoding="utf-8")
    injector = FooterInjector()

    injector.inject_file(page, tmp_path)
    injector.inject_file(page, tmp_path)

    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    assert len(soup.find_all("footer")) == 1
    assert _links(str(soup))["about"] == "../about-me.html"
