"""Declarative derivative tables for the site's images.

Each table maps a raw upload filename to the canonical name used for its
derivatives. Order matters: entries are processed exactly as listed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from ..models import Category, DerivativeSpec
from ..utils import clean_name

DEFAULT_WIDTHS: Dict[Category, Tuple[int, ...]] = {
    Category.PATTERNS: (320, 640),
    Category.CATEGORIES: (400, 800),
    Category.FEATURED: (350, 700),
    Category.LOGO: (120, 240, 300),
    Category.FAVICON: (16, 32, 180),
}

SMALL_LOGO_WIDTHS: Tuple[int, ...] = (60, 120)

SWEATER_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("2024_05_upload_medium-1-1-edited.jpeg", "briary"),
    ("2024_05_pxl_20240327_160102273.mp3-edited.jpg", "planted-cardigan"),
    ("2024_05_upload_medium-8-edited.jpeg", "thimble-sweater"),
    ("2024_05_pxl_20231117_2104414932-1-edited.jpg", "ring-of-fortune"),
    ("2024_05_pxl_20231001_200632629.mp2_-edited.jpg", "arachne-pullover"),
    ("2024_05_pxl_20230820_2043000572-edited.jpg", "teapot-cardigan"),
    ("2023_04_pxl_20230107_164347145_3.jpg", "layer-cake"),
    ("2024_05_pxl_20230112_193806689-edited.jpg", "bakehouse-cardigan"),
    ("2024_03_pxl_20230305_212032005.mp_.jpg", "beatrix-sweater"),
    ("2023_03_pxl_20230112_190332442.mp_.jpg", "very-snug"),
    ("2024_05_44cf986b-9748-4997-88f8-37118b738099_medium2.jpeg", "brooks-river"),
    ("2024_05_file0_medium2.jpeg", "lisbon-cardigan"),
    ("2024_05_pxl_20220108_142053195.mp__1__medium.webp", "squash-blossom"),
    ("2024_05_upload_medium-4-edited.jpeg", "unlocked-pullover"),
    ("2024_05_pxl_20230408_191939412_2-edited.jpg", "challah-sweater"),
    ("2024_05_upload_medium2.jpeg", "bun-break"),
    ("2024_05_pxl_20210908_190552008-1-edited.jpg", "bookshop-cardigan"),
    ("2024_05_pxl_20210908_191202519.mp_-edited.jpg", "string-or-nothing"),
    ("2022_04_pxl_20210602_154543739.jpg", "night-market"),
    ("2024_05_pxl_20210908_192001701_medium.webp", "space-clouds"),
    ("2024_05_6bfed330-f9d7-4cb8-a5d8-7a533e663d75_medium2-edited.webp", "brunch"),
    ("2024_05_pxl_20240410_1731321362-1-1.jpg", "unplugged"),
    ("2024_05_pxl_20210908_192534681.mp_medium2.jpg", "pillars-of-uruk"),
    ("2024_05_pxl_20230112_185443219-1-edited.jpg", "reality-bytes"),
    ("2024_05_upload_medium-4-2.jpeg", "yaara"),
    ("2024_05_ef5c5cda-d449-49ba-aa49-a9cc8e5bfeb8_medium2-edited.jpeg", "tide-pools"),
    ("2024_05_20200704_141911_medium2-edited.jpg", "uprising"),
    ("2024_05_cc2dc837-6648-4031-9843-a011d8208493_medium2-edited.jpeg", "winter-garden"),
)

SUMMER_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("2024_05_upload_medium2-4-edited.jpeg", "agrihan"),
    ("2024_05_upload_medium2-4-1-edited.jpeg", "pollinator-tank"),
    ("2024_05_upload_medium2-3-1-edited.jpeg", "daily-gelato"),
    ("2024_05_pxl_20230421_020425279.portrait_medium2-edited.jpg", "mustard-flower-tee"),
    ("2024_05_upload_medium2-1-2.jpeg", "auri-tee"),
    ("2024_05_upload_medium2-2-1.jpeg", "berry-jam"),
)

HAT_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("2024_05_img_20191202_140350434_medium.webp", "sustain-comfort"),
    ("2024_05_upload_medium-14.jpeg", "way-to-my-heart-hat"),
    ("2024_05_upload_medium-10-1-edited.jpeg", "shire-hat"),
    ("2024_05_image-1.jpeg", "strawberry-toast-hat"),
    ("2024_05_upload_medium-13-1-edited.jpeg", "ski-lift-hat"),
    ("2024_05_img_20191013_101159791_medium-edited-1.webp", "star-child"),
    ("2024_05_upload_medium-12-1-edited-1.jpeg", "thistleburr-hat"),
    ("2024_05_upload_medium-1-3-edited.jpeg", "haycorns"),
    ("2024_05_upload_medium-11-edited-1.jpeg", "study-in-cats-1"),
    ("2024_05_upload_medium-12-edited-1.jpeg", "study-in-cats-2"),
    ("2024_05_upload_medium-5-3-edited.jpeg", "shave-ice"),
    ("2024_05_upload_medium-3-3.jpeg", "misty-mountains"),
    ("2024_05_upload_medium-3-4-edited.jpeg", "manzanita-avenue"),
    ("2024_05_upload_medium2-3-edited.jpeg", "finial-hat"),
    ("2024_05_img_20211204_111401_medium-edited.jpg", "forest-trees-hat"),
    ("2024_05_img_20210214_160311_medium-1.webp", "fuck-cancer"),
)

GLOVE_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("2024_05_upload_medium-17-edited.jpeg", "thistleburr-mitts"),
    ("2024_05_upload_medium-7-1-edited.jpeg", "sock-hands"),
    ("2024_05_upload_medium-2-4-edited-2.jpeg", "just-sleeves"),
    ("2024_05_upload_medium-9-1-edited.jpeg", "strawberry-toast-mitts"),
    ("2024_05_pxl_20211127_194340947_medium-edited-2.webp", "forest-trees-gloves"),
)

SCARF_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("2024_05_upload_medium-19-edited.jpeg", "sea-glass-shawl"),
    ("2024_05_upload_medium2-1-1.jpeg", "orchard-vine"),
    ("2024_05_upload_medium-15-1.jpeg", "way-to-my-heart-cowl"),
)

CATEGORY_IMAGES: Tuple[Tuple[str, str], ...] = (
    ("2025_07_daisy-chain-1.jpg", "summer-styles"),
    ("2024_04_pxl_20251201_2014547382.jpg", "sweaters"),
    ("2024_04_pxl_20251030_1522367082.jpg", "accessories"),
    ("2024_05_upload_medium-1.jpeg", "sweaters-alt"),
    ("2024_03_pxl_20231114_181413205-1.jpg", "accessories-alt"),
    ("2024_03_pxl_20230730_172040998_exported_1501_1690738882154.jpg", "summer-styles-alt"),
    ("2024_05_upload_medium-20.jpeg", "summer-browse"),
)

FEATURED_IMAGES: Tuple[Tuple[str, str], ...] = (
    ("2025_11_pxl_20251111_1707159522.jpg", "innkeeper-sweater"),
    ("2025_11_pxl_20250816_1857233132-1.jpg", "arachne-featured"),
    ("2024_04_pxl_20240813_1533319452-1.jpg", "test-knit-callout"),
    ("2024_10_pxl_20230820_2043067602.jpg", "about-portrait"),
)

LOGO_SOURCE = "2025_11_jovi_logo-1.png"
FAVICON_SOURCE = "2022_03_d86e37ab-8b3b-2574-eb82-0f33ae1f23eb.png"
SMALL_LOGO_SOURCE = "2024_05_unnamed.png"


def _specs(
    category: Category, entries: Iterable[Tuple[str, str]], widths: Sequence[int] | None = None
) -> List[DerivativeSpec]:
    resolved = tuple(widths) if widths else DEFAULT_WIDTHS[category]
    return [DerivativeSpec(category, source, name, resolved) for source, name in entries]


def build_default_catalog() -> Tuple[DerivativeSpec, ...]:
    patterns = SWEATER_PATTERNS + SUMMER_PATTERNS + HAT_PATTERNS + GLOVE_PATTERNS + SCARF_PATTERNS
    specs: List[DerivativeSpec] = []
    specs += _specs(Category.PATTERNS, patterns)
    specs += _specs(Category.CATEGORIES, CATEGORY_IMAGES)
    specs += _specs(Category.FEATURED, FEATURED_IMAGES)
    specs += _specs(Category.LOGO, [(LOGO_SOURCE, "logo")])
    specs += _specs(Category.FAVICON, [(FAVICON_SOURCE, "favicon")])
    specs += _specs(Category.LOGO, [(SMALL_LOGO_SOURCE, "logo-small")], SMALL_LOGO_WIDTHS)
    return tuple(specs)


DEFAULT_CATALOG: Tuple[DerivativeSpec, ...] = build_default_catalog()


def load_catalog(path: Path) -> Tuple[DerivativeSpec, ...]:
    """Load a derivative table from a JSON list of records.

    Each record needs ``category`` and ``source``. A missing ``name`` is
    derived from the source filename and missing ``widths`` fall back to the
    category's standard widths.
    """

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Catalog {path} is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise ValueError(f"Catalog {path} must contain a JSON list")

    specs: List[DerivativeSpec] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Catalog entry #{index} must be an object")
        try:
            category = Category(record["category"])
            source = str(record["source"])
        except KeyError as exc:
            raise ValueError(f"Catalog entry #{index} is missing {exc.args[0]!r}") from exc
        name = str(record.get("name") or clean_name(source))
        widths = record.get("widths")
        if widths is None:
            widths = DEFAULT_WIDTHS[category]
        specs.append(DerivativeSpec(category, source, name, tuple(widths)))
    return tuple(specs)


def iter_category(catalog: Iterable[DerivativeSpec], category: Category) -> Iterator[DerivativeSpec]:
    return (spec for spec in catalog if spec.category is category)
