from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlencode

from storefront.models.product import Product


@dataclass(frozen=True)
class Banner:
    title: str
    subtitle: str
    image: str
    bg_color: str = "from-gray-800 to-gray-900"


DEFAULT_BANNERS: List[Banner] = [
    Banner(
        title="Great Indian Festival",
        subtitle="Up to 80% off on Electronics",
        image="https://images.unsplash.com/photo-1607082348824-0a96f2a4b9da?w=1200&h=400&fit=crop",
        bg_color="from-orange-600 to-red-600",
    ),
    Banner(
        title="Fashion Sale",
        subtitle="Minimum 50% off on Clothing & Accessories",
        image="https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=1200&h=400&fit=crop",
        bg_color="from-purple-600 to-pink-600",
    ),
    Banner(
        title="Home & Kitchen",
        subtitle="Extra 40% off on Home Appliances",
        image="https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=1200&h=400&fit=crop",
        bg_color="from-blue-600 to-teal-600",
    ),
]


class BannerCarousel:
    """
    Which promo banner the home page shows. Indexes wrap in both directions.

    Usage:
      carousel = BannerCarousel(DEFAULT_BANNERS)
      carousel.go_to(request_index)
      carousel.current, carousel.next_index, carousel.previous_index
    """

    def __init__(self, banners: List[Banner], index: int = 0, interval_seconds: int = 3):
        self.banners = list(banners)
        self.interval_seconds = interval_seconds
        self.index = 0
        self.go_to(index)

    def go_to(self, index: int) -> int:
        self.index = index % len(self.banners) if self.banners else 0
        return self.index

    @property
    def next_index(self) -> int:
        return (self.index + 1) % len(self.banners) if self.banners else 0

    @property
    def previous_index(self) -> int:
        return (self.index - 1) % len(self.banners) if self.banners else 0

    def next(self) -> int:
        return self.go_to(self.index + 1)

    def previous(self) -> int:
        return self.go_to(self.index - 1)

    @property
    def current(self) -> Optional[Banner]:
        return self.banners[self.index] if self.banners else None


class ProductModal:
    """Product detail overlay on the home page."""

    def __init__(self):
        self.selected: Optional[Product] = None

    @property
    def is_open(self) -> bool:
        return self.selected is not None

    def open(self, product: Product) -> None:
        self.selected = product

    def close(self) -> None:
        self.selected = None


class NavbarState:
    """
    Header search box and the mobile menu/search toggles.
    Menu and search panels are mutually exclusive.
    """

    def __init__(self, search_term: str = ""):
        self.search_term = search_term
        self.menu_open = False
        self.search_open = False

    def toggle_menu(self) -> None:
        self.menu_open = not self.menu_open
        self.search_open = False

    def toggle_search(self) -> None:
        self.search_open = not self.search_open
        if self.search_open:
            self.menu_open = False

    def reset(self) -> None:
        self.search_term = ""
        self.menu_open = False
        self.search_open = False

    def submit_search(self) -> Optional[str]:
        """
        Listing URL for the current term, or None when the term is blank.
        A successful submit clears the navbar.
        """
        term = (self.search_term or "").strip()
        if not term:
            return None
        self.reset()
        return "/products?" + urlencode({"search": term})
