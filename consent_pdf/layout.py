"""
Page model and vertical flow.

The flow manager owns the cursor and the page list. Every element that ends
up on a page goes through ``PageFlowManager.place``, which guarantees that
its bottom edge stays above the bottom margin (or flags the placement when
the element is taller than an empty page).

License: MIT
"""

import logging
from dataclasses import dataclass, field
from typing import List as ListType, Tuple, Union

from consent_pdf.errors import LayoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRun:
    """A run of text drawn at a horizontal offset."""
    text: str
    x: float
    font: str
    size: float
    color: Tuple[float, float, float]


@dataclass(frozen=True)
class LineElement:
    """One line made of one or more runs sharing a baseline."""
    runs: Tuple[TextRun, ...]

    @property
    def text(self) -> str:
        return " ".join(run.text for run in self.runs)


@dataclass(frozen=True)
class ImageElement:
    """A decoded PNG placed at a horizontal offset."""
    data: bytes
    x: float
    width: float
    height: float


@dataclass(frozen=True)
class RuleElement:
    """A horizontal line drawn at the bottom of its slot."""
    x: float
    width: float
    color: Tuple[float, float, float]


Element = Union[LineElement, ImageElement, RuleElement]


@dataclass(frozen=True)
class Placement:
    """An element with its vertical slot on a page."""
    element: Element
    top: float
    height: float
    overflow: bool = False

    @property
    def bottom(self) -> float:
        return self.top - self.height


@dataclass(frozen=True)
class Page:
    """A sealed output page."""
    index: int
    placements: Tuple[Placement, ...]


@dataclass(frozen=True)
class Document:
    """A finished, immutable sequence of pages plus PDF metadata."""
    pages: Tuple[Page, ...]
    page_width: float
    page_height: float
    margin: float
    title: str = ""
    author: str = ""
    subject: str = ""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def lines(self) -> ListType[str]:
        """Text of every line element, in reading order."""
        return [
            placement.element.text
            for page in self.pages
            for placement in page.placements
            if isinstance(placement.element, LineElement)
        ]


@dataclass
class PageFlowManager:
    """
    Owns the vertical cursor and the pages of one document.

    Coordinates follow PDF conventions: y grows upward from the page bottom,
    the cursor starts at ``page_height - margin_top`` and moves down.
    """
    page_height: float
    margin_top: float
    margin_bottom: float
    cursor: float = field(init=False)
    _pages: ListType[Page] = field(init=False, default_factory=list)
    _current: ListType[Placement] = field(init=False, default_factory=list)
    _finished: bool = field(init=False, default=False)

    def __post_init__(self):
        self.cursor = self.top

    @property
    def top(self) -> float:
        return self.page_height - self.margin_top

    @property
    def usable_height(self) -> float:
        return self.top - self.margin_bottom

    @property
    def page_index(self) -> int:
        return len(self._pages)

    @property
    def page_is_empty(self) -> bool:
        return not self._current

    def ensure_space(self, required_height: float) -> bool:
        """
        Start a new page if required_height does not fit below the cursor.

        An empty page is never abandoned: a requirement taller than the usable
        height stays on the current (fresh) page.

        Returns:
            True if a new page was started
        """
        self._check_open()
        if self.cursor - required_height >= self.margin_bottom:
            return False
        if self.page_is_empty:
            return False
        self._new_page()
        return True

    def place(self, element: Element, height: float) -> Placement:
        """Place an element below the cursor, breaking the page first if needed."""
        self.ensure_space(height)

        overflow = self.cursor - height < self.margin_bottom
        if overflow:
            logger.warning(
                f"Element of height {height:.1f}pt exceeds the usable page height "
                f"({self.usable_height:.1f}pt) on page {self.page_index + 1}"
            )

        placement = Placement(element=element, top=self.cursor, height=height, overflow=overflow)
        self._current.append(placement)
        self.cursor -= height
        return placement

    def advance(self, gap: float):
        """Move the cursor down for spacing; dropped at the top of a fresh page."""
        self._check_open()
        if self.page_is_empty:
            return
        self.cursor = max(self.cursor - gap, self.margin_bottom)

    def finish(self) -> Tuple[Page, ...]:
        """Seal the in-progress page and return every page."""
        self._check_open()
        self._seal()
        self._finished = True
        return tuple(self._pages)

    def _new_page(self):
        self._seal()
        self.cursor = self.top

    def _seal(self):
        self._pages.append(Page(index=len(self._pages), placements=tuple(self._current)))
        self._current = []

    def _check_open(self):
        if self._finished:
            raise LayoutError("Page flow already finished")
