import pytest

from consent_pdf.errors import LayoutError
from consent_pdf.layout import LineElement, PageFlowManager, RuleElement, TextRun

PAGE_HEIGHT = 200.0
MARGIN = 20.0


def _element(text: str = "línea") -> LineElement:
    return LineElement(runs=(TextRun(text=text, x=MARGIN, font="regular", size=10, color=(0, 0, 0)),))


@pytest.fixture
def flow() -> PageFlowManager:
    return PageFlowManager(page_height=PAGE_HEIGHT, margin_top=MARGIN, margin_bottom=MARGIN)


def test_cursor_starts_at_top_margin(flow: PageFlowManager) -> None:
    assert flow.cursor == PAGE_HEIGHT - MARGIN
    assert flow.usable_height == PAGE_HEIGHT - 2 * MARGIN


def test_place_advances_cursor(flow: PageFlowManager) -> None:
    placement = flow.place(_element(), 14)
    assert placement.top == PAGE_HEIGHT - MARGIN
    assert placement.bottom == PAGE_HEIGHT - MARGIN - 14
    assert flow.cursor == placement.bottom
    assert not placement.overflow


def test_ensure_space_breaks_only_when_needed(flow: PageFlowManager) -> None:
    flow.place(_element(), 100)
    assert flow.ensure_space(60) is False
    assert flow.ensure_space(61) is True
    assert flow.page_index == 1
    assert flow.cursor == PAGE_HEIGHT - MARGIN


def test_element_fitting_exactly_stays_on_page(flow: PageFlowManager) -> None:
    flow.place(_element(), 100)
    placement = flow.place(_element(), 60)
    assert placement.bottom == MARGIN
    assert flow.page_index == 0


def test_no_placement_crosses_bottom_margin(flow: PageFlowManager) -> None:
    heights = [14, 33, 7, 61, 14, 14, 90, 5, 42, 14, 100, 3, 27]
    for i, height in enumerate(heights * 4):
        flow.place(_element(f"e{i}"), height)
    pages = flow.finish()

    assert len(pages) > 1
    for page in pages:
        for placement in page.placements:
            assert placement.bottom >= MARGIN
            assert placement.top <= PAGE_HEIGHT - MARGIN


def test_elements_are_kept_in_order_across_pages(flow: PageFlowManager) -> None:
    for i in range(40):
        flow.place(_element(f"e{i}"), 14)
    pages = flow.finish()

    texts = [p.element.text for page in pages for p in page.placements]
    assert texts == [f"e{i}" for i in range(40)]
    assert [page.index for page in pages] == list(range(len(pages)))


def test_block_taller_than_page_starts_new_page_once(flow: PageFlowManager) -> None:
    flow.place(_element(), 14)
    placement = flow.place(RuleElement(x=MARGIN, width=50, color=(0, 0, 0)), 500)

    assert flow.page_index == 1
    assert placement.top == PAGE_HEIGHT - MARGIN
    assert placement.overflow

    pages = flow.finish()
    assert len(pages) == 2
    assert len(pages[0].placements) == 1


def test_fresh_page_is_never_abandoned(flow: PageFlowManager) -> None:
    assert flow.ensure_space(1000) is False
    placement = flow.place(_element(), 1000)
    assert placement.overflow
    assert len(flow.finish()) == 1


def test_advance_is_dropped_at_top_of_page(flow: PageFlowManager) -> None:
    flow.advance(30)
    assert flow.cursor == PAGE_HEIGHT - MARGIN


def test_advance_never_passes_bottom_margin(flow: PageFlowManager) -> None:
    flow.place(_element(), 14)
    flow.advance(1000)
    assert flow.cursor == MARGIN


def test_finish_includes_in_progress_page(flow: PageFlowManager) -> None:
    flow.place(_element(), 150)
    flow.place(_element(), 50)
    pages = flow.finish()
    assert len(pages) == 2
    assert len(pages[1].placements) == 1


def test_flow_is_closed_after_finish(flow: PageFlowManager) -> None:
    flow.finish()
    with pytest.raises(LayoutError):
        flow.place(_element(), 14)
    with pytest.raises(LayoutError):
        flow.finish()
