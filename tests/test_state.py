# File: tests/test_state.py
import pytest

from webapp_scraper.crawler.state import StateTracker, content_digest


@pytest.fixture()
def page_session(site, session):
    site.add("https://ex.com/page1", title="Test Page", body="Test")
    return session


async def open_page(session, url):
    page = await session.new_page()
    await page.navigate(url, timeout_ms=1000, wait_until="load")
    return page


@pytest.mark.asyncio()
async def test_track_state(page_session, clock):
    tracker = StateTracker(clock=clock)
    p = await open_page(page_session, "https://ex.com/page1")

    state = await tracker.track_state(p, "https://ex.com/page1/#intro")

    assert state.url == "https://ex.com/page1"
    assert state.title == "Test Page"
    assert state.captured_at == clock.now()
    assert state.content_hash == content_digest(await p.content())
    assert tracker.has_visited("https://ex.com/page1")
    assert tracker.get_state("https://ex.com/page1/") is state


@pytest.mark.asyncio()
async def test_content_change_detection(page_session, site, clock):
    tracker = StateTracker(clock=clock)
    p = await open_page(page_session, "https://ex.com/page1")

    assert await tracker.has_content_changed(p, "https://ex.com/page1")
    await tracker.track_state(p, "https://ex.com/page1")
    assert not await tracker.has_content_changed(p, "https://ex.com/page1")

    site.pages["https://ex.com/page1"].body = "Changed"
    assert await tracker.has_content_changed(p, "https://ex.com/page1")


@pytest.mark.asyncio()
async def test_revisit_with_identical_content_is_unchanged(page_session, clock):
    tracker = StateTracker(clock=clock)
    first = await open_page(page_session, "https://ex.com/page1")
    await tracker.track_state(first, "https://ex.com/page1")
    await clock.sleep(60)

    second = await open_page(page_session, "https://ex.com/page1")
    assert not await tracker.has_content_changed(second, "https://ex.com/page1")

    state = await tracker.track_state(second, "https://ex.com/page1")
    assert len(tracker) == 1
    assert tracker.get_all_states() == [state]
    assert state.captured_at == clock.now()


def test_unknown_url_is_not_visited():
    assert not StateTracker().has_visited("https://ex.com")
