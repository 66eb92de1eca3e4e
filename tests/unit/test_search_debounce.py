import asyncio

import pytest

from backoffice_console.app.ui.filters import ALL, Debouncer, clean_filters, is_active


@pytest.mark.asyncio
async def test_debouncer_fires_once_with_last_value() -> None:
    committed: list[str] = []
    debouncer: Debouncer[str] = Debouncer(80, committed.append)

    for text in ("a", "ab", "abc"):
        debouncer.push(text)
        await asyncio.sleep(0.01)

    assert committed == []
    assert debouncer.pending

    await asyncio.sleep(0.2)

    assert committed == ["abc"]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_debouncer_flush_and_cancel() -> None:
    committed: list[str] = []
    debouncer: Debouncer[str] = Debouncer(1000, committed.append)

    debouncer.push("lamp")
    debouncer.flush()
    debouncer.push("desk")
    debouncer.cancel()
    await asyncio.sleep(0)

    assert committed == ["lamp"]
    assert not debouncer.pending


def test_zero_wait_commits_immediately() -> None:
    committed: list[str] = []
    debouncer: Debouncer[str] = Debouncer(0, committed.append)

    debouncer.push("now")

    assert committed == ["now"]


def test_clean_filters_drops_all_and_blank_values() -> None:
    assert clean_filters({"status": ALL, "category": "Lighting", "q": ""}) == {"category": "Lighting"}
    assert is_active("Pending")
    assert not is_active(ALL)
