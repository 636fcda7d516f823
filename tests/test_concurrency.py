import asyncio

import pytest

from potranslate.concurrency import chunk, run_bounded


def test_chunk():
    assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunk([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]
    assert chunk([1, 2], 5) == [[1, 2]]
    assert chunk([], 3) == []


def test_chunk_preserves_order():
    items = list(range(17))
    groups = chunk(items, 4)

    assert len(groups) == 5
    assert all(len(group) == 4 for group in groups[:-1])
    assert [item for group in groups for item in group] == items


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        chunk([1, 2, 3], size)


class Recorder:
    def __init__(self):
        self.seen = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, item):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.001)
        self.seen.append(item)
        self.in_flight -= 1


@pytest.mark.asyncio
async def test_run_bounded_visits_each_item_once():
    recorder = Recorder()

    await run_bounded(list(range(10)), 3, recorder)

    assert sorted(recorder.seen) == list(range(10))
    assert recorder.max_in_flight == 3


@pytest.mark.asyncio
async def test_run_bounded_caps_workers_at_item_count():
    recorder = Recorder()

    await run_bounded(["a", "b"], 10, recorder)

    assert sorted(recorder.seen) == ["a", "b"]
    assert recorder.max_in_flight == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrency", [0, -2])
async def test_run_bounded_non_positive_concurrency_is_noop(concurrency):
    recorder = Recorder()

    await run_bounded([1, 2, 3], concurrency, recorder)

    assert recorder.seen == []


@pytest.mark.asyncio
async def test_run_bounded_empty_items():
    recorder = Recorder()

    await run_bounded([], 4, recorder)

    assert recorder.seen == []


@pytest.mark.asyncio
async def test_run_bounded_propagates_worker_errors():
    async def boom(item):
        raise RuntimeError(f"failed on {item}")

    with pytest.raises(RuntimeError, match="failed on 1"):
        await run_bounded([1], 1, boom)
