import pytest

from fakes import SAMPLE_PO, FakeProvider, reverse_all


@pytest.fixture
def reversing_provider() -> FakeProvider:
    return FakeProvider(reverse_all)


@pytest.fixture
def sample_po_path(tmp_path):
    folder = tmp_path / "locales" / "vi"
    folder.mkdir(parents=True)
    path = folder / "messages.po"
    path.write_text(SAMPLE_PO, "utf-8")
    return path
