# file: tests/integration_tests/conftest.py
import pytest


@pytest.fixture(params=[1, 2, 3, 7, 64])
def chunk_size(request):
    """Size of the reads the input is split into."""
    return request.param


@pytest.fixture
def chunked():
    def split_into_chunks(data: bytes, size: int):
        return [data[i:i + size] for i in range(0, len(data), size)]
    return split_into_chunks
