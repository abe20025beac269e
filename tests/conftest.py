import gin
import pytest
import torch


@pytest.fixture
def generator():
    return torch.Generator().manual_seed(0)


@pytest.fixture
def predicted(generator):
    return torch.randn(4, 3, generator=generator, dtype=torch.float64)


@pytest.fixture
def expected(generator):
    return torch.randn(4, 3, generator=generator, dtype=torch.float64)


@pytest.fixture
def positive_pair(generator):
    """Strictly positive predictions and targets for log based losses."""
    p = torch.rand(4, 3, generator=generator, dtype=torch.float64) + 0.1
    e = torch.rand(4, 3, generator=generator, dtype=torch.float64) + 0.1
    return p, e


@pytest.fixture(autouse=True)
def clear_gin():
    yield
    gin.clear_config()
