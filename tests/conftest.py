import pytest
import structlog


@pytest.fixture
def registry():
    """Fresh code registry, isolated from the process-wide one."""
    from svckit.errors import Registry

    return Registry()


@pytest.fixture
def global_registry(monkeypatch, registry):
    """Swap the process-wide registry for a fresh one during the test."""
    monkeypatch.setattr("svckit.errors.code.codes", registry)
    return registry


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration made by a test."""
    yield
    structlog.reset_defaults()
