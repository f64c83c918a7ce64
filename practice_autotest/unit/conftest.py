import pytest

from practice_autotest.unit.fakes import DummyConfig, FakePage, fake_expect


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fast_config() -> DummyConfig:
    return DummyConfig(
        {
            "ui.base_url": "http://practice.test/",
            "ui.timeouts.page_load": 1000,
            "ui.timeouts.element": 100,
            "ui.timeouts.action": 100,
            "ui.timeouts.visibility": 100,
            "ui.timeouts.assertion": 100,
        }
    )


@pytest.fixture(autouse=True)
def _fake_expect(monkeypatch):
    monkeypatch.setattr(
        "practice_autotest.ui_testing.framework.page_base.expect", fake_expect
    )
