import pytest


class FakeClock:
    """Clock and sleep pair where every sleep also costs ``overhead`` seconds."""

    def __init__(self, start: float = 1_000_000.0, overhead: float = 0.0) -> None:
        self.now = start
        self.overhead = overhead
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds + self.overhead


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setattr("zzz.config.platform.system", lambda: "Linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("ZZZ_DEBUG", raising=False)
    return tmp_path
