from datetime import datetime, timedelta, timezone

import pytest

from stampforge.domain.cards import CardCatalog
from stampforge.testing.factory import CardDesignFactory
from stampforge.testing.fixtures import memory_app  # noqa: F401


class TickingClock:
    """Return strictly increasing timestamps, one second apart."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def catalog() -> CardCatalog:
    factory = CardDesignFactory()
    return CardCatalog([factory.build("og"), factory.build("pink"), factory.build("mini", slots=3)])
