from __future__ import annotations

import pytest

from patchwork.runtime import telemetry


@pytest.fixture(autouse=True, scope="session")
def quiet_telemetry() -> None:
    telemetry.configure(console=False)
