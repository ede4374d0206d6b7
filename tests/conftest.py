from __future__ import annotations

import pytest

from wheel_draw.prizes import Prize, Quantity


@pytest.fixture
def scenario_a_prizes() -> list[Prize]:
    return [
        Prize("P1", "Phone", Quantity.finite(1), 0.01),
        Prize("P2", "Earbuds", Quantity.finite(5), 0.05),
        Prize("P3", "Coupon", Quantity.finite(50), 0.20),
        Prize("THANK_YOU", "Thank you for playing", Quantity.unlimited(), 0.74),
    ]
