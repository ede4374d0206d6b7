from __future__ import annotations

import textwrap

import pytest

from wheel_draw.config import (
    CONFIG_PATH,
    DrawConfigError,
    build_engine,
    load_config,
    override_demo_config,
    parse_config,
)
from wheel_draw.engine import ValidationError
from wheel_draw.prizes import Quantity


def _write(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_load_config_fills_consolation_remainder(tmp_path):
    path = _write(
        tmp_path,
        """
        consolation:
          id: THANKS
          name: Better luck next time
        prizes:
          - {id: P1, name: Phone, quantity: 1, probability: 0.01}
          - {id: P2, name: Earbuds, quantity: 5, probability: 0.05}
          - {id: P3, name: Coupon, quantity: 50, probability: 0.20}
        demo:
          draws: 40
          workers: 4
          seed: 9
        """,
    )
    config = load_config(path)

    assert [p.id for p in config.prizes] == ["P1", "P2", "P3", "THANKS"]
    filler = config.prizes[-1]
    assert filler.quantity.is_unlimited
    assert filler.name == "Better luck next time"
    assert filler.probability == pytest.approx(0.74)
    assert config.consolation.id == "THANKS"
    assert (config.demo.draws, config.demo.workers, config.demo.seed) == (40, 4, 9)


def test_explicit_consolation_entry_is_not_refilled():
    config = parse_config(
        {
            "prizes": [
                {"id": "P1", "name": "Phone", "quantity": 1, "probability": 0.3},
                {"id": "THANK_YOU", "name": "Thanks", "quantity": "unlimited", "probability": 0.7},
            ]
        }
    )
    assert len(config.prizes) == 2
    assert config.prizes[1].quantity == Quantity.unlimited()


@pytest.mark.parametrize("raw", ["unlimited", "Infinite", "∞", None])
def test_unlimited_quantity_spellings(raw):
    config = parse_config(
        {"prizes": [{"id": "U", "name": "Sticker", "quantity": raw, "probability": 1.0}]}
    )
    assert config.prizes[0].quantity.is_unlimited


def test_fill_consolation_disabled_leaves_catalog_untouched():
    config = parse_config(
        {
            "fill_consolation": False,
            "prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 0.5}],
        }
    )
    assert len(config.prizes) == 1
    with pytest.raises(ValidationError):
        build_engine(config)


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"prizes": []},
        {"prizes": ["nope"]},
        {"prizes": [{"id": "P1", "name": "Phone", "probability": 0.5}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": "many", "probability": 0.5}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": True, "probability": 0.5}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 2.7, "probability": 0.5}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": "high"}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 1.5}]},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 0.5}], "demo": {"workers": 0}},
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 0.5}], "consolation": "x"},
    ],
)
def test_malformed_config_is_rejected(data):
    with pytest.raises(DrawConfigError):
        parse_config(data)


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(DrawConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml_is_reported(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("prizes: [unclosed\n", encoding="utf-8")
    with pytest.raises(DrawConfigError) as excinfo:
        load_config(path)
    assert excinfo.value.__cause__ is not None


def test_bundled_config_builds_engine():
    config = load_config(CONFIG_PATH)
    engine = build_engine(config)

    assert [p.id for p in engine.prizes] == ["P001", "P002", "P003", "THANK_YOU"]
    assert engine.consolation.id == "THANK_YOU"


def test_seeded_engines_draw_identically(tmp_path):
    path = _write(
        tmp_path,
        """
        prizes:
          - {id: A, name: Alpha, quantity: 100, probability: 0.3}
          - {id: B, name: Beta, quantity: 100, probability: 0.3}
        demo:
          seed: 5
        """,
    )
    first = build_engine(load_config(path))
    second = build_engine(load_config(path))

    ids = [f"REQ-{i}" for i in range(50)]
    assert [first.draw(i).prize_id for i in ids] == [second.draw(i).prize_id for i in ids]


def test_whole_float_quantity_is_accepted():
    config = parse_config(
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 3.0, "probability": 1.0}]}
    )
    assert config.prizes[0].quantity == Quantity.finite(3)


def test_demo_overrides_are_applied():
    demo = parse_config(
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 1.0}]}
    ).demo
    updated = override_demo_config(demo, draws=0, workers=2, seed=8)

    assert (updated.draws, updated.workers, updated.seed) == (0, 2, 8)
    assert override_demo_config(demo) == demo


@pytest.mark.parametrize("changes", [{"workers": 0}, {"workers": -1}, {"draws": -5}])
def test_demo_overrides_are_bounds_checked(changes):
    demo = parse_config(
        {"prizes": [{"id": "P1", "name": "Phone", "quantity": 1, "probability": 1.0}]}
    ).demo
    with pytest.raises(DrawConfigError):
        override_demo_config(demo, **changes)
