import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from fieldops_scheduler.services.domain import Urgency
from fieldops_scheduler.services.weather_profiles import (
    INDOOR_PROFILE,
    TaskCategory,
    load_profile_table,
    profile_for,
)
from fieldops_scheduler.services.weather_scoring import ScoringConfig, WeatherChip, score, worst_chip

from .factories import make_operation
from .utils import FROZEN_NOW, make_snapshot

DUE = FROZEN_NOW + timedelta(hours=1)


def test_unknown_categories_are_indoor() -> None:
    assert profile_for("basket weaving") == INDOOR_PROFILE
    assert profile_for(None) == INDOOR_PROFILE
    assert profile_for("Sanitation").sensitive_to_wind


def test_sanitation_task_in_rain_is_flagged() -> None:
    snapshot = make_snapshot(precip={DUE.hour: 0.8})
    task = make_operation("Trash room", TaskCategory.SANITATION)

    scored = score(task, snapshot, DUE)

    assert scored.chip in {WeatherChip.WET, WeatherChip.HEAVY_RAIN}
    assert scored.chip is WeatherChip.HEAVY_RAIN
    assert scored.advice


def test_precipitation_between_ceiling_and_heavy_rain_is_wet() -> None:
    snapshot = make_snapshot(precip=0.35)

    scored = score(make_operation(), snapshot, DUE)

    assert scored.chip is WeatherChip.WET
    assert "reslotting" in scored.advice


def test_wind_only_counts_for_wind_sensitive_tasks() -> None:
    snapshot = make_snapshot(wind=40.0)

    assert score(make_operation(category=TaskCategory.COMPLIANCE), snapshot, DUE).chip is WeatherChip.WINDY
    assert score(make_operation(category=TaskCategory.CLEANING), snapshot, DUE).chip is WeatherChip.GOOD_WINDOW


def test_temperature_extremes() -> None:
    assert score(make_operation(), make_snapshot(temperature=101.0), DUE).chip is WeatherChip.HOT
    assert score(make_operation(), make_snapshot(temperature=12.0), DUE).chip is WeatherChip.COLD
    relaxed = ScoringConfig(cold_temperature_f=0.0)
    assert score(make_operation(), make_snapshot(temperature=12.0), DUE, config=relaxed).chip is WeatherChip.GOOD_WINDOW


def test_indoor_tasks_are_never_penalised() -> None:
    snapshot = make_snapshot(precip=0.95, wind=60.0, temperature=110.0)

    scored = score(make_operation(category=TaskCategory.INSPECTION), snapshot, DUE)

    assert scored.chip is WeatherChip.GOOD_WINDOW
    assert scored.advice is None


def test_missing_weather_fails_open() -> None:
    assert score(make_operation(), None, DUE).chip is WeatherChip.GOOD_WINDOW
    empty = make_snapshot(hours=0)
    assert score(make_operation(), empty, DUE).chip is WeatherChip.GOOD_WINDOW


def test_nearest_hour_block_is_used() -> None:
    snapshot = make_snapshot(precip={9: 0.9})

    assert score(make_operation(), snapshot, FROZEN_NOW.replace(hour=9, minute=20)).chip is WeatherChip.HEAVY_RAIN
    assert score(make_operation(), snapshot, FROZEN_NOW.replace(hour=9, minute=40)).chip is WeatherChip.GOOD_WINDOW


def test_urgent_tasks_keep_their_warning() -> None:
    snapshot = make_snapshot(precip=0.7)
    task = make_operation(urgency=Urgency.CRITICAL)

    scored = score(task, snapshot, DUE)

    assert scored.display == "urgent"
    assert scored.chip is WeatherChip.HEAVY_RAIN
    assert scored.advice is not None
    assert score(make_operation(), snapshot, DUE).display == "heavy_rain"


def test_worst_chip_prefers_heavy_rain() -> None:
    assert worst_chip([WeatherChip.WET, WeatherChip.HEAVY_RAIN, WeatherChip.WINDY]) is WeatherChip.HEAVY_RAIN
    assert worst_chip([]) is WeatherChip.GOOD_WINDOW


def test_profile_overrides_from_file(tmp_path) -> None:
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": {
                    "inspection": {"is_outdoor": True, "sensitive_to_precip": True, "ideal_precip_prob_max": 0.1}
                }
            }
        )
    )

    table = load_profile_table(path)
    snapshot = make_snapshot(precip=0.2)

    assert table.profile_for(TaskCategory.INSPECTION).is_outdoor
    assert table.profile_for(TaskCategory.CLEANING) == profile_for(TaskCategory.CLEANING)
    scored = score(make_operation(category=TaskCategory.INSPECTION), snapshot, DUE, profiles=table)
    assert scored.chip is WeatherChip.WET


def test_profile_file_is_validated(tmp_path) -> None:
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({"profiles": {"cleaning": {"is_outdoor": True, "ideal_precip_prob_max": 3}}}))

    with pytest.raises(ValidationError):
        load_profile_table(path)
