from datetime import date, timedelta
from types import SimpleNamespace

from carbonsense.stats import category_totals, generate_eco_tips, weekly_stats

TODAY = date(2024, 6, 15)


def rec(offset, total, mode="car", distance=0.0, kwh=0.0, food="veg"):
    return SimpleNamespace(
        entry_date=TODAY - timedelta(days=offset), total_emissions=total,
        travel_mode=mode, travel_distance_km=distance, electricity_kwh=kwh, food_type=food,
    )


def test_weekly_stats_window_and_chart():
    entries = [rec(0, 2.0), rec(0, 1.5), rec(2, 4.0), rec(6, 1.0), rec(7, 50.0)]
    s = weekly_stats(entries, today=TODAY)
    assert s["today_total"] == 3.5
    assert s["weekly_total"] == 8.5
    assert s["entries_count"] == 4
    assert s["today_entries_count"] == 2
    assert s["avg_emission"] == 2.125
    assert [p["emissions"] for p in s["chart_data"]] == [1.0, 0, 0, 0, 4.0, 0, 3.5]
    assert s["chart_data"][-1]["name"] == "Sat"


def test_weekly_stats_empty():
    s = weekly_stats([], today=TODAY)
    assert s["weekly_total"] == 0
    assert s["avg_emission"] == 0
    assert s["formatted"]["today_total"] == "0g"


def test_category_totals_recomputes_breakdown():
    totals = category_totals([rec(0, 0, "bus", 10, 2, "non-veg"), rec(1, 0, None, 0, None, None)])
    assert totals == {"travel": 0.7, "electricity": 0.9, "food": 3.3}


def test_tips_without_entries():
    tips = generate_eco_tips(0, 0, 0, 0, 0)
    assert [t["title"] for t in tips] == ["Start Tracking Today!"]


def test_tips_sorted_and_capped():
    tips = generate_eco_tips(weekly_total=20, travel=1, electricity=5, food=4.5, entries_count=5)
    assert [t["priority"] for t in tips] == ["high", "high", "low"]
    assert tips[0]["title"] == "Cut Energy Use"
    assert tips[1]["title"] == "Mindful Eating"
    assert len(tips) <= 3


def test_generic_tip_pads_short_list():
    tips = generate_eco_tips(weekly_total=8, travel=8, electricity=0, food=0, entries_count=1)
    assert [t["title"] for t in tips] == ["Reduce Travel Emissions", "Daily Tip"]


def test_chart_uses_english_day_names():
    s = weekly_stats([], today=TODAY)
    assert [p["name"] for p in s["chart_data"]] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
