# carbonsense/stats.py
"""Dashboard numbers and rule-based eco tips."""
from collections import defaultdict
from datetime import date, timedelta

from .calculations import calculate_emissions, format_emissions
from .schemas import LifestyleEntry

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
MAX_TIPS = 3
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _total(entry):
    return getattr(entry, "total_emissions", None) or 0.0


def week_start(today):
    return today - timedelta(days=6)


def weekly_stats(entries, today=None):
    """Totals over the last seven days (today included) of ``entries``."""
    today = today or date.today()
    start = week_start(today)
    week = [e for e in entries if start <= e.entry_date <= today]

    by_date = defaultdict(float)
    for e in week:
        by_date[e.entry_date] += _total(e)

    today_entries = [e for e in week if e.entry_date == today]
    today_total = sum(_total(e) for e in today_entries)
    weekly_total = sum(by_date.values())
    avg = weekly_total / len(week) if week else 0.0

    chart_data = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        chart_data.append({
            "date": day.isoformat(),
            "name": WEEKDAY_NAMES[day.weekday()],
            "emissions": round(by_date.get(day, 0.0), 4),
        })

    return {
        "today_total": round(today_total, 4),
        "weekly_total": round(weekly_total, 4),
        "avg_emission": round(avg, 4),
        "entries_count": len(week),
        "today_entries_count": len(today_entries),
        "formatted": {
            "today_total": format_emissions(today_total),
            "weekly_total": format_emissions(weekly_total),
            "avg_emission": format_emissions(avg),
        },
        "chart_data": chart_data,
    }


def category_totals(entries):
    """Travel, electricity and food kg recomputed from the stored lifestyle fields."""
    travel = electricity = food = 0.0
    for e in entries:
        b = calculate_emissions(LifestyleEntry(
            travel_distance_km=e.travel_distance_km or 0.0,
            travel_mode=e.travel_mode or "",
            electricity_kwh=e.electricity_kwh or 0.0,
            food_type=e.food_type or "",
        ))
        travel += b.travel
        electricity += b.electricity
        food += b.food
    return {"travel": round(travel, 2), "electricity": round(electricity, 2), "food": round(food, 2)}


def _tip(title, description, priority):
    return {"title": title, "description": description, "priority": priority}


def generate_eco_tips(weekly_total, travel, electricity, food, entries_count):
    if entries_count == 0:
        return [_tip(
            "Start Tracking Today!",
            "Log your first carbon entry to get personalized eco-tips based on your lifestyle.",
            "high",
        )]

    tips = []
    combined = travel + electricity + food

    def share(part):
        return (part / combined) * 100 if combined > 0 else 0

    travel_pct = share(travel)
    if travel_pct > 50:
        tips.append(_tip("Reduce Travel Emissions",
                         "Travel makes up most of your footprint. Try carpooling, public transport, or cycling for short trips.",
                         "high"))
    elif travel_pct > 30:
        tips.append(_tip("Optimize Your Commute",
                         "Consider remote work days or combine errands to reduce travel frequency.",
                         "medium"))

    electricity_pct = share(electricity)
    if electricity_pct > 40:
        tips.append(_tip("Cut Energy Use",
                         "Switch to LED bulbs, unplug devices when not in use, and consider energy-efficient appliances.",
                         "high"))
    elif electricity_pct > 20:
        tips.append(_tip("Smart Energy Habits",
                         "Use natural light during the day and set thermostats efficiently to save energy.",
                         "medium"))

    food_pct = share(food)
    if food_pct > 40:
        tips.append(_tip("Mindful Eating",
                         "Consider more plant-based meals. Even one meat-free day per week makes a difference!",
                         "high"))
    elif food_pct > 20:
        tips.append(_tip("Sustainable Food Choices",
                         "Buy local and seasonal produce to reduce food transportation emissions.",
                         "medium"))

    # same raw-unit thresholds as badges.CARBON_CUTTER_THRESHOLD
    avg_daily = weekly_total / 7
    if avg_daily > 15000:
        tips.append(_tip("High Carbon Footprint",
                         "Your emissions are above average. Focus on your biggest category first for maximum impact.",
                         "high"))
    elif avg_daily < 5000 and entries_count > 3:
        tips.append(_tip("Great Progress!",
                         "You're doing well! Keep up the sustainable habits and inspire others.",
                         "low"))

    if len(tips) < 2:
        tips.append(_tip("Daily Tip",
                         "Carry a reusable water bottle and shopping bags to reduce single-use plastic waste.",
                         "low"))

    tips.sort(key=lambda t: PRIORITY_ORDER[t["priority"]])
    return tips[:MAX_TIPS]
