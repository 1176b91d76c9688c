# carbonsense/factors.py
# Emission factors, all in kg CO2e.

# per km travelled
TRAVEL_EMISSION_FACTORS = {
    "car": 0.12,
    "motorbike": 0.09,
    "bus": 0.07,
    "train": 0.04,
    "cycle": 0.0,
    "walk": 0.0,
}

# per kWh
ELECTRICITY_EMISSION_FACTOR = 0.45

# flat per entry, the diet type alone decides the food term
FOOD_EMISSION_FACTORS = {
    "vegan": 0.5,
    "veg": 0.8,
    "non-veg": 2.5,
}
DEFAULT_FOOD_TYPE = "veg"

FOOD_TYPES = tuple(FOOD_EMISSION_FACTORS)
# demo data never uses motorbike
MOCK_TRAVEL_MODES = ("car", "bus", "train", "cycle", "walk")

# Badge catalog. earth_hero has no rule in badges.BADGE_RULES and is never awarded.
BADGES = [
    {"id": "eco_starter", "name": "Eco Starter", "icon": "🌿", "description": "Logged your first carbon entry"},
    {"id": "bike_lover", "name": "Bike Lover", "icon": "🚴", "description": "Used cycle or walk for 5 days"},
    {"id": "veg_day", "name": "Veg Day", "icon": "🍃", "description": "Chose vegetarian meals for 3 days"},
    {"id": "earth_hero", "name": "Earth Hero", "icon": "🏆", "description": "Reduced weekly emissions by 20%"},
    {"id": "green_streak", "name": "Green Streak", "icon": "🔥", "description": "7 day logging streak"},
    {"id": "carbon_cutter", "name": "Carbon Cutter", "icon": "✂️", "description": "Under 5kg CO₂ for a day"},
    {"id": "transit_pro", "name": "Transit Pro", "icon": "🚌", "description": "Used public transport 10 times"},
    {"id": "solar_saver", "name": "Solar Saver", "icon": "☀️", "description": "Electricity usage under 5kWh for a week"},
]
