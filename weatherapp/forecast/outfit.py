"""Outfit recommendation from temperature and sky condition."""

from weatherapp.models.weather import OutfitRecommendation

RAIN_CONDITIONS = frozenset({"Rain", "Drizzle", "Thunderstorm"})
SNOW_CONDITION = "Snow"

SHIRT_ICON = "👕"
COAT_ICON = "🧥"


def recommend_outfit(temperature_c: float, condition: str) -> OutfitRecommendation:
    """Pick clothing for a temperature (Celsius) and provider condition group.

    Thresholds are inclusive lower bounds: 25, 15 and 5 degrees.
    """
    is_raining = condition in RAIN_CONDITIONS
    is_snowing = condition == SNOW_CONDITION

    if temperature_c >= 25:
        items = (
            ("Light T-shirt", "Shorts", "Sandals", "Umbrella")
            if is_raining
            else ("T-shirt", "Shorts", "Sandals")
        )
        return OutfitRecommendation("Light clothing", items, SHIRT_ICON)
    if temperature_c >= 15:
        items = (
            ("Light sweater", "Jeans", "Sneakers", "Light jacket")
            if is_raining
            else ("Light sweater", "Jeans", "Sneakers")
        )
        return OutfitRecommendation("Light sweater", items, COAT_ICON)
    if temperature_c >= 5:
        items = (
            ("Warm jacket", "Long pants", "Waterproof shoes", "Umbrella")
            if is_raining or is_snowing
            else ("Jacket", "Long pants", "Closed shoes")
        )
        return OutfitRecommendation("Warm clothing", items, COAT_ICON)

    items = (
        ("Heavy winter coat", "Warm layers", "Winter boots", "Gloves", "Hat")
        if is_snowing
        else ("Heavy coat", "Warm layers", "Boots")
    )
    return OutfitRecommendation("Heavy clothing", items, COAT_ICON)
