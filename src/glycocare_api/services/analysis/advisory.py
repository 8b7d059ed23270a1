"""
Classification & advisory stage.

Pure functions of the stage inputs: risk tier, advice text, tips and
food swaps. The only non-determinism is the advice template choice,
which goes through an injectable selector.
"""

import random
from collections.abc import Callable, Sequence

from glycocare_api.models import RiskTier, UserProfile

# Picks one template out of a tier's pair
TemplateSelector = Callable[[Sequence[str]], str]

HIGH_PROJECTED_GLUCOSE = 180.0
HIGH_DELTA = 40.0
BORDERLINE_PROJECTED_GLUCOSE = 140.0
BORDERLINE_DELTA = 20.0

ADVICE_TEMPLATES: dict[RiskTier, tuple[str, str]] = {
    RiskTier.HIGH: (
        "This {dish} will cause a significant glucose spike (+{delta} mg/dL). "
        "Consider eating half the portion and adding more vegetables.",
        "High glucose impact detected. This meal may not be suitable given your "
        "current glucose levels. Consider a lower-carb alternative.",
    ),
    RiskTier.BORDERLINE: (
        "Moderate glucose impact (+{delta} mg/dL). Consider taking a 10-minute "
        "walk after eating to help regulate glucose.",
        "This meal is acceptable but could be improved. Try reducing the portion "
        "size by 25% or adding more fiber-rich vegetables.",
    ),
    RiskTier.NORMAL: (
        "Good choice! This meal should have a manageable impact on your glucose "
        "(+{delta} mg/dL).",
        "This is a well-balanced meal for your health goals. Maintain this "
        "portion size for optimal results.",
    ),
}

BLOOD_PRESSURE_NOTE = " Monitor sodium intake as you have blood pressure concerns."
HEART_CONDITION_NOTE = " Choose lean proteins and healthy fats for heart health."

TIPS: dict[RiskTier, tuple[str, ...]] = {
    RiskTier.HIGH: (
        "Take a 15-minute walk after eating",
        "Drink plenty of water",
        "Monitor glucose every 2 hours",
    ),
    RiskTier.BORDERLINE: (
        "Take a 10-minute walk after eating",
        "Drink water with your meal",
        "Monitor glucose after 2 hours",
    ),
    RiskTier.NORMAL: (
        "Maintain this portion size",
        "Stay hydrated throughout the day",
        "Continue making healthy choices",
    ),
}

# (keywords, swaps); every matching rule contributes
FOOD_SWAP_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ("rice", "biryani"),
        (
            "Replace white rice with brown rice or quinoa",
            "Add more vegetables to reduce rice portion",
        ),
    ),
    (
        ("bread", "roti"),
        (
            "Choose whole grain bread instead",
            "Reduce portion size by half",
        ),
    ),
    (
        ("fried",),
        (
            "Try grilled or baked version",
            "Use air fryer instead of deep frying",
        ),
    ),
)

GENERIC_SWAPS = (
    "Add more leafy greens",
    "Use healthier cooking oils",
    "Reduce salt and sugar content",
)


def classify_risk(current_glucose: float, delta: float) -> RiskTier:
    """Risk tier from projected glucose and delta; first matching rule wins."""
    projected = current_glucose + delta
    if projected >= HIGH_PROJECTED_GLUCOSE or delta >= HIGH_DELTA:
        return RiskTier.HIGH
    if projected >= BORDERLINE_PROJECTED_GLUCOSE or delta >= BORDERLINE_DELTA:
        return RiskTier.BORDERLINE
    return RiskTier.NORMAL


def _format_delta(delta: float) -> str:
    # 15.0 -> "15", 22.5 -> "22.5"
    return f"{delta:g}"


def build_advice(
    tier: RiskTier,
    dish: str,
    delta: float,
    profile: UserProfile,
    selector: TemplateSelector = random.choice,
) -> str:
    """
    Advice text for a meal.

    Args:
        tier: Risk tier of the meal
        dish: Dish label
        delta: Predicted glucose delta
        profile: User profile, for the condition notes
        selector: Picks one template of the tier's pair

    Returns:
        Templated advice with blood-pressure and heart notes appended
    """
    template = selector(ADVICE_TEMPLATES[tier])
    advice = template.format(dish=dish, delta=_format_delta(delta))

    if profile.has_blood_pressure_condition:
        advice += BLOOD_PRESSURE_NOTE
    if profile.has_heart_condition:
        advice += HEART_CONDITION_NOTE

    return advice


def generate_tips(tier: RiskTier) -> list[str]:
    """Three fixed tips for the tier."""
    return list(TIPS[tier])


def generate_food_swaps(dish: str) -> list[str]:
    """Healthier alternatives for the dish; falls back to generic swaps."""
    dish_lower = dish.lower()
    swaps: list[str] = []

    for keywords, rule_swaps in FOOD_SWAP_RULES:
        if any(keyword in dish_lower for keyword in keywords):
            swaps.extend(rule_swaps)

    return swaps or list(GENERIC_SWAPS)
