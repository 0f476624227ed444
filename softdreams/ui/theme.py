"""Theme configuration for the SoftDreams UI.

Centralized colors, styles, and visual constants.
"""

# ========== Primary Colors ==========
# Soft night-sky palette
COLORS = {
    "primary": "#7E6BC4",
    "primary_dark": "#5A4A9A",
    "primary_light": "#E3DDF7",
    "secondary": "#F2A7C3",
    "secondary_light": "#FBE4EE",
    "success": "#7BC8A4",
    "warning": "#F6C177",
    "error": "#E57373",
    "info": "#8EC5E8",
    "background": "#F7F5FC",
    "surface": "#FFFFFF",
    "text_primary": "#2E2A47",
    "text_secondary": "#6E6A86",
    "favorite": "#F48FB1",
}

DARK_COLORS = {
    "background": "#1B1832",
    "surface": "#27233F",
    "text_primary": "#ECEAF6",
    "text_secondary": "#A9A5C2",
}

# ========== Baby Stage Icons ==========
# Material Design icon names
STAGE_ICONS = {
    "pregnancy": "pregnant_woman",
    "newborn": "child_friendly",
    "infant": "child_care",
    "toddler": "toys",
    "preschooler": "school",
}

# Gradient used behind story cards
CARD_GRADIENT = "linear-gradient(135deg, #FBE4EE 0%, #E3DDF7 100%)"
DARK_CARD_GRADIENT = "linear-gradient(135deg, #3A3358 0%, #27233F 100%)"


def get_stage_icon(stage: str) -> str:
    """Return the Material icon for a baby stage, or a generic face icon."""
    return STAGE_ICONS.get(stage.lower(), "face")


def get_background_class(dark_mode: bool = False) -> str:
    """Get the body background class for the current mode."""
    return "bg-slate-900" if dark_mode else "bg-violet-50"


def get_card_style(dark_mode: bool = False) -> str:
    """Inline style for the soft card background."""
    gradient = DARK_CARD_GRADIENT if dark_mode else CARD_GRADIENT
    return f"background: {gradient}; border-radius: 16px;"


def get_text_class(variant: str = "primary") -> str:
    """Tailwind text classes for a text variant.

    Args:
        variant: One of "primary", "secondary" or "muted".
    """
    classes = {
        "primary": "text-gray-900 dark:text-gray-100",
        "secondary": "text-gray-600 dark:text-gray-300",
        "muted": "text-gray-400 dark:text-gray-500",
    }
    return classes.get(variant, classes["primary"])
