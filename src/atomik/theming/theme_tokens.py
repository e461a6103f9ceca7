from __future__ import annotations

import platform

from atomik.chem.elements import ElementCategory


def _default_font_family() -> str:
    if platform.system().lower().startswith("win"):
        return "Segoe UI"
    if platform.system().lower().startswith("darwin"):
        return "San Francisco"
    return "Inter"


THEME_TOKENS: dict[str, dict] = {
    "Atomik Dark": {
        "meta": {"name": "Atomik Dark", "mode": "dark"},
        "colors": {
            "bg": "#020617",
            "surface": "#0f172a",
            "surfaceAlt": "#1e293b",
            "text": "#e2e8f0",
            "textMuted": "#94a3b8",
            "border": "#334155",
            "accent": "#818cf8",
            "accentHover": "#6366f1",
            "focusRing": "#22d3ee",
            "sceneBg": "#0f172a",
            "sceneBgEdge": "#020617",
        },
        "radii": {"sm": 6, "md": 12, "lg": 20},
        "spacing": {"xs": 4, "sm": 8, "md": 12, "lg": 16},
        "font": {"family": _default_font_family(), "baseSize": 10, "titleSize": 20, "monoFamily": "Consolas"},
    },
    "Atomik Light": {
        "meta": {"name": "Atomik Light", "mode": "light"},
        "colors": {
            "bg": "#f5f7fb",
            "surface": "#ffffff",
            "surfaceAlt": "#eef2f7",
            "text": "#0f172a",
            "textMuted": "#4b5563",
            "border": "#cbd5e1",
            "accent": "#4f46e5",
            "accentHover": "#4338ca",
            "focusRing": "#0ea5e9",
            "sceneBg": "#1e293b",
            "sceneBgEdge": "#0f172a",
        },
        "radii": {"sm": 6, "md": 12, "lg": 20},
        "spacing": {"xs": 4, "sm": 8, "md": 12, "lg": 16},
        "font": {"family": _default_font_family(), "baseSize": 10, "titleSize": 20, "monoFamily": "Consolas"},
    },
}

# Tile background per category; text color is picked for contrast.
CATEGORY_COLORS: dict[ElementCategory, str] = {
    ElementCategory.ALKALI_METAL: "#ef4444",
    ElementCategory.ALKALINE_EARTH_METAL: "#f97316",
    ElementCategory.TRANSITION_METAL: "#eab308",
    ElementCategory.POST_TRANSITION_METAL: "#22c55e",
    ElementCategory.METALLOID: "#14b8a6",
    ElementCategory.REACTIVE_NONMETAL: "#3b82f6",
    ElementCategory.NOBLE_GAS: "#a855f7",
    ElementCategory.LANTHANIDE: "#ec4899",
    ElementCategory.ACTINIDE: "#f43f5e",
    ElementCategory.UNKNOWN: "#64748b",
}

# Gradient stops (centre, edge) and outline for each particle.
PARTICLE_COLORS: dict[str, dict[str, str]] = {
    "proton": {"inner": "#ef4444", "outer": "#991b1b", "stroke": "#7f1d1d"},
    "neutron": {"inner": "#94a3b8", "outer": "#475569", "stroke": "#1e293b"},
    "electron": {"inner": "#60a5fa", "outer": "#2563eb", "glow": "#3b82f6"},
    "orbit": {"stroke": "#475569"},
}


def get_theme_tokens(name: str) -> dict:
    return THEME_TOKENS.get(name, THEME_TOKENS["Atomik Dark"])


def category_color(category: ElementCategory) -> str:
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[ElementCategory.UNKNOWN])
