from __future__ import annotations


class _Theme:
    BACKGROUND = '#131722'
    PANEL = '#1B1F2B'
    SURFACE = '#101520'
    BORDER = '#2A2E39'
    GRID = '#2A2E39'
    AXIS = '#888888'
    TEXT = '#B2B5BE'
    TITLE = '#E5E7EB'
    MUTED = '#6B7280'

    HIGH = '#EF4444'
    MID = '#FACC15'
    LOW = '#4ADE80'
    UP = '#EF5350'
    DOWN = '#22C55E'

    CURRENT = '#38BDF8'
    HIGHLIGHT = '#FFFFFF'
    TOOLTIP_BG = '#111827'
    TOOLTIP_BORDER = '#374151'

    # Histogram bins blend from CHEAP_RGB to EXPENSIVE_RGB.
    CHEAP_RGB = (0, 255, 80)
    EXPENSIVE_RGB = (255, 0, 80)


theme = _Theme()
