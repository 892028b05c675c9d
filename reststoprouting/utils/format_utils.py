def format_km(km: float) -> str:
    """Format a distance for display, e.g. 0.8 -> '0.8 km', 5.0 -> '5 km'"""
    value = round(max(0.0, km), 1)
    return f"{value:g} km"


def format_duration(seconds: float) -> str:
    """Converts seconds into a readable 'X h Y min' / 'Y min' string."""
    minutes = int(round(max(0.0, seconds) / 60))
    hours, minutes = divmod(minutes, 60)
    if hours and minutes:
        return f"{hours} h {minutes} min"
    if hours:
        return f"{hours} h"
    return f"{minutes} min"
