from typing import Optional

def parse_id(value) -> Optional[int]:
    """Path ids arrive as text; anything that is not an integer matches nothing."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
