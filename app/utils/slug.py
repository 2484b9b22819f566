import re
from typing import Optional

def generate_slug(name: str, location: Optional[str] = None) -> str:
    """
    Build a URL slug for a studio, e.g. "Ink & Iron", "Portland, OR" -> "ink-iron-portland-or"
    """
    base = f"{name}-{location}" if location else name
    slug = base.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")
