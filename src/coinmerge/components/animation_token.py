from dataclasses import dataclass
from typing import Any

@dataclass(slots=True)
class AnimationToken:
    """Groups animation entities started by one EVENT_ANIMATION_START.

    item is the payload entry the entity was created for; completion events hand it back.
    """
    kind: str
    token: Any = None
    item: Any = None
