from dataclasses import dataclass

@dataclass(slots=True)
class DelayTimer:
    linear: float = 0.0
