from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Singleton score ledger; only GridEngine mutates it."""
    value: int = 0
