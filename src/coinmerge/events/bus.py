from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                        # payload: dt=float
EVENT_GRID_TEARDOWN = "grid_teardown"      # payload: None


# ============================================================================
# INPUT
# ============================================================================
# Raw window events, translated to grid cells by InputSystem.
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button
EVENT_MOUSE_DRAG = "mouse_drag"            # payload: x, y
EVENT_MOUSE_RELEASE = "mouse_release"      # payload: x, y, button
# Grid-level pointer events consumed by the grid engine.
EVENT_POINTER_DOWN = "pointer_down"        # payload: row, col
EVENT_POINTER_MOVE = "pointer_move"        # payload: row|None, col|None
EVENT_POINTER_UP = "pointer_up"            # payload: None
EVENT_TAP = "tap"                          # payload: row, col


# ============================================================================
# SELECTION & MERGE
# ============================================================================
EVENT_TILE_HIGHLIGHT = "tile_highlight"            # payload: row, col, on=bool
EVENT_SELECTION_CHANGED = "selection_changed"      # payload: path=list[(r,c)]
EVENT_MERGE_ACCEPTED = "merge_accepted"            # payload: positions=[(r,c),...], target=(r,c), value=int, source=str
EVENT_MERGE_REJECTED = "merge_rejected"            # payload: positions=[(r,c),...], target=(r,c), reason=str
EVENT_JACKPOT_COLLECTED = "jackpot_collected"      # payload: row, col, value=int


# ============================================================================
# BOARD & COLLAPSE
# ============================================================================
EVENT_CELL_VALUE_CHANGED = "cell_value_changed"    # payload: row, col, value=int|None
EVENT_COLLAPSE_STARTED = "collapse_started"        # payload: ops=list[SettleOp]
EVENT_COLLAPSE_COMPLETE = "collapse_complete"      # payload: settled=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, groups=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, capped=bool
EVENT_INTERACTION_CHANGED = "interaction_changed"  # payload: previous=InteractionPhase, phase=InteractionPhase


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"      # payload: score=int, delta=int, reason=str


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list, token=Any, duration=float|None
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list, token=Any
EVENT_ANIMATION_FAILED = "animation_failed"        # payload: kind=str, items=list, token=Any, reason=str
