"""
Interaction state holders: drill-down navigation, density animation and
cross-filter selection. Each owns its state snapshot exclusively and returns
a freshly recomputed view model after every operation.
"""

from .animation import AnimationController, AnimationState, AnimationStatus, DensityFrame
from .artwork import ArtworkClient, ArtworkTicket, artwork_key
from .navigation import NavigationLevel, NavigationState, NavigationStateMachine, NavigationView
from .selection import SelectionCoordinator, SelectionState, SelectionView

__all__ = [
    "AnimationController",
    "AnimationState",
    "AnimationStatus",
    "ArtworkClient",
    "ArtworkTicket",
    "DensityFrame",
    "NavigationLevel",
    "NavigationState",
    "NavigationStateMachine",
    "NavigationView",
    "SelectionCoordinator",
    "SelectionState",
    "SelectionView",
    "artwork_key",
]
