from __future__ import annotations

__all__ = ["IDs"]


class IDs:
    class Store:
        NAVIGATION_STATE = "navigation-state"
        ANIMATION_STATE = "animation-state"
        ANIMATION_RUN = "animation-run"
        SELECTION_STATE = "selection-state"
        ARTWORK_REQUEST = "artwork-request"
        ARTWORK_RESULT = "artwork-result"

    class Control:
        PAGE_TABS = "page-tabs"

        # Ridgeline / animation
        RIDGELINE_GRAPH = "ridgeline-graph"
        ANIMATION_BUTTON = "animation-button"
        ANIMATION_SLIDER = "animation-slider"
        ANIMATION_INTERVAL = "animation-interval"
        ANIMATION_LABEL = "animation-label"

        # Stacked bar / navigation
        STACKED_GRAPH = "stacked-graph"
        STACKED_BACK_BTN = "stacked-back-btn"
        STACKED_SHOW_ALL_BTN = "stacked-show-all-btn"
        STACKED_STATUS = "stacked-status"

        # Parallel coordinates / selection
        PARCOORDS_GRAPH = "parcoords-graph"
        CATEGORY_CHECKLIST = "category-checklist"
        SELECT_ALL_BTN = "select-all-btn"
        DESELECT_ALL_BTN = "deselect-all-btn"
        PARCOORDS_STATUS = "parcoords-status"
        FOCUS_MODAL = "focus-modal"
        FOCUS_HEADER = "focus-header"
        FOCUS_BODY = "focus-body"
        FOCUS_IMAGE = "focus-image"
        FOCUS_CLOSE_BTN = "focus-close-btn"
