"""
Top-level package for the creature stats browser.

This package exposes the core architecture (domain, analysis, interaction
state, views, UI adapters). Most code should import from submodules such as:
    dex_browser.core
    dex_browser.analysis
    dex_browser.interaction
    dex_browser.views
    dex_browser.ui
"""

__all__: list[str] = []
