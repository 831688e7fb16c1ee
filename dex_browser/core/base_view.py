from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import plotly.graph_objs as go

from dex_browser.config.model import GlobalConfig
from .dataset import RecordSet

logger = logging.getLogger(__name__)


class BaseView(ABC):
    """
    Abstract base class for all chart views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - turn the current interaction state into a view model
    - implement 'render_figure' - draw the view model using Plotly

    compute_data never mutates the RecordSet; render_figure never touches state.
    """

    id: str = None
    label: str = None

    def __init__(self, records: RecordSet, config: Optional[GlobalConfig] = None):
        self.records = records
        self.config = config or GlobalConfig(ui_title="", data_file=None)

    @abstractmethod
    def compute_data(self, state: Any) -> Any:
        """
        Compute the view model for the given state snapshot
        :param state: the state snapshot owned by this view's controller
        :return: a frozen view model
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, state: Any = None) -> go.Figure:
        """
        Render the figure for a view model
        :param data: the view model returned by compute_data()
        :param state: optional state snapshot, for views that need it
        :return: the Plotly figure
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def timed_compute(self, state: Any) -> Any:
        """compute_data with a debug timing log."""
        start = time.perf_counter()
        data = self.compute_data(state)
        logger.debug(
            "compute_data",
            extra={"view_id": self.id, "elapsed_ms": round((time.perf_counter() - start) * 1000, 2)},
        )
        return data

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
