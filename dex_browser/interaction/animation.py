"""
Step-through animation of per-generation density curves.

The controller owns an AnimationState and is the only thing allowed to move
its index. The periodic tick source belongs to the rendering layer but is
driven by the state: it must be running exactly while the status is PLAYING,
and it tags every tick with the `run_id` it was started under so ticks from a
previous play/scrub are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from dex_browser.analysis import density
from dex_browser.config.model import DensityConfig
from dex_browser.core.dataset import RecordSet
from dex_browser.core.diagnostics import (
    INSUFFICIENT_SAMPLE,
    NO_ANIMATABLE_CATEGORIES,
    SELECTOR_INVALIDATED,
    Diagnostic,
)

logger = logging.getLogger(__name__)

LABEL_PLAY = "Play Animation"
LABEL_PAUSE = "Pause"
LABEL_REPLAY = "Replay"


class AnimationStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class AnimationState:
    index: int = 0
    status: AnimationStatus = AnimationStatus.IDLE
    run_id: int = 0

    @property
    def is_playing(self) -> bool:
        return self.status is AnimationStatus.PLAYING

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "status": self.status.value, "run_id": self.run_id}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> AnimationState:
        if not data:
            return cls()
        try:
            status = AnimationStatus(data.get("status", AnimationStatus.IDLE.value))
        except ValueError:
            status = AnimationStatus.IDLE
        return cls(
            index=int(data.get("index", 0)),
            status=status,
            run_id=int(data.get("run_id", 0)),
        )


@dataclass(frozen=True)
class AnimationStep:
    key: str
    values: Tuple[float, ...]


@dataclass(frozen=True)
class DensityFrame:
    """
    View model for one animation step.

    `curve` holds raw densities, `normalized` the same curve divided by its own
    peak. `count_scale` converts a density value into the "number of records"
    axis the chart labels (n / peak).
    """
    available: bool
    state: AnimationState
    length: int
    step_key: Optional[str] = None
    curve: Tuple[Tuple[float, float], ...] = ()
    normalized: Tuple[Tuple[float, float], ...] = ()
    peak: float = 0.0
    n_observations: int = 0
    count_scale: float = 0.0
    x_extent: Optional[Tuple[float, float]] = None
    step_keys: Tuple[str, ...] = ()
    button_label: str = LABEL_PLAY
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.curve


def build_steps(records: RecordSet) -> List[AnimationStep]:
    """
    One step per generation (numerically sorted) holding at least one valid
    observation of the density dimension.
    """
    cols = records.columns
    valid = records.valid_for(numeric=(cols.generation, cols.total)).frame
    if valid.empty:
        return []

    generations = valid[cols.generation].astype(float)
    steps: List[AnimationStep] = []
    for gen in sorted(set(generations.tolist())):
        values = valid.loc[generations == gen, cols.total].astype(float).tolist()
        if values:
            label = str(int(gen)) if float(gen).is_integer() else str(gen)
            steps.append(AnimationStep(key=label, values=tuple(values)))
    return steps


class AnimationController:
    """
    Play / pause / scrub / replay over an ordered sequence of category steps.
    """

    def __init__(
        self,
        steps: List[AnimationStep],
        grid: List[float],
        bandwidth: float,
        state: Optional[AnimationState] = None,
    ):
        self.steps = list(steps)
        self.grid = list(grid)
        self.bandwidth = bandwidth
        self._diagnostics: Tuple[Diagnostic, ...] = ()
        self._state = self._restore(state or AnimationState())

    @classmethod
    def from_records(
        cls,
        records: RecordSet,
        config: Optional[DensityConfig] = None,
        state: Optional[AnimationState] = None,
    ) -> AnimationController:
        config = config or DensityConfig()
        # Grid comes from the global extent so every step shares the x-domain
        grid = density.evaluation_grid(records.numeric_values(records.columns.total), config.grid_ticks)
        return cls(build_steps(records), grid, config.bandwidth, state)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def length(self) -> int:
        return len(self.steps)

    @property
    def available(self) -> bool:
        return self.length > 0

    @property
    def last_index(self) -> int:
        return self.length - 1

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def play(self) -> AnimationState:
        """
        Resume from the current index; at the end of the sequence replay from 0.
        """
        if not self.available or self._state.is_playing:
            return self._state

        index = self._state.index
        if self._state.status is AnimationStatus.FINISHED or index >= self.last_index:
            index = 0

        # a single step has nothing to advance to
        status = AnimationStatus.FINISHED if index >= self.last_index else AnimationStatus.PLAYING
        self._state = AnimationState(index=index, status=status, run_id=self._state.run_id + 1)
        logger.debug("Animation playing", extra={"index": index, "run_id": self._state.run_id})
        return self._state

    def pause(self) -> AnimationState:
        if not self.available or not self._state.is_playing:
            return self._state
        self._state = replace(self._state, status=AnimationStatus.PAUSED)
        return self._state

    def toggle(self) -> AnimationState:
        """Single play/pause button."""
        if self._state.is_playing:
            return self.pause()
        return self.play()

    def scrub_to(self, index: int) -> AnimationState:
        """
        Jump to `index` (clamped to [0, length - 1]). Pauses first when playing.
        """
        if not self.available:
            return self._state

        clamped = max(0, min(int(index), self.last_index))
        status = self._state.status
        if status in (AnimationStatus.PLAYING, AnimationStatus.FINISHED):
            status = AnimationStatus.PAUSED

        self._state = AnimationState(index=clamped, status=status, run_id=self._state.run_id + 1)
        return self._state

    def tick(self, run_id: Optional[int] = None) -> AnimationState:
        """
        Advance one step. Ignored unless playing under the same run.
        Reaching the last step finishes the animation.
        """
        if not self.available or not self._state.is_playing:
            return self._state
        if run_id is not None and run_id != self._state.run_id:
            logger.debug("Ignoring stale tick", extra={"tick_run": run_id, "run_id": self._state.run_id})
            return self._state

        index = self._state.index
        if index < self.last_index:
            index += 1

        status = AnimationStatus.FINISHED if index >= self.last_index else AnimationStatus.PLAYING
        self._state = replace(self._state, index=index, status=status)
        if status is AnimationStatus.FINISHED:
            logger.debug("Animation finished", extra={"index": index})
        return self._state

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------
    def frame(self) -> DensityFrame:
        state = self._state
        if not self.available:
            return DensityFrame(
                available=False,
                state=state,
                length=0,
                diagnostics=(Diagnostic(NO_ANIMATABLE_CATEGORIES, "No valid generation data."),),
            )

        step = self.steps[state.index]
        curve = density.estimate(step.values, self.grid, self.bandwidth)
        normalized, peak = density.normalize_curve(curve)

        diagnostics = self._diagnostics
        if not curve:
            diagnostics = diagnostics + (
                Diagnostic(INSUFFICIENT_SAMPLE, f"Not enough observations for {step.key}."),
            )

        n = len(step.values)
        count_scale = n / peak if (n and peak > 0) else 0.0

        return DensityFrame(
            available=True,
            state=state,
            length=self.length,
            step_key=step.key,
            curve=tuple(curve),
            normalized=tuple(normalized),
            peak=peak,
            n_observations=n,
            count_scale=count_scale,
            x_extent=(self.grid[0], self.grid[-1]) if self.grid else None,
            step_keys=tuple(s.key for s in self.steps),
            button_label=self._button_label(),
            diagnostics=diagnostics,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _button_label(self) -> str:
        if self._state.is_playing:
            return LABEL_PAUSE
        if self._state.status is AnimationStatus.FINISHED:
            return LABEL_REPLAY
        return LABEL_PLAY

    def _restore(self, state: AnimationState) -> AnimationState:
        if not self.available:
            return AnimationState(index=0, status=AnimationStatus.IDLE, run_id=state.run_id)

        if 0 <= state.index <= self.last_index:
            return state

        clamped = int(np.clip(state.index, 0, self.last_index))
        logger.warning(
            "Animation index out of range; clamping",
            extra={"index": state.index, "clamped": clamped, "length": self.length},
        )
        self._diagnostics = (
            Diagnostic(SELECTOR_INVALIDATED, f"Step {state.index} no longer exists; showing step {clamped}."),
        )
        return replace(state, index=clamped)
