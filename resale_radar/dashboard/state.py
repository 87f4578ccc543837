"""
Dashboard state and load cycle.

One DashboardState value per session, always replaced wholesale.
States: loading (initial / refresh in flight), loaded, failed.
A refresh keeps the previous insight on screen until the new cycle
settles; only a failed cycle clears it.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

import pandas as pd

from resale_radar.analytics.aggregations import category_counts, platform_counts
from resale_radar.errors import FetchError
from resale_radar.schemas import Coordinates, MarketInsight, ProvenanceReference

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to load live data. Please try again."


@dataclass(frozen=True)
class DashboardState:
    loading: bool = True
    error: Optional[str] = None
    insight: Optional[MarketInsight] = None
    sources: Tuple[ProvenanceReference, ...] = field(default_factory=tuple)

    @property
    def renderable_sources(self) -> Tuple[ProvenanceReference, ...]:
        """References that carry a web link; the rest are skipped by the view."""
        return tuple(s for s in self.sources if s.web is not None)

    @property
    def show_sources(self) -> bool:
        return not self.loading and bool(self.renderable_sources)


INITIAL_STATE = DashboardState()


class DashboardController:
    def __init__(
        self,
        fetcher: Callable,
        probe: Callable[[], Optional[Coordinates]],
    ):
        """
        fetcher: `(location) -> InsightResult`, raises FetchError
        probe: `() -> Optional[Coordinates]`, never raises
        """
        self.fetcher = fetcher
        self.probe = probe
        self.state = INITIAL_STATE
        self.cycle = 0

    def _set_state(self, state: DashboardState) -> None:
        self.state = state

    def begin_cycle(self) -> int:
        self.cycle += 1
        self._set_state(replace(self.state, loading=True, error=None))
        return self.cycle

    def _locate(self) -> Optional[Coordinates]:
        try:
            return self.probe()
        except Exception as e:
            # probes are supposed to absorb their own failures
            logger.warning(f"Location probe failed, continuing without hint: {e}")
            return None

    def run_cycle(self, cycle_id: int) -> bool:
        """
        Probe, fetch, settle. Returns False when the result was discarded
        because a newer cycle started meanwhile.
        """
        location = self._locate()

        try:
            result = self.fetcher(location)
            new_state = DashboardState(
                loading=False,
                error=None,
                insight=result.insight,
                sources=tuple(result.sources),
            )
        except FetchError:
            logger.exception("Insight fetch failed")
            new_state = DashboardState(loading=False, error=ERROR_MESSAGE, insight=None, sources=())
        except Exception:
            logger.exception("Unexpected error while loading insight")
            new_state = DashboardState(loading=False, error=ERROR_MESSAGE, insight=None, sources=())

        if cycle_id != self.cycle:
            logger.info(f"Discarding stale cycle {cycle_id} (current {self.cycle})")
            return False

        self._set_state(new_state)
        return True

    def load(self) -> bool:
        return self.run_cycle(self.begin_cycle())

    def platform_counts(self) -> pd.DataFrame:
        trends = self.state.insight.trends if self.state.insight else ()
        return platform_counts(trends)

    def category_counts(self) -> pd.DataFrame:
        trends = self.state.insight.trends if self.state.insight else ()
        return category_counts(trends)
