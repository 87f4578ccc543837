import logging

import streamlit as st

from resale_radar.config import load_settings
from resale_radar.dashboard.state import DashboardController
from resale_radar.data_ingestion import location_probe
from resale_radar.llm.pipelines.trend_insights import TrendInsightsPipeline


@st.cache_resource
def get_settings():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return load_settings()


def get_controller() -> DashboardController:
    """One controller per browser session; the first call starts the initial load cycle."""
    if "controller" not in st.session_state:
        settings = get_settings()
        controller = DashboardController(
            fetcher=TrendInsightsPipeline(settings=settings),
            probe=lambda: location_probe.acquire(settings),
        )
        st.session_state["controller"] = controller
        st.session_state["pending_cycle"] = controller.begin_cycle()
    return st.session_state["controller"]


def request_refresh(controller: DashboardController) -> None:
    st.session_state["pending_cycle"] = controller.begin_cycle()


def run_pending_cycle(controller: DashboardController) -> bool:
    cycle_id = st.session_state.get("pending_cycle")
    if cycle_id is None:
        return False
    st.session_state["pending_cycle"] = None
    controller.run_cycle(cycle_id)
    return True
