"""
Tank View page for the Aquarium Simulator UI.

Allows users to:
  - Step the simulation or run it for a stretch of virtual time
  - Change the battery reading and watch the tick cadence switch presets
  - See the tank canvas and live KPI charts
  - Save the session's metrics as a run directory
"""

from copy import deepcopy

import streamlit as st
import pandas as pd

from aquarium.core.config import SimConfig, get_default_config
from aquarium.simulation.engine import SimulationEngine, TickStats
from aquarium.simulation.metrics import MetricsCollector
from aquarium.simulation.scheduler import ManualTimerService, PowerState, TickScheduler
from aquarium.logging.run_manager import RunManager
from aquarium.ui.components.canvas_view import render_tank
from aquarium.ui.components.charts import (
    population_over_time,
    predation_over_time,
    fish_size_mix,
)


_STATE_KEYS = ("tv_engine", "tv_timer", "tv_scheduler", "tv_metrics")


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------

def _init_session_state() -> None:
    """Initialize session state for the tank view."""
    for k in _STATE_KEYS:
        if k not in st.session_state:
            st.session_state[k] = None


def _build_session(config: SimConfig, seed: int) -> None:
    """Create a fresh engine, virtual timer and scheduler."""
    engine = SimulationEngine(config, seed=seed)
    engine.initialize()
    timer = ManualTimerService()
    metrics = MetricsCollector(config)
    scheduler = TickScheduler(engine, timer)

    def on_tick(tick: int, eng: SimulationEngine) -> None:
        if tick % config.viz.metrics_every_n_ticks == 0:
            totals = eng.get_accumulated_stats()
            eng.reset_accumulated_stats()
            stats = TickStats(**totals)
            metrics.collect(eng.world, stats, scheduler.last_interval_ms)

    engine.on_tick = on_tick
    scheduler.start()

    st.session_state.tv_engine = engine
    st.session_state.tv_timer = timer
    st.session_state.tv_scheduler = scheduler
    st.session_state.tv_metrics = metrics


# ---------------------------------------------------------------------------
# Main render
# ---------------------------------------------------------------------------

def render_tank_view() -> None:
    """Render the tank view page."""
    _init_session_state()
    st.title("🐟 Tank View")

    config = deepcopy(st.session_state.get("config", get_default_config()))

    # --- Session parameters ---
    col1, col2, col3 = st.columns(3)
    with col1:
        seed = st.number_input(
            "Seed", min_value=0, max_value=999999999,
            value=config.canvas.seed, step=1, key="tv_seed",
        )
    with col2:
        battery = st.slider("Battery %", min_value=0, max_value=100, value=100, key="tv_battery")
    with col3:
        charging = st.checkbox("Charging", value=False, key="tv_charging")

    if st.session_state.tv_engine is None:
        _build_session(config, int(seed))

    engine: SimulationEngine = st.session_state.tv_engine
    timer: ManualTimerService = st.session_state.tv_timer
    scheduler: TickScheduler = st.session_state.tv_scheduler
    metrics: MetricsCollector = st.session_state.tv_metrics

    scheduler.on_power_change(PowerState(charge_percent=int(battery), is_charging=charging))

    st.markdown("---")

    # --- Control buttons ---
    btn_col1, btn_col2, btn_col3, btn_col4 = st.columns(4)
    with btn_col1:
        step_btn = st.button("⏭️ Step", key="tv_step")
    with btn_col2:
        seconds = st.number_input("Seconds", min_value=1, max_value=600, value=10, key="tv_seconds")
        run_btn = st.button("▶️ Run", key="tv_run")
    with btn_col3:
        reset_btn = st.button("🔄 Reset", key="tv_reset")
    with btn_col4:
        save_btn = st.button("💾 Save Run", key="tv_save",
                             disabled=not metrics.get_history())

    if reset_btn:
        scheduler.stop()
        for k in _STATE_KEYS:
            st.session_state[k] = None
        st.rerun()

    if scheduler.stalled:
        scheduler.start()

    if step_btn:
        due = timer.next_due()
        if due is not None:
            timer.advance(due - timer.now_ms)

    if run_btn:
        timer.advance(int(seconds) * 1000)

    if save_btn:
        run_manager = RunManager(engine.config)
        run_manager.kpi_table.extend(metrics.get_history())
        run_manager.finalize(_summary(engine, scheduler))
        st.success(f"Saved to `{run_manager.run_dir}`")

    # --- Canvas + KPIs ---
    canvas_col, kpi_col = st.columns([3, 2])
    with canvas_col:
        st.plotly_chart(
            render_tank(engine.world, charge_percent=int(battery)),
            use_container_width=False,
        )
    with kpi_col:
        k1, k2 = st.columns(2)
        k1.metric("Tick", engine.current_tick)
        k2.metric("Interval", f"{scheduler.last_interval_ms or scheduler.select_interval()} ms")
        k3, k4 = st.columns(2)
        k3.metric("Fish", engine.active_fish_count)
        k4.metric("Shark", "hunting" if engine.shark_active else f"in {engine.world.shark.timer}")
        k5, k6 = st.columns(2)
        k5.metric("Shark visits", engine.lifecycle.shark_appearances)
        k6.metric("Scheduler", "stalled" if scheduler.stalled else "running")

    history = metrics.get_history()
    if history:
        _display_charts(pd.DataFrame(history))


# ---------------------------------------------------------------------------
# Charts and summary
# ---------------------------------------------------------------------------

def _display_charts(df: pd.DataFrame) -> None:
    st.markdown("---")
    tab_pop, tab_pred, tab_mix, tab_raw = st.tabs([
        "Population", "Predation", "Fish Mix", "Raw Data",
    ])
    with tab_pop:
        st.plotly_chart(population_over_time(df), use_container_width=True)
    with tab_pred:
        st.plotly_chart(predation_over_time(df), use_container_width=True)
    with tab_mix:
        st.plotly_chart(fish_size_mix(df), use_container_width=True)
    with tab_raw:
        st.dataframe(df, use_container_width=True)


def _summary(engine: SimulationEngine, scheduler: TickScheduler) -> dict:
    history = st.session_state.tv_metrics.get_history()
    return {
        "seed": engine.config.canvas.seed,
        "total_ticks": engine.current_tick,
        "shark_appearances": engine.lifecycle.shark_appearances,
        "final_active_fish": engine.active_fish_count,
        "total_predations": sum(row["predations"] for row in history),
        "total_shark_kills": sum(row["shark_kills"] for row in history),
        "scheduler_retries": scheduler.retries,
        "stalled": scheduler.stalled,
    }
