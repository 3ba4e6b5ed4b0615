"""
Aquarium Simulator: Streamlit Web UI

Multi-page application with sidebar navigation:
  1. Tank View - Step or run the tank, change the battery reading, watch KPIs
  2. Results   - Browse and compare saved runs
"""

import streamlit as st
from pathlib import Path

# Must be the very first Streamlit command
st.set_page_config(
    page_title="Aquarium Simulator",
    page_icon="🐠",
    layout="wide",
    initial_sidebar_state="expanded",
)


def main() -> None:
    """Main entry point for the Streamlit app."""

    # --- Sidebar navigation ---
    st.sidebar.title("🐠 Aquarium Simulator")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigation",
        options=[
            "🏠 Home",
            "🐟 Tank View",
            "📊 Results Viewer",
        ],
        index=0,
    )

    # --- Page routing ---
    if page == "🏠 Home":
        _render_home()
    elif page == "🐟 Tank View":
        from aquarium.ui.pages.tank_view import render_tank_view
        render_tank_view()
    elif page == "📊 Results Viewer":
        from aquarium.ui.pages.results_viewer import render_results_viewer
        render_results_viewer()


def _render_home() -> None:
    """Render the home page."""
    st.title("🐠 Aquarium Simulator")
    st.markdown("""
    A small animated aquarium: fish school across the tank, large fish eat
    small ones, and a shark sweeps through now and then.

    ### Quick Start

    1. **🐟 Tank View** - Step the tank tick by tick or run it for a few
       seconds of virtual time; drop the battery below 20% to see the
       low-power cadence kick in
    2. **📊 Results Viewer** - Browse saved runs and compare metrics

    ### Key Concepts

    | Concept | Description |
    |---------|-------------|
    | **Tick** | One synchronous step: spawn, move, recycle, bucket, eat |
    | **Spatial Grid** | Fish bucketed into cells so predation checks only neighbors |
    | **Bubble Burst** | Every eaten fish releases bubbles from the shared pool |
    | **Shark** | Arrives on a random timer, eats everything in its bounding box |
    | **Power Presets** | 100 ms ticks normally, 300 ms on low battery |
    """)

    st.markdown("---")
    col1, col2 = st.columns(2)
    runs_dir = Path("runs")
    run_count = len([d for d in runs_dir.iterdir() if d.is_dir()]) if runs_dir.exists() else 0
    col1.metric("📁 Past Runs", run_count)
    col2.metric("🐡 Species", 11)


if __name__ == "__main__":
    main()
