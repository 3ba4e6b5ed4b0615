"""
Results Viewer page for the Aquarium Simulator UI.

Allows users to:
  - Browse past runs from the runs/ directory
  - View sampled tick metrics (line charts)
  - Compare multiple runs side-by-side
  - Export data
"""

import json
from pathlib import Path

import streamlit as st
import pandas as pd

from aquarium.logging.kpi_table import load_kpi_table
from aquarium.ui.components.charts import population_over_time, predation_over_time


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _discover_runs(base_dir: str = "runs") -> list[dict]:
    """Discover all past runs in the output directory."""
    runs_path = Path(base_dir)
    if not runs_path.exists():
        return []

    runs = []
    for entry in sorted(runs_path.iterdir(), reverse=True):
        if not entry.is_dir():
            continue

        run_info = {
            "name": entry.name,
            "path": entry,
            "has_metrics": (entry / "metrics.csv").exists(),
            "has_config": (entry / "config.json").exists(),
            "has_summary": (entry / "summary.json").exists(),
            "summary": {},
        }

        if run_info["has_summary"]:
            try:
                with open(entry / "summary.json", "r", encoding="utf-8") as f:
                    run_info["summary"] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                st.warning(f"Unreadable summary in {entry.name}: {e}")

        runs.append(run_info)

    return runs


def _load_metrics_csv(path: Path) -> pd.DataFrame:
    """Load a metrics CSV file into a DataFrame."""
    try:
        return load_kpi_table(path)
    except (OSError, ValueError, pd.errors.EmptyDataError) as e:
        st.warning(f"Could not read {path}: {e}")
        return pd.DataFrame()


# ---------------------------------------------------------------------------
# Main render
# ---------------------------------------------------------------------------

def render_results_viewer() -> None:
    """Render the results viewer page."""
    st.title("📊 Results Viewer")

    base_dir = st.text_input("Output directory", value="runs", key="rv_basedir")
    runs = _discover_runs(base_dir)

    if not runs:
        st.info("No runs found. Run a simulation first!")
        return

    st.markdown(f"Found **{len(runs)}** runs in `{base_dir}/`")

    tab_browse, tab_compare = st.tabs(["📁 Browse Runs", "📊 Compare Runs"])

    with tab_browse:
        _render_browse(runs)

    with tab_compare:
        _render_compare(runs)


# ---------------------------------------------------------------------------
# Browse tab
# ---------------------------------------------------------------------------

def _render_browse(runs: list[dict]) -> None:
    """Browse individual runs."""
    run_names = [r["name"] for r in runs]
    selected_name = st.selectbox("Select run", options=run_names, key="rv_run_sel")

    selected_run = next((r for r in runs if r["name"] == selected_name), None)
    if selected_run is None:
        return

    run_path = selected_run["path"]

    st.markdown(f"### Run: `{selected_name}`")
    summary = selected_run["summary"]
    if summary:
        scol1, scol2, scol3, scol4 = st.columns(4)
        scol1.metric("Ticks", summary.get("total_ticks", "N/A"))
        scol2.metric("Predations", summary.get("total_predations", "N/A"))
        scol3.metric("Shark Visits", summary.get("shark_appearances", "N/A"))
        scol4.metric("Final Fish", summary.get("final_active_fish", "N/A"))

    if selected_run["has_config"]:
        with st.expander("⚙️ Configuration"):
            with open(run_path / "config.json", "r", encoding="utf-8") as f:
                st.json(json.load(f))

    if not selected_run["has_metrics"]:
        return

    st.markdown("---")
    st.subheader("📈 Sampled Tick Metrics")

    df = _load_metrics_csv(run_path / "metrics.csv")
    if df.empty:
        return

    tab_pop, tab_pred, tab_custom = st.tabs(["Population", "Predation", "Custom"])
    with tab_pop:
        st.plotly_chart(population_over_time(df), use_container_width=True)
    with tab_pred:
        st.plotly_chart(predation_over_time(df), use_container_width=True)
    with tab_custom:
        available = [c for c in df.columns if c != "tick"]
        selected_kpis = st.multiselect(
            "Select KPIs to plot", options=available,
            default=[], key="rv_custom_kpi",
        )
        if selected_kpis:
            st.line_chart(df.set_index("tick")[selected_kpis], use_container_width=True)

    with st.expander("📋 Raw Data Table"):
        st.dataframe(df, use_container_width=True)

    st.download_button(
        "⬇️ Download CSV",
        data=df.to_csv(index=False),
        file_name=f"{selected_name}_metrics.csv",
        mime="text/csv",
        key="rv_dl_csv",
    )


# ---------------------------------------------------------------------------
# Compare tab
# ---------------------------------------------------------------------------

def _render_compare(runs: list[dict]) -> None:
    """Compare multiple runs side by side."""
    runs_with_metrics = [r for r in runs if r["has_metrics"]]
    if len(runs_with_metrics) < 2:
        st.info("Need at least 2 runs with metrics to compare.")
        return

    run_names = [r["name"] for r in runs_with_metrics]
    selected = st.multiselect(
        "Select runs to compare", options=run_names,
        default=run_names[:2], key="rv_cmp_sel",
    )
    if len(selected) < 2:
        st.info("Select at least 2 runs to compare.")
        return

    dfs = {}
    for name in selected:
        run = next(r for r in runs_with_metrics if r["name"] == name)
        df = _load_metrics_csv(run["path"] / "metrics.csv")
        if not df.empty:
            dfs[name] = df

    if len(dfs) < 2:
        st.warning("Could not load metrics for enough runs.")
        return

    common_cols = sorted(
        set.intersection(*(set(df.columns) for df in dfs.values())) - {"tick"}
    )
    kpi_to_compare = st.selectbox(
        "KPI to compare", options=common_cols,
        index=common_cols.index("fish_active") if "fish_active" in common_cols else 0,
        key="rv_cmp_kpi",
    )

    chart_data = pd.DataFrame({
        name: df[kpi_to_compare].reset_index(drop=True) for name, df in dfs.items()
    })
    st.line_chart(chart_data, use_container_width=True)

    st.markdown("### Summary Comparison")
    rows = []
    for name in selected:
        run = next(r for r in runs_with_metrics if r["name"] == name)
        s = run["summary"]
        rows.append({
            "Run": name,
            "Seed": s.get("seed", "N/A"),
            "Ticks": s.get("total_ticks", "N/A"),
            "Predations": s.get("total_predations", "N/A"),
            "Shark Kills": s.get("total_shark_kills", "N/A"),
            "Final Fish": s.get("final_active_fish", "N/A"),
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True)
