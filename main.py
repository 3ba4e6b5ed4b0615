"""
Aquarium Simulator: CLI Entry Point

Usage:
    python main.py --ticks 1000 --config config/default_config.json
    python main.py --realtime --seconds 30
    python main.py --ui
"""

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Aquarium Simulator: Animated tank with predation and a roaming shark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --ui                                   Launch Streamlit UI
  python main.py --ticks 2000 --seed 7                  Headless run on a virtual clock
  python main.py --ticks 2000 --battery 15              Same, low-power cadence
  python main.py --realtime --seconds 30                Real-time run on an asyncio loop
        """,
    )

    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Headless run: number of ticks to simulate",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Drive the engine with real timers on an asyncio event loop",
    )
    parser.add_argument(
        "--seconds",
        type=float,
        default=10.0,
        help="Wall-clock duration of a --realtime run (default: 10)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to JSON config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--ui",
        action="store_true",
        help="Launch Streamlit web UI (ignores the other options)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override random seed (overrides config value)",
    )
    parser.add_argument(
        "--battery",
        type=int,
        default=100,
        help="Battery charge percent reported to the scheduler (default: 100)",
    )
    parser.add_argument(
        "--charging",
        action="store_true",
        help="Report the battery as charging",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Override output directory",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    return parser.parse_args()


def launch_ui() -> None:
    """Launch the Streamlit web UI."""
    import os
    import subprocess
    root = Path(__file__).parent
    ui_path = root / "aquarium" / "ui" / "app.py"
    if not ui_path.exists():
        print(f"Error: UI app not found at {ui_path}")
        sys.exit(1)
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root), env.get("PYTHONPATH")]))
    subprocess.run(
        [
            sys.executable, "-m", "streamlit", "run", str(ui_path),
            "--server.port=8501",
            "--server.headless=true",
            "--browser.gatherUsageStats=false",
        ],
        check=True,
        env=env,
    )


# ---------------------------------------------------------------------------
# Shared setup
# ---------------------------------------------------------------------------

def _prepare(config_path, seed_override, mode, output_dir):
    from aquarium.core.config import load_config, get_default_config
    from aquarium.simulation.engine import SimulationEngine, TickStats
    from aquarium.simulation.metrics import MetricsCollector
    from aquarium.logging.run_manager import RunManager

    config = load_config(config_path) if config_path else get_default_config()
    if seed_override is not None:
        config.canvas.seed = seed_override
    config.viz.mode = mode
    if output_dir is not None:
        config.viz.output_dir = output_dir

    engine = SimulationEngine(config, seed=config.canvas.seed)
    engine.initialize()
    metrics = MetricsCollector(config)
    run_manager = RunManager(config)
    every = config.viz.metrics_every_n_ticks

    def on_tick(tick: int, eng: SimulationEngine) -> None:
        if tick % every != 0:
            return
        stats = TickStats(**eng.get_accumulated_stats())
        eng.reset_accumulated_stats()
        kpis = metrics.collect(eng.world, stats, interval_ms=on_tick.interval_ms)
        run_manager.log_tick(kpis)
        if tick % (every * 10) == 0:
            print(
                f"  Tick {tick:6d} | Fish: {kpis['fish_active']:3d} | "
                f"Bubbles: {kpis['bubbles_active']:3d} | "
                f"Shark: {'on' if kpis['shark_active'] else 'off'}"
            )

    on_tick.interval_ms = None
    engine.on_tick = on_tick
    return config, engine, metrics, run_manager, on_tick


def _print_header(title: str, config, config_path, power) -> None:
    print(f"[Aquarium Simulator] {title}")
    print(f"  Config: {config_path or '(defaults)'}")
    print(f"  Canvas: {config.canvas.width}x{config.canvas.height}")
    print(f"  Fish: {config.population.fish} ({config.population.large_fish_pct}% large)")
    print(f"  Seed: {config.canvas.seed}")
    print(f"  Battery: {power.charge_percent}%{' (charging)' if power.is_charging else ''}")
    print(f"  Output: {config.viz.output_dir}")
    print()


def _finish(engine, metrics, scheduler, run_manager, elapsed: float) -> None:
    history = metrics.get_history()
    tail = engine.get_accumulated_stats()  # ticks since the last sampled row
    summary = {
        "seed": engine.config.canvas.seed,
        "total_ticks": engine.current_tick,
        "total_predations": sum(r["predations"] for r in history) + tail["predations"],
        "total_shark_kills": sum(r["shark_kills"] for r in history) + tail["shark_kills"],
        "shark_appearances": engine.lifecycle.shark_appearances,
        "final_active_fish": engine.active_fish_count,
        "interval_ms": scheduler.last_interval_ms,
        "scheduler_retries": scheduler.retries,
        "stalled": scheduler.stalled,
        "elapsed_seconds": round(elapsed, 2),
    }

    print()
    print("[Result]")
    print(f"  Ticks: {summary['total_ticks']}")
    print(f"  Predations: {summary['total_predations']} (shark: {summary['total_shark_kills']})")
    print(f"  Shark appearances: {summary['shark_appearances']}")
    print(f"  Final fish: {summary['final_active_fish']}")
    print(f"  Interval: {summary['interval_ms']} ms")
    if scheduler.stalled:
        print("  Scheduler stalled (timer registration failed)")
    print(f"  Elapsed: {elapsed:.1f}s")

    run_manager.finalize(summary)
    print(f"  Output saved to: {run_manager.run_dir}")


# ---------------------------------------------------------------------------
# Run modes
# ---------------------------------------------------------------------------

def run_headless(config_path: str | None, ticks: int, seed_override: int | None = None,
                 power=None, output_dir: str | None = None) -> None:
    """Run a fixed number of ticks on a virtual clock."""
    from aquarium.simulation.scheduler import ManualTimerService, PowerState, TickScheduler

    power = power or PowerState()
    config, engine, metrics, run_manager, on_tick = _prepare(
        config_path, seed_override, "headless", output_dir,
    )
    _print_header(f"Headless run ({ticks} ticks)", config, config_path, power)

    timer = ManualTimerService()
    scheduler = TickScheduler(engine, timer, power=power)
    start_time = time.time()
    scheduler.start()

    while engine.current_tick < ticks and scheduler.armed:
        on_tick.interval_ms = scheduler.last_interval_ms
        due = timer.next_due()
        timer.advance(due - timer.now_ms)

    scheduler.stop()
    _finish(engine, metrics, scheduler, run_manager, time.time() - start_time)


def run_realtime(config_path: str | None, seconds: float, seed_override: int | None = None,
                 power=None, output_dir: str | None = None) -> None:
    """Run the engine against wall-clock timers for a fixed duration."""
    from aquarium.simulation.scheduler import AsyncioTimerService, PowerState, TickScheduler

    power = power or PowerState()
    config, engine, metrics, run_manager, on_tick = _prepare(
        config_path, seed_override, "realtime", output_dir,
    )
    _print_header(f"Real-time run ({seconds:g}s)", config, config_path, power)

    async def _drive() -> TickScheduler:
        scheduler = TickScheduler(engine, AsyncioTimerService(), power=power)
        on_tick.interval_ms = scheduler.select_interval()
        scheduler.start()
        try:
            await asyncio.sleep(seconds)
        finally:
            scheduler.stop()
        return scheduler

    start_time = time.time()
    scheduler = asyncio.run(_drive())
    _finish(engine, metrics, scheduler, run_manager, time.time() - start_time)


def main() -> None:
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.ui:
        launch_ui()
        return

    from aquarium.simulation.scheduler import PowerState
    power = PowerState(charge_percent=args.battery, is_charging=args.charging)

    if args.realtime:
        run_realtime(args.config, args.seconds, seed_override=args.seed,
                     power=power, output_dir=args.output)
    elif args.ticks is not None:
        run_headless(args.config, args.ticks, seed_override=args.seed,
                     power=power, output_dir=args.output)
    else:
        print("Error: Specify --ticks N, --realtime or --ui.")
        print("Run with --help for usage information.")
        sys.exit(1)


if __name__ == "__main__":
    main()
