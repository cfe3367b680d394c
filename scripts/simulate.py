"""Run a course headlessly from the command line.

Usage:
    python scripts/simulate.py courses/sample_course.json
    python scripts/simulate.py course.json --mode playback --speed 2
    python scripts/simulate.py course.json --mode run --signal 1.5:right --signal 4:go_on
    python scripts/simulate.py course.json --mode run --auto      # always signal correctly
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from hoopers_sim.config import Settings, clamp_dt  # noqa: E402
from hoopers_sim.course.loader import load_course  # noqa: E402
from hoopers_sim.course.models import EQUIPMENT_LABELS, RING_PRESETS  # noqa: E402
from hoopers_sim.playback.driver import PlaybackDriver  # noqa: E402
from hoopers_sim.training.engine import RunStateMachine  # noqa: E402
from hoopers_sim.training.models import Signal  # noqa: E402


def _parse_signal(text: str) -> tuple[float, Signal]:
    """Parse ``"<seconds>:<signal>"``."""
    at, _, name = text.partition(":")
    try:
        return float(at), Signal(name.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"bad signal {text!r}: expected e.g. 2.5:right") from exc


def _describe_course(course) -> None:
    size = (course.ring_width, course.ring_height)
    preset = next((name for name, dims in RING_PRESETS.items() if dims == size), "custom")
    counts: dict[str, int] = {}
    for eq in course.equipment:
        label = EQUIPMENT_LABELS[eq.type]
        counts[label] = counts.get(label, 0) + 1
    kit = ", ".join(f"{n} x {label}" for label, n in counts.items())
    print(f"{course.name}: {size[0]:g} x {size[1]:g} m ring ({preset}), {kit or 'no equipment'}")


def _run_playback(course, speed: float, dt: float, max_s: float) -> None:
    driver = PlaybackDriver(course)
    driver.set_speed(speed)
    print(f"Path length {driver.path.sampler.total_length:.1f} px, duration {driver.state.duration:.2f} s")
    driver.toggle_play()
    t = 0.0
    last_pct = -1
    while driver.state.playing and t < max_s:
        frame = driver.tick(dt)
        t += dt
        pct = int(frame.progress * 10)
        if pct != last_pct:
            last_pct = pct
            print(
                f"  {frame.progress:5.0%}  dog=({frame.dog_position.x:7.1f},{frame.dog_position.y:7.1f})"
                f"  handler=({frame.handler_position.x:7.1f},{frame.handler_position.y:7.1f})",
                flush=True,
            )
    print(f"Playback done after {t:.2f} s of real time.")


def _run_training(course, signals: list[tuple[float, Signal]], auto: bool, dt: float, max_s: float) -> int:
    machine = RunStateMachine(course)
    print(f"Path length {machine.path_length:.1f} m, {len(machine.decision_points)} decision point(s)")
    for dp in machine.decision_points:
        print(
            f"  {machine.geometry.waypoint_labels[dp.obstacle_index]:<14} {dp.correct_signal.value:<6}"
            f" window {dp.window_start:5.1f}-{dp.window_end:5.1f} m"
        )

    pending = sorted(signals, key=lambda s: s[0])
    machine.start()
    last_state = None
    while machine.state.running and machine.state.elapsed_time < max_s:
        while pending and pending[0][0] <= machine.state.elapsed_time:
            machine.send_signal(pending.pop(0)[1])
        if auto and machine.state.current_signal is None and machine.expected_signal is not None:
            machine.send_signal(machine.expected_signal)

        frame = machine.tick(dt)
        if frame.dog_state is not last_state:
            last_state = frame.dog_state
            print(f"  {frame.elapsed_time:6.2f}s  {frame.distance:6.1f} m  {frame.dog_state.value}", flush=True)

    result = machine.result()
    if result is None:
        print("Run did not finish.")
        return 1
    print(f"{'Clean run!' if result.clean else 'Run complete'}  time {result.formatted_time}  faults {result.faults}")
    return 0


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Hoopers course simulator")
    ap.add_argument("course", help="Course JSON file")
    ap.add_argument("--mode", choices=("playback", "run"), default="run")
    ap.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier")
    ap.add_argument("--fps", type=float, default=settings.fps, help="Simulation frame rate")
    ap.add_argument(
        "--signal",
        type=_parse_signal,
        action="append",
        default=[],
        help="Timed handler signal, e.g. 2.5:right (repeatable)",
    )
    ap.add_argument("--auto", action="store_true", help="Give the expected signal at every obstacle")
    args = ap.parse_args()

    try:
        course = load_course(args.course)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(2)

    _describe_course(course)
    dt = clamp_dt(1.0 / args.fps, settings.max_dt)
    if args.mode == "playback":
        _run_playback(course, args.speed, dt, settings.max_run_seconds)
    else:
        sys.exit(_run_training(course, args.signal, args.auto, dt, settings.max_run_seconds))


if __name__ == "__main__":
    main()
