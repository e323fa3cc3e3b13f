"""
Hot-path profiling for the scanner, parser, decoder and encoder.

Enabled by setting ``TOON_PROFILE`` in the environment (and not running
under ``python -O``). When disabled, ``ProfileContext`` is a no-op.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "TOON_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during transcoding."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars

    @property
    def mean_time_ns(self) -> float:
        if not self.call_count:
            return 0.0
        return self.total_time_ns / self.call_count


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


def format_hot_path_report(stats: dict[str, HotPathStats]) -> str:
    """
    Renders collected statistics as a table, slowest total first.

    Used by the benchmark suite to print where transcoding time goes.
    """
    if not stats:
        return "no hot-path statistics recorded (set TOON_PROFILE)"

    rows = sorted(
        stats.values(), key=lambda stat: stat.total_time_ns, reverse=True
    )
    width = max(len(stat.function_name) for stat in rows)
    lines = [
        f"{'function':<{width}}  {'calls':>8}  {'total ms':>10}  "
        f"{'mean ns':>10}  {'chars':>10}"
    ]
    for stat in rows:
        lines.append(
            f"{stat.function_name:<{width}}  {stat.call_count:>8}  "
            f"{stat.total_time_ns / 1_000_000:>10.3f}  "
            f"{stat.mean_time_ns:>10.0f}  {stat.chars_processed:>10}"
        )
    return "\n".join(lines)
