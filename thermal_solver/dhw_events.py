"""
DHW Event Resolver

Classifies the scheduled water draws for each 15-minute step: how much of
each active draw is a thermal load on the simulated heat source under the
run's supply-path policy. Arbitration against finite capacity and cylinder
reserve happens later, in the dispatcher.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from .flow_physics import dhw_kw_from_flow
from .schema import (
    STEP_MINUTES,
    DrawEvent,
    DrawKind,
    EventLike,
    SupplyPath,
    as_draw_event,
    fold_key,
)

# Raw (case-folded) setting -> policy. Legacy delivery modes all mean the
# draw is served from the hot-water system.
_SUPPLY_PATH_ALIASES: Dict[str, SupplyPath] = {
    'hot_water_system': SupplyPath.HOT_WATER_SYSTEM,
    'hot_water': SupplyPath.HOT_WATER_SYSTEM,
    'unknown': SupplyPath.HOT_WATER_SYSTEM,
    'gravity': SupplyPath.HOT_WATER_SYSTEM,
    'pumped': SupplyPath.HOT_WATER_SYSTEM,
    'pumped_from_tank': SupplyPath.HOT_WATER_SYSTEM,
    'tank_pumped': SupplyPath.HOT_WATER_SYSTEM,
    'mains_mixer': SupplyPath.HOT_WATER_SYSTEM,
    'mixer_pump': SupplyPath.HOT_WATER_SYSTEM,
    'accumulator_supported': SupplyPath.HOT_WATER_SYSTEM,
    'break_tank_booster': SupplyPath.HOT_WATER_SYSTEM,
    'cold_only': SupplyPath.COLD_ONLY,
    'cold': SupplyPath.COLD_ONLY,
    'mixed': SupplyPath.MIXED,
    'partial': SupplyPath.MIXED,
    'electric_cold_only': SupplyPath.ELECTRIC_COLD_ONLY,
    'electric': SupplyPath.ELECTRIC_COLD_ONLY,
    'electric_shower': SupplyPath.ELECTRIC_COLD_ONLY,
}


def normalise_supply_path(raw: Optional[Union[str, SupplyPath]]) -> SupplyPath:
    """
    Normalise a supply-path setting to the closed policy enum.

    Matching is case-insensitive; spaces and hyphens count as underscores.
    ``None`` selects the default (served from the hot-water system).

    Raises:
        ValueError: for a value that is not a known policy or alias
    """
    if raw is None:
        return SupplyPath.HOT_WATER_SYSTEM
    if isinstance(raw, SupplyPath):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"Supply path must be a string, got {type(raw).__name__}")
    try:
        return _SUPPLY_PATH_ALIASES[fold_key(raw)]
    except KeyError:
        raise ValueError(f"Unknown supply path: {raw!r}") from None


def hot_fraction(kind: DrawKind, supply_path: SupplyPath,
                 mixed_fraction: float = 0.6) -> float:
    """Share of a draw's flow that is hot water heated by the simulated source."""
    if kind.is_cold_fill or supply_path is SupplyPath.COLD_ONLY:
        return 0.0
    if supply_path is SupplyPath.MIXED and kind is DrawKind.SINK:
        return mixed_fraction
    if supply_path is SupplyPath.ELECTRIC_COLD_ONLY and kind is DrawKind.SHOWER:
        return 0.0  # point-of-use electric shower heats its own cold feed
    return 1.0


@dataclass(frozen=True)
class StepDrawLoad:
    """
    Aggregate draw load over one step.

    ``thermal_kw`` and ``unconstrained_kw`` are averaged across the step.
    ``peak_kw`` is the largest concurrent thermal draw while any draw runs,
    and ``coverage`` is the fraction of the step with a thermal draw open.
    """
    thermal_kw: float
    unconstrained_kw: float
    active_kinds: Tuple[DrawKind, ...] = ()
    peak_kw: float = 0.0
    coverage: float = 0.0

    @property
    def is_active(self) -> bool:
        return self.thermal_kw > 0


class DrawEventResolver:
    """
    Per-step DHW thermal load for a fixed event list and supply path.

    An event contributes to the step-average load in proportion to how much
    of the step window it covers; concurrent events add up. The concurrent
    peak is kept separately so an on-demand source can be checked against
    the instantaneous flow rather than a diluted average.
    """

    def __init__(self, events: Iterable[EventLike], supply_path: SupplyPath, config: Dict):
        """
        Args:
            events: Scheduled draws (DrawEvent objects or mappings)
            supply_path: Normalised supply-path policy
            config: ``dhw`` section of the solver parameters
        """
        self.events = tuple(as_draw_event(e) for e in events)
        self.supply_path = supply_path
        self.mixed_fraction = float(config['mixed_sink_hot_fraction'])
        self.flow_table = config['flow_lpm']

    def draw_flow_lpm(self, event: DrawEvent) -> float:
        """Flow rate of a draw (L/min); cold-fill appliances carry no hot flow."""
        if event.kind.is_cold_fill:
            return 0.0
        return float(self.flow_table[event.kind.value][event.intensity.value])

    @staticmethod
    def window_overlap(event: DrawEvent, step: int) -> float:
        """Fraction (0-1) of step ``step`` covered by ``event``."""
        step_start = step * STEP_MINUTES
        step_end = step_start + STEP_MINUTES
        covered = min(event.end_min, step_end) - max(event.start_min, step_start)
        return max(0.0, covered) / STEP_MINUTES

    def resolve(self, step: int) -> StepDrawLoad:
        thermal_kw = 0.0
        unconstrained_kw = 0.0
        kinds = []
        # (start, end, instantaneous thermal kW) clipped to the step
        windows = []

        step_start = step * STEP_MINUTES
        step_end = step_start + STEP_MINUTES

        for event in self.events:
            overlap = self.window_overlap(event, step)
            if overlap <= 0:
                continue
            kinds.append(event.kind)

            full_kw = dhw_kw_from_flow(self.draw_flow_lpm(event))
            hot_kw = full_kw * hot_fraction(event.kind, self.supply_path, self.mixed_fraction)
            unconstrained_kw += full_kw * overlap
            thermal_kw += hot_kw * overlap
            if hot_kw > 0:
                windows.append((max(event.start_min, step_start), min(event.end_min, step_end), hot_kw))

        peak_kw, coverage = self._concurrent_profile(windows)

        return StepDrawLoad(
            thermal_kw=thermal_kw,
            unconstrained_kw=unconstrained_kw,
            active_kinds=tuple(kinds),
            peak_kw=peak_kw,
            coverage=coverage,
        )

    @staticmethod
    def _concurrent_profile(windows) -> Tuple[float, float]:
        """Peak summed kW and covered fraction of the step for clipped draw windows."""
        if not windows:
            return 0.0, 0.0
        edges = sorted({t for start, end, _ in windows for t in (start, end)})
        peak_kw = 0.0
        covered_min = 0.0
        for left, right in zip(edges[:-1], edges[1:]):
            load = sum(kw for start, end, kw in windows if start <= left and end >= right)
            if load > 0:
                peak_kw = max(peak_kw, load)
                covered_min += right - left
        return peak_kw, covered_min / STEP_MINUTES
