"""
Path simulation for the stochastic process models.

Shocks are drawn as one (n_paths, n_steps) standard normal block from an
explicit random source, so results are reproducible given the source's
state and independent of any global generator.

Usage:
    >>> from quant_numerics.stochastics import (
    ...     ArithmeticBrownianMotion, make_random_source, simulate, uniform_time_grid
    ... )
    >>> grid = uniform_time_grid(1.0, n_steps=4)
    >>> path = simulate(ArithmeticBrownianMotion(mu=0.1, sigma=0.0), 1.0, grid,
    ...                 make_random_source(42))
    >>> [round(v, 10) for v in path.values]
    [1.0, 1.025, 1.05, 1.075, 1.1]
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np
import pandas as pd

from quant_numerics.config.settings import SETTINGS
from quant_numerics.errors import ConstructionError, NumericalDomainError
from quant_numerics.stochastics.processes import PROCESS_MODELS, ProcessModel

logger = logging.getLogger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


def validate_time_grid(time_grid: Sequence[float]) -> np.ndarray:
    """
    Check that a time grid starts at 0 and is strictly increasing.

    Parameters
    ----------
    time_grid : sequence of float
        Observation times in years

    Returns
    -------
    ndarray
        Grid as a float array

    Raises
    ------
    ConstructionError
        If the grid is empty, not 1-D, non-finite, does not start at 0,
        or is not strictly increasing
    """
    times = np.asarray(time_grid, dtype=float)
    if times.ndim != 1 or len(times) < 2:
        raise ConstructionError(
            f"CRITICAL: time_grid must be 1-D with at least 2 points, got shape {times.shape}"
        )
    if not np.all(np.isfinite(times)):
        raise ConstructionError("CRITICAL: time_grid must be finite")
    if times[0] != 0.0:
        raise ConstructionError(f"CRITICAL: time_grid must start at 0, got {times[0]}")
    if not np.all(np.diff(times) > 0):
        raise ConstructionError("CRITICAL: time_grid must be strictly increasing")
    return times


# =============================================================================
# Path Containers
# =============================================================================


@dataclass(frozen=True)
class SamplePath:
    """
    One simulated path.

    Attributes
    ----------
    times : ndarray
        Observation times, strictly increasing from 0, shape (n_steps + 1,)
    values : ndarray
        Process values at each time; values[0] is the initial value

    Iterating yields (time, value) pairs.
    """

    times: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        times = validate_time_grid(self.times)
        values = np.asarray(self.values, dtype=float)
        if values.shape != times.shape:
            raise ConstructionError(
                f"CRITICAL: values shape {values.shape} must match times shape {times.shape}"
            )
        object.__setattr__(self, "times", _read_only(times))
        object.__setattr__(self, "values", _read_only(values))

    @property
    def n_steps(self) -> int:
        return len(self.times) - 1

    @property
    def initial_value(self) -> float:
        return float(self.values[0])

    @property
    def terminal_value(self) -> float:
        return float(self.values[-1])

    def __len__(self) -> int:
        return len(self.times)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for t, x in zip(self.times, self.values):
            yield float(t), float(x)

    def to_frame(self) -> pd.DataFrame:
        """Path as a DataFrame with `time` and `value` columns."""
        return pd.DataFrame({"time": self.times, "value": self.values})


@dataclass(frozen=True)
class PathEnsemble:
    """
    Many paths simulated on a shared time grid.

    Attributes
    ----------
    times : ndarray
        Observation times, shape (n_steps + 1,)
    values : ndarray
        Paths, shape (n_paths, n_steps + 1)
    """

    times: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        times = validate_time_grid(self.times)
        values = np.asarray(self.values, dtype=float)
        if values.ndim != 2 or values.shape[1] != len(times):
            raise ConstructionError(
                f"CRITICAL: values shape {values.shape} must be (n_paths, {len(times)})"
            )
        object.__setattr__(self, "times", _read_only(times))
        object.__setattr__(self, "values", _read_only(values))

    @property
    def n_paths(self) -> int:
        return self.values.shape[0]

    @property
    def n_steps(self) -> int:
        return len(self.times) - 1

    @property
    def terminal_values(self) -> np.ndarray:
        """Values at the last grid time, shape (n_paths,)."""
        return self.values[:, -1]

    def __len__(self) -> int:
        return self.n_paths

    def path(self, index: int) -> SamplePath:
        """Single path as a SamplePath."""
        return SamplePath(times=self.times, values=self.values[index])

    def to_frame(self) -> pd.DataFrame:
        """
        Long-format DataFrame with columns `path`, `time`, `value`.

        One row per (path, time) pair, ordered by path then time.
        """
        n_points = len(self.times)
        return pd.DataFrame(
            {
                "path": np.repeat(np.arange(self.n_paths), n_points),
                "time": np.tile(self.times, self.n_paths),
                "value": self.values.ravel(),
            }
        )


# =============================================================================
# Simulation
# =============================================================================


def uniform_time_grid(horizon: float, n_steps: Optional[int] = None) -> np.ndarray:
    """
    Equally spaced grid on [0, horizon].

    Parameters
    ----------
    horizon : float
        Final time in years, > 0
    n_steps : int, optional
        Number of steps (default: one per trading day)

    Returns
    -------
    ndarray
        Grid of n_steps + 1 times
    """
    if not horizon > 0 or not np.isfinite(horizon):
        raise ConstructionError(f"CRITICAL: horizon must be finite and > 0, got {horizon}")
    if n_steps is None:
        n_steps = max(1, int(round(horizon * SETTINGS.simulation.trading_days_per_year)))
    if isinstance(n_steps, bool) or not isinstance(n_steps, (int, np.integer)) or n_steps < 1:
        raise ConstructionError(f"CRITICAL: n_steps must be an integer >= 1, got {n_steps!r}")
    return np.linspace(0.0, horizon, n_steps + 1)


def make_random_source(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded numpy Generator (default seed from settings)."""
    if seed is None:
        seed = SETTINGS.simulation.default_seed
    return np.random.default_rng(seed)


def simulate_paths(
    model: ProcessModel,
    initial_value: float,
    time_grid: Sequence[float],
    n_paths: int,
    random_source,
) -> PathEnsemble:
    """
    Simulate many paths of a process model.

    Parameters
    ----------
    model : ProcessModel
        One of PROCESS_MODELS
    initial_value : float
        X(0), shared by all paths
    time_grid : sequence of float
        Strictly increasing times starting at 0; steps are taken from it
    n_paths : int
        Number of paths, >= 1
    random_source : object
        Anything with standard_normal(size), e.g. numpy.random.Generator

    Returns
    -------
    PathEnsemble

    Raises
    ------
    TypeError
        If model is not a supported process model or random_source has no
        standard_normal method
    ConstructionError
        If the grid, path count or initial value is invalid
    NumericalDomainError
        If a path leaves the finite numbers
    """
    if not isinstance(model, PROCESS_MODELS):
        raise TypeError(f"Unsupported process model: {type(model).__name__}")
    if not callable(getattr(random_source, "standard_normal", None)):
        raise TypeError(
            f"random_source must provide standard_normal(size), got {type(random_source).__name__}"
        )
    if isinstance(n_paths, bool) or not isinstance(n_paths, (int, np.integer)) or n_paths < 1:
        raise ConstructionError(f"CRITICAL: n_paths must be an integer >= 1, got {n_paths!r}")

    times = validate_time_grid(time_grid)
    initial_value = float(initial_value)
    if not np.isfinite(initial_value):
        raise ConstructionError(f"CRITICAL: initial_value must be finite, got {initial_value}")
    model.validate_start(initial_value, times)

    n_steps = len(times) - 1
    shocks = np.asarray(random_source.standard_normal((n_paths, n_steps)), dtype=float)
    if shocks.shape != (n_paths, n_steps):
        raise ConstructionError(
            f"CRITICAL: random_source returned shape {shocks.shape}, expected {(n_paths, n_steps)}"
        )

    with np.errstate(over="ignore", invalid="ignore"):
        values = model.evolve(initial_value, times, shocks)

    finite = np.isfinite(values)
    if not np.all(finite):
        step = int(np.argmax(~finite.all(axis=0)))
        raise NumericalDomainError(
            f"{type(model).__name__} produced a non-finite state at step {step} (t={times[step]})",
            point=float(times[step]),
            value=values[~finite][0],
        )

    logger.debug(
        f"simulate_paths: {type(model).__name__} n_paths={n_paths} n_steps={n_steps}"
    )
    return PathEnsemble(times=times, values=values)


def simulate(
    model: ProcessModel,
    initial_value: float,
    time_grid: Sequence[float],
    random_source,
) -> SamplePath:
    """
    Simulate one path of a process model.

    Equivalent to the first path of simulate_paths(..., n_paths=1, ...).

    Parameters
    ----------
    model : ProcessModel
        One of PROCESS_MODELS
    initial_value : float
        X(0)
    time_grid : sequence of float
        Strictly increasing times starting at 0
    random_source : object
        Anything with standard_normal(size)

    Returns
    -------
    SamplePath
    """
    return simulate_paths(model, initial_value, time_grid, 1, random_source).path(0)
