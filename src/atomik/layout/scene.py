from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from atomik.chem.elements import ElementDataError, ElementRecord, validate_record

# Golden angle in radians (~137.5 degrees).
GOLDEN_ANGLE = 2.39996


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of the scene canvas, in canvas units centred on the nucleus."""

    inner_bound: float = 40.0
    margin: float = 30.0
    outer_bound: float = 180.0
    base_duration: float = 5.0
    per_shell_increment: float = 4.0
    base_particle_radius: float = 28.0
    min_particle_radius: float = 2.0
    max_particle_radius: float = 12.0
    spacing_ratio: float = 1.2
    golden_angle: float = GOLDEN_ANGLE
    view_size: float = 500.0


DEFAULT_LAYOUT = LayoutConfig()


class NucleonKind(str, Enum):
    PROTON = "p"
    NEUTRON = "n"


@dataclass(frozen=True)
class ElectronVisual:
    angle_degrees: float


@dataclass(frozen=True)
class ShellVisual:
    index: int
    radius: float
    rotation_period: float
    electrons: tuple[ElectronVisual, ...]

    @property
    def electron_count(self) -> int:
        return len(self.electrons)

    @property
    def angular_velocity(self) -> float:
        """Degrees per second."""
        return 360.0 / self.rotation_period


@dataclass(frozen=True)
class NucleonVisual:
    kind: NucleonKind
    x: float
    y: float
    radius: float

    @property
    def distance(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Composition:
    protons: int
    neutrons: int
    electrons: int


@dataclass(frozen=True)
class Scene:
    element: ElementRecord
    shells: tuple[ShellVisual, ...]
    nucleons: tuple[NucleonVisual, ...]
    composition: Composition

    @property
    def nucleon_radius(self) -> float:
        return self.nucleons[0].radius if self.nucleons else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def neutron_count(element: ElementRecord) -> int:
    return _round_half_up(element.atomic_mass - element.atomic_number)


def shell_radius(index: int, count: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    span = config.outer_bound - config.inner_bound - config.margin
    return config.inner_bound + config.margin + (index / max(count, 1)) * span


def electron_angles(electron_count: int) -> tuple[float, ...]:
    return tuple(360.0 * k / electron_count for k in range(electron_count))


def compute_shell_visuals(
    shells: Sequence[int], config: LayoutConfig = DEFAULT_LAYOUT
) -> tuple[ShellVisual, ...]:
    """Place each shell on its own orbit and spread its electrons evenly.

    Radii grow linearly from just outside the nucleus region towards the
    outer bound; rotation periods grow with the shell index so inner shells
    spin faster. An empty shell produces no electrons.
    """
    count = len(shells)
    visuals: list[ShellVisual] = []
    for index, electron_count in enumerate(shells):
        electron_count = int(electron_count)
        if electron_count < 0:
            raise ElementDataError(f"Shell {index + 1} has a negative electron count ({electron_count})")
        visuals.append(
            ShellVisual(
                index=index,
                radius=shell_radius(index, count, config),
                rotation_period=config.base_duration + index * config.per_shell_increment,
                electrons=tuple(ElectronVisual(angle) for angle in electron_angles(electron_count)),
            )
        )
    return tuple(visuals)


def particle_radius(total: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    radius = config.base_particle_radius / math.sqrt(total or 1)
    return max(config.min_particle_radius, min(config.max_particle_radius, radius))


def _resolve_rng(rng: np.random.Generator | int | None) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def compute_nucleon_visuals(
    proton_count: int,
    neutron_count: int,
    rng: np.random.Generator | int | None = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> tuple[NucleonVisual, ...]:
    """Pack protons and neutrons on a golden-angle (sunflower) spiral.

    The proton/neutron tokens are shuffled with ``rng`` before placement, so
    only the mixing of kinds is random; positions and the shared particle
    radius depend on the total count alone. ``rng`` may be a numpy Generator,
    an integer seed, or None for fresh entropy.
    """
    if proton_count < 0 or neutron_count < 0:
        raise ElementDataError(
            f"Nucleon counts must be non-negative (protons={proton_count}, neutrons={neutron_count})"
        )
    total = proton_count + neutron_count
    if total == 0:
        return ()

    is_proton = np.zeros(total, dtype=bool)
    is_proton[:proton_count] = True
    _resolve_rng(rng).shuffle(is_proton)

    radius = particle_radius(total, config)
    index = np.arange(total)
    angles = index * config.golden_angle
    distances = config.spacing_ratio * radius * np.sqrt(index)
    xs = distances * np.cos(angles)
    ys = distances * np.sin(angles)

    return tuple(
        NucleonVisual(
            kind=NucleonKind.PROTON if flag else NucleonKind.NEUTRON,
            x=float(x),
            y=float(y),
            radius=radius,
        )
        for flag, x, y in zip(is_proton, xs, ys)
    )


def build_scene(
    element: ElementRecord,
    rng: np.random.Generator | int | None = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> Scene:
    validate_record(element)
    neutrons = neutron_count(element)
    if neutrons < 0:
        raise ElementDataError(
            f"{element.symbol}: atomic mass {element.atomic_mass} gives a negative neutron count"
        )
    return Scene(
        element=element,
        shells=compute_shell_visuals(element.shells, config),
        nucleons=compute_nucleon_visuals(element.atomic_number, neutrons, rng, config),
        composition=Composition(
            protons=element.atomic_number,
            neutrons=neutrons,
            electrons=element.electron_count,
        ),
    )
