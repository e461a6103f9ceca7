from __future__ import annotations

import math
import sys
import unittest
from dataclasses import replace
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

import numpy as np

from atomik.chem.elements import ElementDataError, get_element
from atomik.layout.scene import (
    DEFAULT_LAYOUT,
    LayoutConfig,
    NucleonKind,
    build_scene,
    compute_nucleon_visuals,
    compute_shell_visuals,
    neutron_count,
    particle_radius,
    shell_radius,
)


def _kinds(nucleons) -> list[str]:
    return [nucleon.kind.value for nucleon in nucleons]


class ShellVisualTests(unittest.TestCase):
    def test_electron_counts_match_shells(self) -> None:
        shells = (2, 8, 18, 32, 21, 9, 2)
        visuals = compute_shell_visuals(shells)
        self.assertEqual([v.electron_count for v in visuals], list(shells))
        self.assertEqual([v.index for v in visuals], list(range(len(shells))))

    def test_angles_are_evenly_spaced(self) -> None:
        visuals = compute_shell_visuals((2, 8))
        self.assertEqual([e.angle_degrees for e in visuals[0].electrons], [0.0, 180.0])
        angles = [e.angle_degrees for e in visuals[1].electrons]
        for k, angle in enumerate(angles):
            self.assertAlmostEqual(angle, 45.0 * k)

    def test_radii_increase_within_bounds(self) -> None:
        visuals = compute_shell_visuals((2, 8, 18, 32, 32, 18, 8))
        radii = [v.radius for v in visuals]
        self.assertEqual(radii, sorted(radii))
        self.assertEqual(len(set(radii)), len(radii))
        for radius in radii:
            self.assertGreater(radius, DEFAULT_LAYOUT.inner_bound)
            self.assertLess(radius, DEFAULT_LAYOUT.outer_bound)

    def test_rotation_period_grows_with_index(self) -> None:
        visuals = compute_shell_visuals((2, 8, 1))
        self.assertEqual([v.rotation_period for v in visuals], [5.0, 9.0, 13.0])
        self.assertAlmostEqual(visuals[0].angular_velocity, 72.0)

    def test_single_shell_does_not_divide_by_zero(self) -> None:
        self.assertEqual(shell_radius(0, 1), 70.0)
        self.assertEqual(shell_radius(0, 0), 70.0)

    def test_empty_shell_has_no_electrons(self) -> None:
        visuals = compute_shell_visuals((2, 0))
        self.assertEqual(visuals[1].electrons, ())

    def test_no_shells(self) -> None:
        self.assertEqual(compute_shell_visuals(()), ())

    def test_negative_shell_raises(self) -> None:
        with self.assertRaises(ElementDataError):
            compute_shell_visuals((2, -1))


class NucleonVisualTests(unittest.TestCase):
    def test_composition_is_preserved(self) -> None:
        nucleons = compute_nucleon_visuals(26, 30, rng=7)
        kinds = _kinds(nucleons)
        self.assertEqual(len(nucleons), 56)
        self.assertEqual(kinds.count("p"), 26)
        self.assertEqual(kinds.count("n"), 30)

    def test_radii_are_equal_and_clamped(self) -> None:
        for protons, neutrons in ((1, 0), (6, 6), (26, 30), (118, 176)):
            nucleons = compute_nucleon_visuals(protons, neutrons, rng=0)
            radii = {n.radius for n in nucleons}
            self.assertEqual(len(radii), 1)
            radius = radii.pop()
            self.assertGreaterEqual(radius, 2.0)
            self.assertLessEqual(radius, 12.0)

    def test_particle_radius_clamps(self) -> None:
        self.assertEqual(particle_radius(1), 12.0)
        self.assertEqual(particle_radius(0), 12.0)
        self.assertEqual(particle_radius(294), 2.0)
        self.assertAlmostEqual(particle_radius(12), 28 / math.sqrt(12))

    def test_distances_follow_square_root_spiral(self) -> None:
        nucleons = compute_nucleon_visuals(6, 6, rng=1)
        radius = nucleons[0].radius
        for i, nucleon in enumerate(nucleons):
            self.assertAlmostEqual(nucleon.distance, 1.2 * radius * math.sqrt(i))
            if i:
                angle = math.atan2(nucleon.y, nucleon.x)
                expected = math.atan2(math.sin(i * 2.39996), math.cos(i * 2.39996))
                self.assertAlmostEqual(angle, expected)

    def test_first_nucleon_sits_at_origin(self) -> None:
        first = compute_nucleon_visuals(3, 4, rng=2)[0]
        self.assertEqual((first.x, first.y), (0.0, 0.0))

    def test_zero_total_returns_empty(self) -> None:
        self.assertEqual(compute_nucleon_visuals(0, 0), ())

    def test_negative_counts_raise(self) -> None:
        with self.assertRaises(ElementDataError):
            compute_nucleon_visuals(-1, 2)
        with self.assertRaises(ElementDataError):
            compute_nucleon_visuals(2, -1)

    def test_same_seed_gives_same_order(self) -> None:
        first = compute_nucleon_visuals(20, 20, rng=42)
        second = compute_nucleon_visuals(20, 20, rng=np.random.default_rng(42))
        self.assertEqual(_kinds(first), _kinds(second))

    def test_different_seeds_keep_composition(self) -> None:
        for seed in range(5):
            kinds = _kinds(compute_nucleon_visuals(20, 22, rng=seed))
            self.assertEqual(kinds.count("p"), 20)
            self.assertEqual(kinds.count("n"), 22)

    def test_config_overrides_spacing(self) -> None:
        config = replace(DEFAULT_LAYOUT, spacing_ratio=2.0)
        nucleons = compute_nucleon_visuals(2, 2, rng=0, config=config)
        self.assertAlmostEqual(nucleons[1].distance, 2.0 * nucleons[1].radius)


class BuildSceneTests(unittest.TestCase):
    def test_hydrogen(self) -> None:
        scene = build_scene(get_element(1), rng=0)
        self.assertEqual(len(scene.shells), 1)
        self.assertEqual(scene.shells[0].radius, 70.0)
        self.assertEqual(scene.shells[0].rotation_period, 5.0)
        self.assertEqual([e.angle_degrees for e in scene.shells[0].electrons], [0.0])
        self.assertEqual(len(scene.nucleons), 1)
        proton = scene.nucleons[0]
        self.assertIs(proton.kind, NucleonKind.PROTON)
        self.assertEqual(proton.radius, 12.0)
        self.assertEqual((proton.x, proton.y), (0.0, 0.0))

    def test_carbon(self) -> None:
        scene = build_scene(get_element(6), rng=3)
        self.assertEqual([s.radius for s in scene.shells], [70.0, 125.0])
        self.assertEqual([s.rotation_period for s in scene.shells], [5.0, 9.0])
        self.assertEqual([s.electron_count for s in scene.shells], [2, 4])
        self.assertEqual(len(scene.nucleons), 12)
        self.assertAlmostEqual(scene.nucleon_radius, 28 / math.sqrt(12))
        self.assertEqual((scene.composition.protons, scene.composition.neutrons), (6, 6))
        self.assertEqual(scene.composition.electrons, 6)

    def test_neutron_count_rounds_half_up(self) -> None:
        self.assertEqual(neutron_count(get_element(26)), 30)
        self.assertEqual(neutron_count(replace(get_element(1), atomic_mass=1.5)), 1)
        self.assertEqual(neutron_count(replace(get_element(1), atomic_mass=1.49)), 0)

    def test_negative_neutron_count_raises(self) -> None:
        broken = replace(get_element(6), atomic_mass=4.0)
        with self.assertRaises(ElementDataError):
            build_scene(broken)

    def test_inconsistent_shells_raise(self) -> None:
        broken = replace(get_element(6), shells=(2, 3))
        with self.assertRaises(ElementDataError):
            build_scene(broken)

    def test_scene_keeps_element(self) -> None:
        carbon = get_element(6)
        self.assertIs(build_scene(carbon, rng=0).element, carbon)

    def test_custom_config(self) -> None:
        config = LayoutConfig(inner_bound=10, margin=10, outer_bound=110)
        scene = build_scene(get_element(6), rng=0, config=config)
        self.assertEqual([s.radius for s in scene.shells], [20.0, 65.0])


if __name__ == "__main__":
    unittest.main()
