from __future__ import annotations

import os
import sys
import threading
import time
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6 import QtCore, QtWidgets

from atomik.chem.elements import get_element
from atomik.config import Settings
from atomik.insight.client import Insight
from atomik.insight.session import InsightState
from atomik.insight.worker import InsightController
from atomik.layout.scene import build_scene
from atomik.views.atom_view import AtomViewer
from atomik.views.element_details import ElementDetailsPanel, InsightPanel


def _insight(tag: str) -> Insight:
    return Insight(f"{tag} fact", f"{tag} use", f"{tag} bonding")


def _wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        QtWidgets.QApplication.processEvents()
        QtCore.QThread.msleep(5)
    return True


class QtTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


class AtomViewerTests(QtTestCase):
    def test_scene_is_stored_as_given(self) -> None:
        viewer = AtomViewer()
        scene = build_scene(get_element(6), rng=0)
        viewer.set_scene(scene)
        self.assertIs(viewer.scene(), scene)
        viewer.set_scene(None)
        self.assertIsNone(viewer.scene())

    def test_paints_scene_and_empty_state(self) -> None:
        viewer = AtomViewer()
        viewer.resize(500, 600)
        viewer.set_animated(False)
        viewer.set_scene(build_scene(get_element(26), rng=1))
        self.assertFalse(viewer.grab().isNull())
        viewer.set_scene(None)
        self.assertFalse(viewer.grab().isNull())


class InsightControllerTests(QtTestCase):
    def setUp(self) -> None:
        self.hydrogen = get_element(1)
        self.carbon = get_element(6)
        self.release_hydrogen = threading.Event()
        self.hydrogen_started = threading.Event()
        self.states: list[InsightState] = []

        def fetch(element, settings):
            if element == self.hydrogen:
                self.hydrogen_started.set()
                self.release_hydrogen.wait(5)
            return _insight(element.symbol)

        self.controller = InsightController(Settings(api_key="k"), fetch=fetch)
        self.controller.insight_changed.connect(self.states.append)

    def tearDown(self) -> None:
        self.release_hydrogen.set()
        self.controller.shutdown(5000)
        _wait_until(lambda: self.controller.pending() == 0)

    def _resolved(self) -> list[InsightState]:
        return [state for state in self.states if state.insight is not None]

    def test_late_result_for_earlier_selection_is_not_published(self) -> None:
        self.controller.request(self.hydrogen)
        self.controller.request(self.carbon)
        self.assertTrue(_wait_until(lambda: len(self._resolved()) == 1))

        self.release_hydrogen.set()
        self.assertTrue(_wait_until(lambda: self.controller.pending() == 0))
        QtWidgets.QApplication.processEvents()

        resolved = self._resolved()
        self.assertEqual(len(resolved), 1)
        self.assertIs(resolved[0].element, self.carbon)
        self.assertEqual(resolved[0].insight.fun_fact, "C fact")
        self.assertFalse(any(s.insight is not None and s.insight.fun_fact == "H fact" for s in self.states))
        self.assertEqual(self.controller.state().insight.fun_fact, "C fact")

    def test_request_emits_loading_state_first(self) -> None:
        self.controller.request(self.carbon)
        self.assertTrue(self.states[0].loading)
        self.assertIs(self.states[0].element, self.carbon)
        self.assertTrue(_wait_until(lambda: len(self._resolved()) == 1))

    def test_shutdown_is_bounded_and_drains_later(self) -> None:
        drained: list[bool] = []
        self.controller.drained.connect(lambda: drained.append(True))
        self.controller.request(self.hydrogen)
        self.assertTrue(self.hydrogen_started.wait(5))

        started = time.monotonic()
        self.assertFalse(self.controller.shutdown(50))
        self.assertLess(time.monotonic() - started, 2.0)
        self.assertEqual(self.controller.pending(), 1)

        self.release_hydrogen.set()
        self.assertTrue(_wait_until(lambda: bool(drained)))
        self.assertEqual(self.controller.pending(), 0)
        self.assertIsNone(self.controller.state().insight)


class ElementDetailsPanelTests(QtTestCase):
    def test_ignores_state_for_another_element(self) -> None:
        panel = ElementDetailsPanel()
        carbon = get_element(6)
        panel.set_element(carbon)
        pages = panel.insight_panel.pages

        panel.set_insight_state(InsightState(element=get_element(1), insight=_insight("H"), version=1))
        self.assertEqual(pages.currentIndex(), InsightPanel.EMPTY_PAGE)

        panel.set_insight_state(InsightState(element=carbon, loading=True, version=2))
        self.assertEqual(pages.currentIndex(), InsightPanel.LOADING_PAGE)

        panel.set_insight_state(InsightState(element=carbon, insight=_insight("C"), version=2))
        self.assertEqual(pages.currentIndex(), InsightPanel.CONTENT_PAGE)
        self.assertEqual(panel.insight_panel.fun_fact_label.text(), "C fact")

    def test_header_and_stats(self) -> None:
        panel = ElementDetailsPanel()
        panel.set_element(get_element(6))
        self.assertEqual(panel.name_label.text(), "Carbon")
        self.assertEqual(panel.block_card.value_label.text(), "p-block")
        self.assertEqual(panel.position_card.value_label.text(), "14 / 2")
        self.assertEqual(panel.mass_card.value_label.text(), "12.011 u")


if __name__ == "__main__":
    unittest.main()
