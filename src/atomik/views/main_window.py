from __future__ import annotations

import logging

import numpy as np
import qtawesome as qta
from PySide6 import QtCore, QtGui, QtWidgets

from atomik.chem.elements import ElementDataError, ElementRecord, default_element, load_elements
from atomik.config import Settings
from atomik.insight.session import InsightState
from atomik.insight.worker import InsightController
from atomik.layout.scene import build_scene
from atomik.theming.apply_theme import apply_theme as apply_theme_tokens
from atomik.theming.theme_tokens import THEME_TOKENS, get_theme_tokens
from atomik.views.atom_view import AtomViewer
from atomik.views.element_details import ElementDetailsPanel
from atomik.views.periodic_table_view import PeriodicTableView

logger = logging.getLogger(__name__)


class AtomikMainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.setWindowTitle("Atomik")
        self.setMinimumSize(1200, 820)
        self._settings = QtCore.QSettings("Atomik", "Atomik")
        self._theme_name = str(self._settings.value("theme", settings.theme))
        if self._theme_name not in THEME_TOKENS:
            self._theme_name = settings.theme if settings.theme in THEME_TOKENS else "Atomik Dark"
        self._elements = load_elements()
        self._rng = np.random.default_rng()
        self.current_element: ElementRecord | None = None
        self._close_pending = False

        self.insights = InsightController(settings, parent=self)
        self.insights.insight_changed.connect(self._on_insight_changed)

        self._build_toolbar()
        self._build_menus()

        self.viewer = AtomViewer()
        viewer_card = QtWidgets.QFrame()
        viewer_card.setObjectName("card")
        viewer_layout = QtWidgets.QVBoxLayout(viewer_card)
        viewer_layout.setContentsMargins(12, 12, 12, 12)
        viewer_title = QtWidgets.QLabel("ATOMIC STRUCTURE")
        viewer_title.setObjectName("sectionTitle")
        viewer_layout.addWidget(viewer_title)
        viewer_layout.addWidget(self.viewer, 1)

        self.details = ElementDetailsPanel()
        details_scroll = QtWidgets.QScrollArea()
        details_scroll.setWidgetResizable(True)
        details_scroll.setWidget(self.details)

        splitter = QtWidgets.QSplitter(QtCore.Qt.Orientation.Horizontal)
        splitter.addWidget(viewer_card)
        splitter.addWidget(details_scroll)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)

        self.table = PeriodicTableView(self._elements)
        self.table.element_selected.connect(self.select_element)
        table_card = QtWidgets.QFrame()
        table_card.setObjectName("card")
        table_layout = QtWidgets.QVBoxLayout(table_card)
        table_layout.setContentsMargins(12, 12, 12, 12)
        table_title = QtWidgets.QLabel("PERIODIC TABLE")
        table_title.setObjectName("sectionTitle")
        table_layout.addWidget(table_title)
        table_layout.addWidget(self.table, 1)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(16)
        layout.addWidget(splitter, 3)
        layout.addWidget(table_card, 2)
        self.setCentralWidget(central)

        self.apply_theme(self._theme_name)
        self.select_element(default_element())

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        if self.insights.shutdown():
            super().closeEvent(event)
            return
        # a request is still in flight; close again once its thread has exited
        self.hide()
        event.ignore()
        if not self._close_pending:
            self._close_pending = True
            self.insights.drained.connect(self.close)

    def _build_toolbar(self) -> None:
        toolbar = QtWidgets.QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(QtCore.Qt.ToolBarArea.TopToolBarArea, toolbar)

        brand = QtWidgets.QWidget()
        brand_layout = QtWidgets.QVBoxLayout(brand)
        brand_layout.setContentsMargins(8, 0, 16, 0)
        brand_layout.setSpacing(0)
        title = QtWidgets.QLabel("Atomik")
        title.setStyleSheet("font-size: 16pt; font-weight: 700;")
        subtitle = QtWidgets.QLabel("Grade 11 Chemistry Simulator")
        subtitle.setObjectName("statLabel")
        brand_layout.addWidget(title)
        brand_layout.addWidget(subtitle)
        toolbar.addWidget(brand)

        self._prev_act = QtGui.QAction("Previous", self)
        self._prev_act.setIcon(qta.icon("fa5s.chevron-left"))
        self._prev_act.setShortcut(QtGui.QKeySequence(QtCore.Qt.Key.Key_Left))
        self._prev_act.triggered.connect(lambda: self._step(-1))
        toolbar.addAction(self._prev_act)

        self.element_combo = QtWidgets.QComboBox()
        self.element_combo.setMinimumWidth(220)
        for element in self._elements:
            self.element_combo.addItem(element.label(), element.atomic_number)
        self.element_combo.currentIndexChanged.connect(self._on_combo_changed)
        toolbar.addWidget(self.element_combo)

        self._next_act = QtGui.QAction("Next", self)
        self._next_act.setIcon(qta.icon("fa5s.chevron-right"))
        self._next_act.setShortcut(QtGui.QKeySequence(QtCore.Qt.Key.Key_Right))
        self._next_act.triggered.connect(lambda: self._step(1))
        toolbar.addAction(self._next_act)

        toolbar.addSeparator()
        self._animate_act = QtGui.QAction("Animate electrons", self)
        self._animate_act.setIcon(qta.icon("fa5s.sync-alt"))
        self._animate_act.setCheckable(True)
        self._animate_act.setChecked(True)
        self._animate_act.toggled.connect(lambda on: self.viewer.set_animated(on))
        toolbar.addAction(self._animate_act)

        self._reshuffle_act = QtGui.QAction("Reshuffle nucleus", self)
        self._reshuffle_act.setIcon(qta.icon("fa5s.random"))
        self._reshuffle_act.triggered.connect(self._rebuild_scene)
        toolbar.addAction(self._reshuffle_act)

    def _build_menus(self) -> None:
        view_menu = self.menuBar().addMenu("View")
        theme_menu = view_menu.addMenu("Theme")
        theme_group = QtGui.QActionGroup(self)
        theme_group.setExclusive(True)
        for name in THEME_TOKENS:
            action = QtGui.QAction(name, self)
            action.setCheckable(True)
            action.setChecked(name == self._theme_name)
            action.triggered.connect(lambda checked, n=name: self.apply_theme(n))
            theme_group.addAction(action)
            theme_menu.addAction(action)
        view_menu.addSeparator()
        view_menu.addAction(self._animate_act)
        view_menu.addAction(self._reshuffle_act)

    def apply_theme(self, theme_name: str) -> None:
        self._theme_name = theme_name
        self._settings.setValue("theme", theme_name)
        tokens = get_theme_tokens(theme_name)
        app = QtWidgets.QApplication.instance()
        if app:
            apply_theme_tokens(app, tokens)
        self.viewer.apply_theme(tokens)
        self.details.apply_theme(tokens)
        self.table.apply_theme(tokens)

    @property
    def theme_name(self) -> str:
        return self._theme_name

    def _on_combo_changed(self, index: int) -> None:
        if 0 <= index < len(self._elements):
            self.select_element(self._elements[index])

    def _step(self, delta: int) -> None:
        if self.current_element is None:
            return
        index = self._elements.index(self.current_element) + delta
        if 0 <= index < len(self._elements):
            self.select_element(self._elements[index])

    def select_element(self, element: ElementRecord) -> None:
        self.current_element = element
        index = self._elements.index(element)
        self.element_combo.blockSignals(True)
        self.element_combo.setCurrentIndex(index)
        self.element_combo.blockSignals(False)
        self._prev_act.setEnabled(index > 0)
        self._next_act.setEnabled(index < len(self._elements) - 1)
        self.table.set_selected(element)

        self._rebuild_scene()
        self.details.set_element(element)
        self.insights.request(element)
        self.statusBar().showMessage(f"Selected {element.label()}")

    def _rebuild_scene(self) -> None:
        if self.current_element is None:
            return
        try:
            scene = build_scene(self.current_element, rng=self._rng)
        except ElementDataError as exc:
            logger.error("Cannot build a scene for %s: %s", self.current_element.symbol, exc)
            scene = None
        self.viewer.set_scene(scene)

    def _on_insight_changed(self, state: InsightState) -> None:
        self.details.set_insight_state(state)
