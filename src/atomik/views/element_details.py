from __future__ import annotations

import qtawesome as qta
from PySide6 import QtCore, QtGui, QtWidgets

from atomik.chem.elements import ElementRecord
from atomik.insight.session import InsightState
from atomik.theming.apply_theme import contrast_text
from atomik.theming.theme_tokens import category_color


class StatCard(QtWidgets.QFrame):
    def __init__(self, icon_name: str, label: str, monospace: bool = False, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("statCard")
        self._icon_name = icon_name
        self._monospace = monospace

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(4)
        header = QtWidgets.QHBoxLayout()
        header.setSpacing(6)
        self._icon = QtWidgets.QLabel()
        self._icon.setFixedSize(16, 16)
        self._label = QtWidgets.QLabel(label.upper())
        self._label.setObjectName("statLabel")
        header.addWidget(self._icon)
        header.addWidget(self._label)
        header.addStretch()
        layout.addLayout(header)

        self.value_label = QtWidgets.QLabel("-")
        self.value_label.setWordWrap(True)
        self.value_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.value_label)

    def apply_theme(self, tokens: dict) -> None:
        colors = tokens.get("colors", {})
        self._icon.setPixmap(qta.icon(self._icon_name, color=colors.get("textMuted", "#94a3b8")).pixmap(16, 16))
        family = tokens.get("font", {}).get("monoFamily", "Consolas")
        font_rule = f"font-family: '{family}';" if self._monospace else ""
        self.value_label.setStyleSheet(f"color: {colors.get('text', '#e2e8f0')}; font-weight: 600; {font_rule}")

    def set_value(self, value: str) -> None:
        self.value_label.setText(value)


class InsightPanel(QtWidgets.QFrame):
    """Chemist's insight card: loading, result and no-data pages."""

    LOADING_PAGE = 0
    CONTENT_PAGE = 1
    EMPTY_PAGE = 2

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)

        header = QtWidgets.QHBoxLayout()
        self._icon = QtWidgets.QLabel()
        self._icon.setFixedSize(20, 20)
        self._title = QtWidgets.QLabel("CHEMIST'S INSIGHT (AI)")
        self._title.setObjectName("insightHeading")
        header.addWidget(self._icon)
        header.addWidget(self._title)
        header.addStretch()
        layout.addLayout(header)

        self.pages = QtWidgets.QStackedWidget()
        self.pages.addWidget(self._build_loading_page())
        self.pages.addWidget(self._build_content_page())
        self.pages.addWidget(self._build_empty_page())
        layout.addWidget(self.pages, 1)
        self.pages.setCurrentIndex(self.EMPTY_PAGE)

    def _build_loading_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.addStretch()
        busy = QtWidgets.QProgressBar()
        busy.setRange(0, 0)
        busy.setTextVisible(False)
        busy.setMaximumHeight(6)
        layout.addWidget(busy)
        self._loading_label = QtWidgets.QLabel("Analyzing elemental properties...")
        self._loading_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._loading_label)
        layout.addStretch()
        return page

    def _build_content_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self._fact_box = QtWidgets.QFrame()
        self._fact_box.setObjectName("statCard")
        fact_layout = QtWidgets.QVBoxLayout(self._fact_box)
        fact_heading = QtWidgets.QLabel("Did you know?")
        fact_heading.setObjectName("insightHeading")
        self.fun_fact_label = QtWidgets.QLabel()
        self.fun_fact_label.setWordWrap(True)
        fact_layout.addWidget(fact_heading)
        fact_layout.addWidget(self.fun_fact_label)
        layout.addWidget(self._fact_box)

        self.real_world_label = self._add_section(layout, "Real World Application:")
        self.bonding_label = self._add_section(layout, "Bonding Behavior:")
        layout.addStretch()
        return page

    def _add_section(self, layout: QtWidgets.QVBoxLayout, heading: str) -> QtWidgets.QLabel:
        title = QtWidgets.QLabel(heading)
        title.setObjectName("statLabel")
        body = QtWidgets.QLabel()
        body.setWordWrap(True)
        layout.addWidget(title)
        layout.addWidget(body)
        return body

    def _build_empty_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(page)
        layout.addStretch()
        self._empty_icon = QtWidgets.QLabel()
        self._empty_icon.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_icon)
        self._empty_label = QtWidgets.QLabel("Select an API Key to view insights")
        self._empty_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_label)
        layout.addStretch()
        return page

    def apply_theme(self, tokens: dict) -> None:
        colors = tokens.get("colors", {})
        accent = colors.get("accent", "#818cf8")
        muted = colors.get("textMuted", "#94a3b8")
        self._icon.setPixmap(qta.icon("fa5s.flask", color=accent).pixmap(20, 20))
        self._empty_icon.setPixmap(qta.icon("fa5s.info-circle", color=muted).pixmap(24, 24))
        for label in (self._loading_label, self._empty_label):
            label.setStyleSheet(f"color: {muted};")

    def set_state(self, state: InsightState) -> None:
        if state.loading:
            self.pages.setCurrentIndex(self.LOADING_PAGE)
            return
        if state.insight is None:
            self.pages.setCurrentIndex(self.EMPTY_PAGE)
            return
        self.fun_fact_label.setText(state.insight.fun_fact)
        self.real_world_label.setText(state.insight.real_world_use)
        self.bonding_label.setText(state.insight.bonding_behavior)
        self.pages.setCurrentIndex(self.CONTENT_PAGE)


class ElementDetailsPanel(QtWidgets.QWidget):
    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.element: ElementRecord | None = None
        self._tokens: dict = {}

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(16)

        self.header = QtWidgets.QFrame()
        self.header.setObjectName("elementHeader")
        header_layout = QtWidgets.QGridLayout(self.header)
        header_layout.setContentsMargins(20, 20, 20, 20)
        self.name_label = QtWidgets.QLabel()
        self.number_label = QtWidgets.QLabel()
        self.symbol_label = QtWidgets.QLabel()
        self.symbol_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignRight | QtCore.Qt.AlignmentFlag.AlignTop)
        self.category_label = QtWidgets.QLabel()
        self.summary_label = QtWidgets.QLabel()
        self.summary_label.setWordWrap(True)
        title_row = QtWidgets.QHBoxLayout()
        title_row.addWidget(self.name_label)
        title_row.addWidget(self.number_label, 0, QtCore.Qt.AlignmentFlag.AlignBottom)
        title_row.addStretch()
        header_layout.addLayout(title_row, 0, 0)
        header_layout.addWidget(self.symbol_label, 0, 1, 3, 1)
        header_layout.addWidget(self.category_label, 1, 0, QtCore.Qt.AlignmentFlag.AlignLeft)
        header_layout.addWidget(self.summary_label, 2, 0)
        header_layout.setColumnStretch(0, 1)
        layout.addWidget(self.header)

        stats = QtWidgets.QGridLayout()
        stats.setSpacing(10)
        self.mass_card = StatCard("fa5s.balance-scale", "Atomic Mass")
        self.config_card = StatCard("fa5s.layer-group", "Configuration", monospace=True)
        self.block_card = StatCard("fa5s.bolt", "Block")
        self.position_card = StatCard("fa5s.atom", "Group / Period")
        for idx, card in enumerate((self.mass_card, self.config_card, self.block_card, self.position_card)):
            stats.addWidget(card, idx // 2, idx % 2)
        layout.addLayout(stats)

        self.insight_panel = InsightPanel()
        layout.addWidget(self.insight_panel, 1)

    def apply_theme(self, tokens: dict) -> None:
        self._tokens = tokens
        for card in (self.mass_card, self.config_card, self.block_card, self.position_card):
            card.apply_theme(tokens)
        self.insight_panel.apply_theme(tokens)
        self._style_header()

    def _style_header(self) -> None:
        if self.element is None:
            return
        base = QtGui.QColor(category_color(self.element.category))
        text = contrast_text(base, QtGui.QColor("#f8fafc"), QtGui.QColor("#0f172a")).name()
        radius = self._tokens.get("radii", {}).get("lg", 20)
        title_size = self._tokens.get("font", {}).get("titleSize", 20)
        self.header.setStyleSheet(
            f"QFrame#elementHeader {{ background: {base.name()}; border-radius: {radius}px; }}"
            f"QLabel {{ color: {text}; background: transparent; }}"
        )
        self.name_label.setStyleSheet(f"font-size: {title_size + 6}pt; font-weight: 700;")
        self.number_label.setStyleSheet("font-size: 14pt;")
        self.symbol_label.setStyleSheet(f"font-size: {title_size * 3}pt; font-weight: 900; color: rgba(255, 255, 255, 40);")
        self.category_label.setStyleSheet(
            "background: rgba(0, 0, 0, 50); border-radius: 10px; padding: 2px 10px; font-weight: 600;"
        )

    def set_element(self, element: ElementRecord) -> None:
        self.element = element
        self.name_label.setText(element.name)
        self.number_label.setText(str(element.atomic_number))
        self.symbol_label.setText(element.symbol)
        self.category_label.setText(element.category.value)
        self.summary_label.setText(element.summary)
        self.mass_card.set_value(f"{element.atomic_mass:g} u")
        self.config_card.set_value(element.electron_configuration)
        self.block_card.set_value(f"{element.block}-block")
        self.position_card.set_value(f"{element.group} / {element.period}")
        self._style_header()

    def set_insight_state(self, state: InsightState) -> None:
        if self.element is not None and state.element is not None and state.element != self.element:
            return
        self.insight_panel.set_state(state)
