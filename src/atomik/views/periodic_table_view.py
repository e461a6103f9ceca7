from __future__ import annotations

from typing import Iterable

from PySide6 import QtCore, QtGui, QtWidgets

from atomik.chem.elements import ElementRecord
from atomik.theming.apply_theme import contrast_text
from atomik.theming.theme_tokens import CATEGORY_COLORS, category_color

LANTHANIDES = range(57, 72)
ACTINIDES = range(89, 104)
F_BLOCK_FIRST_ROW = 8
F_BLOCK_FIRST_COLUMN = 2


def table_position(element: ElementRecord) -> tuple[int, int]:
    """Grid (row, column) of an element, with the f-block split out below the main table."""
    z = element.atomic_number
    if z in LANTHANIDES:
        return F_BLOCK_FIRST_ROW, F_BLOCK_FIRST_COLUMN + (z - LANTHANIDES.start)
    if z in ACTINIDES:
        return F_BLOCK_FIRST_ROW + 1, F_BLOCK_FIRST_COLUMN + (z - ACTINIDES.start)
    return element.period - 1, element.group - 1


class ElementTileButton(QtWidgets.QAbstractButton):
    def __init__(self, element: ElementRecord, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.element = element
        self.setCheckable(True)
        self.setToolTip(element.label())
        self._base_color = QtGui.QColor(category_color(element.category))
        self._text_color = QtGui.QColor("#0f172a")
        self._border_color = QtGui.QColor("#334155")
        self._focus_color = QtGui.QColor("#ffffff")
        self._font_point_size = 9
        self.setMinimumSize(30, 30)
        self.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding)

    def set_theme(self, colors: dict, font_point_size: int) -> None:
        self._border_color = QtGui.QColor(colors.get("border", "#334155"))
        self._focus_color = QtGui.QColor(colors.get("focusRing", "#ffffff"))
        self._text_color = contrast_text(self._base_color, QtGui.QColor("#f8fafc"), QtGui.QColor("#0f172a"))
        self._font_point_size = font_point_size
        self.update()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        if not painter.isActive():
            return
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        rect = self.rect().adjusted(1, 1, -1, -1)
        radius = 4

        base = QtGui.QColor(self._base_color)
        if not (self.isChecked() or self.underMouse()):
            base.setAlphaF(0.8)
        painter.setPen(QtGui.QPen(self._border_color, 1))
        painter.setBrush(QtGui.QBrush(base))
        painter.drawRoundedRect(rect, radius, radius)

        if self.hasFocus() or self.isChecked():
            painter.setPen(QtGui.QPen(self._focus_color, 2))
            painter.setBrush(QtCore.Qt.NoBrush)
            painter.drawRoundedRect(rect.adjusted(1, 1, -1, -1), radius, radius)

        font = painter.font()
        font.setBold(True)
        font.setPointSize(self._font_point_size + 1)
        painter.setFont(font)
        painter.setPen(QtGui.QPen(self._text_color))
        painter.drawText(rect, QtCore.Qt.AlignmentFlag.AlignCenter, self.element.symbol)

        small_font = painter.font()
        small_font.setBold(False)
        small_font.setPointSize(max(self._font_point_size - 3, 6))
        painter.setFont(small_font)
        painter.drawText(
            rect.adjusted(3, 1, -3, -1),
            QtCore.Qt.AlignmentFlag.AlignTop | QtCore.Qt.AlignmentFlag.AlignLeft,
            str(self.element.atomic_number),
        )
        painter.end()

    def enterEvent(self, event: QtCore.QEvent) -> None:
        super().enterEvent(event)
        self.update()

    def leaveEvent(self, event: QtCore.QEvent) -> None:
        super().leaveEvent(event)
        self.update()


class CategoryLegendWidget(QtWidgets.QWidget):
    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._dot_size = 10
        self._labels: list[QtWidgets.QLabel] = []
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(0, 4, 0, 0)
        layout.setSpacing(6)
        layout.addStretch()
        for category, color in CATEGORY_COLORS.items():
            dot = QtWidgets.QLabel()
            dot.setFixedSize(self._dot_size, self._dot_size)
            dot.setStyleSheet(f"background: {color}; border-radius: {self._dot_size // 2}px;")
            label = QtWidgets.QLabel(category.value)
            self._labels.append(label)
            layout.addWidget(dot)
            layout.addWidget(label)
            layout.addSpacing(8)
        layout.addStretch()

    def apply_theme(self, tokens: dict) -> None:
        muted = tokens.get("colors", {}).get("textMuted", "#94a3b8")
        for label in self._labels:
            label.setStyleSheet(f"color: {muted}; font-size: 8pt;")


class PeriodicTableView(QtWidgets.QWidget):
    element_selected = QtCore.Signal(object)

    def __init__(self, elements: Iterable[ElementRecord], parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._tiles: dict[int, ElementTileButton] = {}
        self._placeholders: list[QtWidgets.QLabel] = []
        self._group = QtWidgets.QButtonGroup(self)
        self._group.setExclusive(True)

        grid = QtWidgets.QGridLayout()
        grid.setSpacing(2)
        grid.setContentsMargins(0, 0, 0, 0)
        for element in elements:
            row, col = table_position(element)
            tile = ElementTileButton(element, self)
            tile.clicked.connect(lambda _checked=False, e=element: self.element_selected.emit(e))
            self._group.addButton(tile)
            self._tiles[element.atomic_number] = tile
            grid.addWidget(tile, row, col)

        for row, text in ((5, "57-71"), (6, "89-103")):
            placeholder = QtWidgets.QLabel(text)
            placeholder.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
            self._placeholders.append(placeholder)
            grid.addWidget(placeholder, row, F_BLOCK_FIRST_COLUMN)
        # gap between the main table and the f-block rows
        grid.setRowMinimumHeight(F_BLOCK_FIRST_ROW - 1, 10)

        self.legend = CategoryLegendWidget(self)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(grid, 1)
        layout.addWidget(self.legend)

    def apply_theme(self, tokens: dict) -> None:
        colors = tokens.get("colors", {})
        font_size = tokens.get("font", {}).get("baseSize", 10)
        for tile in self._tiles.values():
            tile.set_theme(colors, font_size - 1)
        for placeholder in self._placeholders:
            placeholder.setStyleSheet(
                f"color: {colors.get('textMuted', '#94a3b8')}; font-size: 7pt;"
                f"border: 1px solid {colors.get('border', '#334155')}; border-radius: 4px;"
            )
        self.legend.apply_theme(tokens)

    def set_selected(self, element: ElementRecord | None) -> None:
        if element is None:
            checked = self._group.checkedButton()
            if checked is not None:
                self._group.setExclusive(False)
                checked.setChecked(False)
                self._group.setExclusive(True)
            return
        tile = self._tiles.get(element.atomic_number)
        if tile is not None:
            tile.setChecked(True)

    def tile(self, atomic_number: int) -> ElementTileButton | None:
        return self._tiles.get(atomic_number)
