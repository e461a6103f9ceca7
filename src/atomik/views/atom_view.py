from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from atomik.layout.scene import DEFAULT_LAYOUT, LayoutConfig, NucleonKind, Scene
from atomik.theming.theme_tokens import PARTICLE_COLORS

ELECTRON_RADIUS = 4.0
ELECTRON_GLOW_RADIUS = 8.0
PROTON_LABEL_MIN_RADIUS = 5.0
OVERLAY_HEIGHT = 84
GRID_SPACING = 20


def _radial_brush(radius: float, inner: str, outer: str) -> QtGui.QBrush:
    gradient = QtGui.QRadialGradient(QtCore.QPointF(0, 0), radius)
    gradient.setColorAt(0.0, QtGui.QColor(inner))
    gradient.setColorAt(1.0, QtGui.QColor(outer))
    return QtGui.QBrush(gradient)


class AtomViewer(QtWidgets.QWidget):
    """Draws a Scene: dashed orbits, rotating electron groups and the nucleus cluster.

    The widget makes no layout decisions. Geometry is read from the Scene in
    canvas units and scaled to fit; each shell's electrons rotate as one
    group at ``360 / rotation_period`` degrees per second.
    """

    FRAME_INTERVAL_MS = 16

    def __init__(self, parent: QtWidgets.QWidget | None = None, config: LayoutConfig = DEFAULT_LAYOUT) -> None:
        super().__init__(parent)
        self._scene: Scene | None = None
        self._config = config
        self._animated = True
        self._clock = QtCore.QElapsedTimer()
        self._clock.start()
        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(self.FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self.update)
        self._theme_colors = {
            "sceneBg": "#0f172a",
            "sceneBgEdge": "#020617",
            "surface": "#0f172a",
            "border": "#334155",
            "text": "#e2e8f0",
            "textMuted": "#94a3b8",
            "accent": "#818cf8",
        }
        self.setMinimumSize(360, 400)
        self.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding)

    def apply_theme(self, tokens: dict) -> None:
        self._theme_colors.update(tokens.get("colors", {}))
        self.update()

    def set_scene(self, scene: Scene | None) -> None:
        self._scene = scene
        self._clock.restart()
        self.update()

    def scene(self) -> Scene | None:
        return self._scene

    def set_animated(self, animated: bool) -> None:
        self._animated = animated
        if animated and self.isVisible():
            self._timer.start()
        else:
            self._timer.stop()
        self.update()

    def showEvent(self, event: QtGui.QShowEvent) -> None:
        super().showEvent(event)
        if self._animated:
            self._timer.start()

    def hideEvent(self, event: QtGui.QHideEvent) -> None:
        self._timer.stop()
        super().hideEvent(event)

    def _elapsed_seconds(self) -> float:
        return self._clock.elapsed() / 1000.0 if self._animated else 0.0

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        if not painter.isActive():
            return
        try:
            painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
            self._draw_background(painter)
            if self._scene is None:
                painter.setPen(QtGui.QPen(QtGui.QColor(self._theme_colors["textMuted"])))
                painter.drawText(self.rect(), QtCore.Qt.AlignmentFlag.AlignCenter, "No structure to display")
                return

            w, h = self.width(), self.height()
            scene_h = max(h - OVERLAY_HEIGHT, 1)
            scale = min(w, scene_h) / self._config.view_size

            painter.save()
            painter.translate(w / 2, scene_h / 2)
            painter.scale(scale, scale)
            self._draw_orbits(painter)
            self._draw_electrons(painter, self._elapsed_seconds())
            self._draw_nucleus(painter)
            painter.restore()

            self._draw_composition(painter)
        finally:
            painter.end()

    def _draw_background(self, painter: QtGui.QPainter) -> None:
        rect = QtCore.QRectF(self.rect())
        gradient = QtGui.QRadialGradient(rect.center(), max(rect.width(), rect.height()) * 0.7)
        gradient.setColorAt(0.0, QtGui.QColor(self._theme_colors["sceneBg"]))
        gradient.setColorAt(1.0, QtGui.QColor(self._theme_colors["sceneBgEdge"]))
        painter.fillRect(rect, QtGui.QBrush(gradient))

        dot = QtGui.QColor("#64748b")
        dot.setAlphaF(0.1)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(QtGui.QBrush(dot))
        for x in range(0, self.width(), GRID_SPACING):
            for y in range(0, self.height(), GRID_SPACING):
                painter.drawEllipse(QtCore.QPointF(x, y), 1, 1)

    def _draw_orbits(self, painter: QtGui.QPainter) -> None:
        color = QtGui.QColor(PARTICLE_COLORS["orbit"]["stroke"])
        color.setAlphaF(0.3)
        pen = QtGui.QPen(color, 1)
        pen.setDashPattern([4, 4])
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        for shell in self._scene.shells:
            painter.drawEllipse(QtCore.QPointF(0, 0), shell.radius, shell.radius)

    def _draw_electrons(self, painter: QtGui.QPainter, elapsed: float) -> None:
        colors = PARTICLE_COLORS["electron"]
        glow = QtGui.QColor(colors["glow"])
        glow.setAlphaF(0.4)
        body = _radial_brush(ELECTRON_RADIUS, colors["inner"], colors["outer"])
        font = painter.font()
        font.setPixelSize(6)
        font.setBold(True)
        painter.setFont(font)
        label_rect = QtCore.QRectF(-ELECTRON_RADIUS, -ELECTRON_RADIUS, 2 * ELECTRON_RADIUS, 2 * ELECTRON_RADIUS)

        for shell in self._scene.shells:
            rotation = (elapsed * shell.angular_velocity) % 360.0
            for electron in shell.electrons:
                painter.save()
                painter.rotate(rotation + electron.angle_degrees)
                painter.translate(shell.radius, 0)
                painter.setPen(QtCore.Qt.NoPen)
                painter.setBrush(glow)
                painter.drawEllipse(QtCore.QPointF(0, 0), ELECTRON_GLOW_RADIUS, ELECTRON_GLOW_RADIUS)
                painter.setBrush(body)
                painter.drawEllipse(QtCore.QPointF(0, 0), ELECTRON_RADIUS, ELECTRON_RADIUS)
                painter.setPen(QtGui.QPen(QtGui.QColor("white")))
                painter.drawText(label_rect, QtCore.Qt.AlignmentFlag.AlignCenter, "-")
                painter.restore()

    def _draw_nucleus(self, painter: QtGui.QPainter) -> None:
        font = painter.font()
        font.setBold(True)
        for nucleon in self._scene.nucleons:
            key = "proton" if nucleon.kind is NucleonKind.PROTON else "neutron"
            colors = PARTICLE_COLORS[key]
            painter.save()
            painter.translate(nucleon.x, nucleon.y)
            pen = QtGui.QPen(QtGui.QColor(colors["stroke"]))
            pen.setWidthF(0.5)
            painter.setPen(pen)
            painter.setBrush(_radial_brush(nucleon.radius, colors["inner"], colors["outer"]))
            painter.drawEllipse(QtCore.QPointF(0, 0), nucleon.radius, nucleon.radius)
            if nucleon.kind is NucleonKind.PROTON and nucleon.radius > PROTON_LABEL_MIN_RADIUS:
                font.setPixelSize(max(1, round(nucleon.radius)))
                painter.setFont(font)
                painter.setPen(QtGui.QPen(QtGui.QColor("white")))
                r = nucleon.radius
                painter.drawText(QtCore.QRectF(-r, -r, 2 * r, 2 * r), QtCore.Qt.AlignmentFlag.AlignCenter, "+")
            painter.restore()

    def _draw_composition(self, painter: QtGui.QPainter) -> None:
        composition = self._scene.composition
        element = self._scene.element
        panel = QtCore.QRectF(12, self.height() - OVERLAY_HEIGHT, self.width() - 24, OVERLAY_HEIGHT - 12)

        background = QtGui.QColor(self._theme_colors["surface"])
        background.setAlphaF(0.8)
        painter.setPen(QtGui.QPen(QtGui.QColor(self._theme_colors["border"]), 1))
        painter.setBrush(background)
        painter.drawRoundedRect(panel, 12, 12)

        header = panel.adjusted(12, 6, -12, 0)
        header.setHeight(16)
        font = painter.font()
        font.setPixelSize(10)
        font.setBold(False)
        painter.setFont(font)
        painter.setPen(QtGui.QColor(self._theme_colors["textMuted"]))
        painter.drawText(header, QtCore.Qt.AlignmentFlag.AlignLeft | QtCore.Qt.AlignmentFlag.AlignVCenter, "SUBATOMIC COMPOSITION")
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QtGui.QColor(self._theme_colors["accent"]))
        painter.drawText(
            header,
            QtCore.Qt.AlignmentFlag.AlignRight | QtCore.Qt.AlignmentFlag.AlignVCenter,
            f"{element.name} ({element.symbol})",
        )

        columns = (
            (composition.protons, "Protons", "(+) Charge", PARTICLE_COLORS["proton"]["inner"]),
            (composition.neutrons, "Neutrons", "(0) Charge", PARTICLE_COLORS["neutron"]["inner"]),
            (composition.electrons, "Electrons", "(-) Charge", PARTICLE_COLORS["electron"]["inner"]),
        )
        body = panel.adjusted(8, 24, -8, -4)
        width = body.width() / len(columns)
        for idx, (count, label, charge, color) in enumerate(columns):
            cell = QtCore.QRectF(body.left() + idx * width, body.top(), width, body.height())
            font.setPixelSize(20)
            font.setBold(True)
            painter.setFont(font)
            painter.setPen(QtGui.QColor(color))
            painter.drawText(cell.adjusted(0, 0, 0, -cell.height() / 2), QtCore.Qt.AlignmentFlag.AlignCenter, str(count))
            font.setPixelSize(9)
            font.setBold(False)
            painter.setFont(font)
            painter.setPen(QtGui.QColor(self._theme_colors["text"]))
            painter.drawText(
                cell.adjusted(0, cell.height() / 2, 0, 0),
                QtCore.Qt.AlignmentFlag.AlignHCenter | QtCore.Qt.AlignmentFlag.AlignTop,
                f"{label.upper()}  {charge}",
            )
