from __future__ import annotations

from PySide6 import QtGui, QtWidgets


def relative_luminance(color: QtGui.QColor) -> float:
    def channel(value: float) -> float:
        value /= 255.0
        return value / 12.92 if value <= 0.03928 else ((value + 0.055) / 1.055) ** 2.4

    return (
        0.2126 * channel(color.red())
        + 0.7152 * channel(color.green())
        + 0.0722 * channel(color.blue())
    )


def contrast_text(base: QtGui.QColor, light: QtGui.QColor, dark: QtGui.QColor) -> QtGui.QColor:
    return dark if relative_luminance(base) > 0.45 else light


def build_palette(tokens: dict) -> QtGui.QPalette:
    colors = tokens["colors"]
    palette = QtGui.QPalette()
    palette.setColor(QtGui.QPalette.Window, QtGui.QColor(colors["bg"]))
    palette.setColor(QtGui.QPalette.Base, QtGui.QColor(colors["surface"]))
    palette.setColor(QtGui.QPalette.AlternateBase, QtGui.QColor(colors["surfaceAlt"]))
    palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(colors["text"]))
    palette.setColor(QtGui.QPalette.Text, QtGui.QColor(colors["text"]))
    palette.setColor(QtGui.QPalette.Button, QtGui.QColor(colors["surfaceAlt"]))
    palette.setColor(QtGui.QPalette.ButtonText, QtGui.QColor(colors["text"]))
    palette.setColor(QtGui.QPalette.BrightText, QtGui.QColor(colors["accent"]))
    highlight = QtGui.QColor(colors["accent"])
    palette.setColor(QtGui.QPalette.Highlight, highlight)
    highlight_text = QtGui.QColor("#0f172a") if relative_luminance(highlight) > 0.5 else QtGui.QColor("#f8fafc")
    palette.setColor(QtGui.QPalette.HighlightedText, highlight_text)
    palette.setColor(QtGui.QPalette.ToolTipBase, QtGui.QColor(colors["surface"]))
    palette.setColor(QtGui.QPalette.ToolTipText, QtGui.QColor(colors["text"]))
    return palette


def build_stylesheet(tokens: dict) -> str:
    colors = tokens["colors"]
    radii = tokens["radii"]
    spacing = tokens["spacing"]
    font = tokens["font"]
    focus = colors["focusRing"]
    return f"""
    * {{
        font-family: "{font["family"]}";
        font-size: {font["baseSize"]}pt;
    }}
    QMainWindow {{
        background-color: {colors["bg"]};
    }}
    QWidget {{
        color: {colors["text"]};
    }}
    QFrame#card {{
        background: {colors["surface"]};
        border: 1px solid {colors["border"]};
        border-radius: {radii["lg"]}px;
    }}
    QFrame#statCard {{
        background: {colors["surfaceAlt"]};
        border: 1px solid {colors["border"]};
        border-radius: {radii["md"]}px;
    }}
    QLabel#sectionTitle {{
        color: {colors["textMuted"]};
        font-family: "{font["monoFamily"]}";
        letter-spacing: 2px;
    }}
    QLabel#statLabel {{
        color: {colors["textMuted"]};
    }}
    QLabel#insightHeading {{
        color: {colors["accent"]};
        font-weight: 600;
    }}
    QPushButton, QToolButton {{
        background: {colors["surfaceAlt"]};
        border: 1px solid {colors["border"]};
        border-radius: {radii["sm"]}px;
        padding: {spacing["xs"]}px {spacing["md"]}px;
        min-height: 28px;
    }}
    QPushButton:hover, QToolButton:hover {{
        border-color: {colors["accent"]};
    }}
    QPushButton:pressed, QToolButton:pressed {{
        background: {colors["surface"]};
        border-color: {colors["accentHover"]};
    }}
    QPushButton:focus, QToolButton:focus {{
        outline: none;
        border: 1px solid {focus};
    }}
    QComboBox {{
        background: {colors["surface"]};
        border: 1px solid {colors["border"]};
        border-radius: {radii["md"]}px;
        padding: {spacing["xs"]}px {spacing["sm"]}px;
        min-height: 28px;
    }}
    QComboBox:hover {{
        border-color: {colors["accent"]};
    }}
    QComboBox:focus {{
        border: 1px solid {focus};
    }}
    QComboBox::drop-down {{
        width: 26px;
        border-left: 1px solid {colors["border"]};
    }}
    QScrollArea {{
        border: none;
        background: transparent;
    }}
    QToolTip {{
        background: {colors["surface"]};
        color: {colors["text"]};
        border: 1px solid {colors["border"]};
        padding: {spacing["xs"]}px;
    }}
    """


def apply_theme(app: QtWidgets.QApplication, tokens: dict) -> None:
    app.setPalette(build_palette(tokens))
    app.setStyleSheet(build_stylesheet(tokens))
