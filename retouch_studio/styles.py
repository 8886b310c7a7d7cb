from .config_manager import CONFIG

THEME = CONFIG['theme']


def get_stylesheet(theme=None):
    theme = theme or THEME
    return f"""
    /* === GLOBAL RESET === */
    QWidget {{
        font-family: '{theme['font_family_ui']}', sans-serif;
        font-size: {theme['font_size']};
        color: {theme['text_header']};
    }}

    /* === MAIN WINDOW === */
    QMainWindow {{
        background-color: {theme['window_bg']};
    }}

    /* === DOCK WIDGETS === */
    QDockWidget {{
        border: none;
    }}

    QDockWidget::title {{
        background: {theme['panel_bg']};
        padding: 6px;
    }}

    /* === PANEL CONTENT === */
    QFrame#PanelContent {{
        background-color: {theme['panel_bg']};
        border-bottom: 1px solid {theme['border_color']};
    }}

    QLabel#SectionLabel {{
        font-weight: bold;
        font-size: 10px;
        color: {theme['btn_text']};
    }}

    /* === BUTTONS === */
    QPushButton {{
        background-color: {theme['btn_default']};
        color: {theme['btn_text']};
        border-radius: 6px;
        padding: 6px;
        font-weight: 600;
        border: none;
    }}

    QPushButton:hover, QPushButton:checked {{
        background-color: {theme['btn_accent']};
        color: white;
    }}

    QPushButton:disabled {{
        color: {theme['border_color']};
    }}

    /* === LISTS & INPUTS === */
    QListWidget, QLineEdit, QPlainTextEdit, QComboBox, QSpinBox {{
        background-color: {theme['window_bg']};
        border: 1px solid {theme['border_color']};
        border-radius: 4px;
    }}
    """
