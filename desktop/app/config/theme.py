"""QSS theme built from semantic color tokens"""

COLORS = {
    "accent":         "#0F766E",
    "accent_hover":   "#115E59",
    "window":         "#F5F7F6",
    "surface":        "#FFFFFF",
    "text":           "#1F2933",
    "muted":          "#66788A",
    "outline":        "#D5DDE3",
    "danger":         "#B42318",
    "status_bg":      "#0B1F1C",
    "status_text":    "#D1FAE5",
}

STYLESHEET = f"""
QWidget {{
    font-family: "Segoe UI", "SF Pro Text", "Helvetica Neue", sans-serif;
    font-size: 13px;
    color: {COLORS['text']};
    background-color: {COLORS['window']};
}}

QGroupBox {{
    background-color: {COLORS['surface']};
    border: 1px solid {COLORS['outline']};
    border-radius: 6px;
    margin-top: 10px;
    padding: 14px 10px 10px 10px;
    font-weight: 600;
}}
QGroupBox::title {{
    subcontrol-origin: margin;
    left: 12px;
    padding: 0 4px;
}}

QListWidget#file_list {{
    background-color: {COLORS['surface']};
    border: 1px solid {COLORS['outline']};
    border-radius: 6px;
}}

QPushButton {{
    padding: 6px 16px;
    border: 1px solid {COLORS['outline']};
    border-radius: 6px;
    background-color: {COLORS['surface']};
}}
QPushButton#btn_start {{
    background-color: {COLORS['accent']};
    color: white;
    border: none;
    font-weight: 600;
}}
QPushButton#btn_start:hover {{
    background-color: {COLORS['accent_hover']};
}}
QPushButton#btn_cancel {{
    background-color: {COLORS['danger']};
    color: white;
    border: none;
}}
QPushButton#btn_start:disabled, QPushButton#btn_cancel:disabled {{
    background-color: {COLORS['outline']};
    color: {COLORS['muted']};
}}

QProgressBar {{
    border: 1px solid {COLORS['outline']};
    border-radius: 6px;
    text-align: center;
    height: 18px;
}}
QProgressBar::chunk {{
    background-color: {COLORS['accent']};
    border-radius: 5px;
}}

#log_panel, #log_text {{
    background-color: {COLORS['status_bg']};
    color: {COLORS['status_text']};
}}
#log_text {{
    border: none;
    font-family: "Menlo", "Consolas", monospace;
    font-size: 12px;
    padding: 6px;
}}

QStatusBar {{
    border-top: 1px solid {COLORS['outline']};
    color: {COLORS['muted']};
    font-size: 12px;
}}
"""
