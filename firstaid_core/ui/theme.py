import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#2563eb"
SECONDARY_COLOR  = "#0ea5e9"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1f2937"
SUBTLE_TEXT      = "#4b5563"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#f5f9ff"
CARD_BG_LIGHT    = "#ffffff"


def apply_css():
    """Shared page styling for the case log."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Segoe UI','Inter','SF Pro Display',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem 2rem; border-radius: 16px; margin-bottom: 1.5rem;
            box-shadow: 0 8px 32px rgba(37,99,235,.25);
        }}
        .mode-pill {{
            display: inline-block; padding: .2rem .8rem; border-radius: 999px;
            font-size: .85rem; font-weight: 600; border: 1px solid {GRID_COLOR};
        }}
        .mode-remote {{ background: {SUCCESS_COLOR}22; color: {SUCCESS_COLOR}; }}
        .mode-local {{ background: {WARNING_COLOR}22; color: {WARNING_COLOR}; }}
        [data-testid="stMetric"] {{
            background: {CARD_BG_LIGHT}; padding: 14px 18px; border-radius: 12px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.06); border: 1px solid {GRID_COLOR};
        }}
        .stButton button {{
            border-radius: 10px; font-weight: 600;
        }}
        h1,h2,h3,h4 {{ color: {TEXT_COLOR}; font-weight: 600; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)


def header(title: str, subtitle: str, icon: str = "🩹"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:2.6rem;">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2rem; color:white;">{title}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1rem">{subtitle}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def storage_mode_pill(remote_configured: bool):
    if remote_configured:
        label, css = "☁️ Cloud store connected", "mode-remote"
    else:
        label, css = "💾 Local-only mode", "mode-local"
    st.markdown(f'<span class="mode-pill {css}">{label}</span>', unsafe_allow_html=True)
