import plotly.graph_objects as go

from .theme import CARD_BG_LIGHT, GRID_COLOR, SUBTLE_TEXT, TEXT_COLOR


def add_grid(fig: go.Figure) -> go.Figure:
    """Light grid and card background shared by every chart in the case log."""
    axis_style = dict(
        showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
        showline=True, linecolor=GRID_COLOR,
        tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR),
    )
    fig.update_xaxes(**axis_style)
    fig.update_yaxes(**axis_style)
    fig.update_layout(plot_bgcolor=CARD_BG_LIGHT, paper_bgcolor=CARD_BG_LIGHT,
                      font=dict(family="Segoe UI, sans-serif", size=12, color=TEXT_COLOR),
                      title_font=dict(color=TEXT_COLOR))
    return fig
