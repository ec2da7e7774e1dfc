"""Plotly rendering of the forecast trend lines."""

import logging
from pathlib import Path

import plotly.graph_objects as go

log = logging.getLogger(__name__)

# DPP, KMT, TPP, then translucent versions for the average lines
CHART_COLORS = ['#32D74B', '#0A84FF', '#64D2FF', '#32D74B40', '#0A84FF40', '#64D2FF60']

DASH_STYLES = {'solid': 'solid', 'dashed': 'dash', 'dotted': 'dot'}


def style_chart(fig):
    fig.update_layout(
        font_family="-apple-system, BlinkMacSystemFont, sans-serif", font_color="#ffffff",
        paper_bgcolor='rgba(0,0,0,0)', plot_bgcolor='rgba(0,0,0,0)',
        margin=dict(t=100, b=50, l=50, r=20),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="center", x=0.5,
                    font=dict(color="rgba(255,255,255,0.8)", size=11), bgcolor='rgba(0,0,0,0)'),
        hoverlabel=dict(bgcolor="rgba(30,30,30,0.8)", bordercolor="rgba(255,255,255,0.2)",
                        font_color="#ffffff"),
        hovermode='x unified',
    )
    fig.update_xaxes(type='category', gridcolor='rgba(255,255,255,0.1)',
                     tickfont=dict(color='rgba(255,255,255,0.6)', size=12))
    fig.update_yaxes(ticksuffix='%', gridcolor='rgba(255,255,255,0.05)',
                     tickfont=dict(color='rgba(255,255,255,0.6)', size=12))
    return fig


def build_figure(bundle, title='2024 Election Trends'):
    """One line per series; None points are left as gaps."""
    x = [d.isoformat() for d in bundle.x_axis]
    fig = go.Figure()
    for i, s in enumerate(bundle.series):
        fig.add_trace(go.Scatter(
            x=x, y=list(s.data), name=s.name, mode='lines+markers',
            line=dict(color=CHART_COLORS[i % len(CHART_COLORS)], width=s.width,
                      dash=DASH_STYLES.get(s.dash, 'solid'),
                      shape='spline' if s.smooth else 'linear'),
            marker=dict(size=8, line=dict(color='#ffffff', width=2)),
            connectgaps=False,
        ))
    fig.update_layout(title=dict(text=title, x=0.5, font=dict(size=24)))
    return style_chart(fig)


def write_chart(bundle, path, title='2024 Election Trends'):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_figure(bundle, title).write_html(str(path), include_plotlyjs='cdn')
    log.info(f'Written: {path}')
    return path
