"""
Visualization
=============
Static plots of finished trajectories:
  1. Side and top view of one trajectory (launch, apex, impact marked)
  2. Drag vs drag-free comparison
  3. Wind effects (several runs overlaid)

These only read a TrajectoryResult; nothing here feeds back into the
integrator.
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from typing import Dict
import os

from .integrator import TrajectoryResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}

def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def _save(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Single Trajectory
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(result: TrajectoryResult, save_path: str = None,
                    show: bool = False) -> plt.Figure:
    """Side view (altitude vs downrange) and top view (crossrange vs downrange)."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)
    ax_side, ax_top = axes

    color = STYLE['accent_colors'][0]
    ax_side.plot(result.x, result.y, color=color, linewidth=2.5,
                 label=result.method.replace('_', '-'))
    ax_top.plot(result.x, result.z, color=color, linewidth=2.5)

    ax_side.plot(0, 0, 'o', color='#00e676', markersize=10, label='Launch', zorder=5)
    idx_max = int(np.argmax(result.y))
    ax_side.plot(result.x[idx_max], result.y[idx_max], '^',
                 color='#ffeb3b', markersize=10, label='Apex', zorder=5)

    if result.impact is not None:
        ax_side.plot(result.impact.x, 0, 'x', color='#ff5252', markersize=12,
                     markeredgewidth=3, label='Impact', zorder=5)
        ax_top.plot(result.impact.x, result.impact.z, 'x', color='#ff5252',
                    markersize=12, markeredgewidth=3, zorder=5)

    ax_side.set_xlabel('Downrange x (m)', fontsize=12)
    ax_side.set_ylabel('Altitude y (m)', fontsize=12)
    ax_side.set_title(f'Side View (v₀={result.launch.v0:.0f} m/s, '
                      f'θ={result.launch.elevation_deg:.0f}°)',
                      fontsize=13, fontweight='bold')
    ax_side.set_ylim(bottom=0)
    _legend(ax_side, loc='upper right', fontsize=10)

    ax_top.set_xlabel('Downrange x (m)', fontsize=12)
    ax_top.set_ylabel('Crossrange z (m)', fontsize=12)
    ax_top.set_title(f'Top View (azimuth {result.launch.azimuth_deg:.0f}°)',
                     fontsize=13, fontweight='bold')
    ax_top.axhline(y=0, color='#555', linestyle='--', alpha=0.5)

    plt.tight_layout()
    _save(fig, save_path)
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Drag vs Drag-Free
# ══════════════════════════════════════════════════════════════════════════

def plot_drag_comparison(drag_result: TrajectoryResult,
                         no_drag_result: TrajectoryResult,
                         save_path: str = None) -> plt.Figure:
    """Overlay of the same launch with and without air resistance."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)

    ax = axes[0]
    ax.plot(no_drag_result.x, no_drag_result.y, '--', color='#888', linewidth=2,
            label=f'No drag  R={no_drag_result.range_total:.1f} m')
    ax.plot(drag_result.x, drag_result.y, color=STYLE['accent_colors'][0],
            linewidth=2, label=f'Drag  R={drag_result.range_total:.1f} m')
    ax.set_xlabel('Downrange x (m)')
    ax.set_ylabel('Altitude y (m)')
    ax.set_title('Trajectory', fontweight='bold')
    ax.set_ylim(bottom=0)
    _legend(ax, fontsize=10)

    ax = axes[1]
    ax.plot(no_drag_result.time, no_drag_result.speed, '--', color='#888',
            linewidth=2, label='No drag')
    ax.plot(drag_result.time, drag_result.speed, color=STYLE['accent_colors'][1],
            linewidth=2, label='Drag')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Speed (m/s)')
    ax.set_title('Speed vs Time', fontweight='bold')
    _legend(ax, fontsize=10)

    fig.suptitle('Effect of Air Resistance', fontsize=14, fontweight='bold',
                 color=STYLE['text_color'], y=1.02)
    fig.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Wind Effects
# ══════════════════════════════════════════════════════════════════════════

def plot_wind_effects(results: Dict[str, TrajectoryResult],
                      save_path: str = None) -> plt.Figure:
    """Side and top views of several runs keyed by label."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)
    colors = STYLE['accent_colors']

    for (label, res), color in zip(results.items(), colors):
        axes[0].plot(res.x, res.y, color=color, linewidth=2, label=label)
        axes[1].plot(res.x, res.z, color=color, linewidth=2)

    axes[0].set_xlabel('Downrange x (m)')
    axes[0].set_ylabel('Altitude y (m)')
    axes[0].set_title('Effect of Wind on Trajectory', fontweight='bold')
    axes[0].set_ylim(bottom=0)
    _legend(axes[0], fontsize=10)

    axes[1].set_xlabel('Downrange x (m)')
    axes[1].set_ylabel('Crossrange z (m)')
    axes[1].set_title('Wind Drift (Top View)', fontweight='bold')
    axes[1].axhline(y=0, color='#555', linestyle='--', alpha=0.5)

    fig.tight_layout()
    _save(fig, save_path)
    return fig
