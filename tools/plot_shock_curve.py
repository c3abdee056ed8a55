#!/usr/bin/env python3
"""
ショックカーブ補間グラフを生成するスクリプト
制御点と、解像度ごとに分解された送信ステップを重ねて可視化する

使い方:
  python tools/plot_shock_curve.py 2:60 1:60 3:10
  （"秒:強度" を並べる。省略時はサンプルカーブ）
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from datetime import timedelta

import matplotlib
matplotlib.use('Agg')  # GUI不要、ファイル出力のみ
matplotlib.rcParams['axes.unicode_minus'] = False
import matplotlib.pyplot as plt
import numpy as np
from pishock.interpolation import interpolate_curve
from pishock.models import ShockPoint
from pishock.settings import settings

SAMPLE_CURVE = "2:60 1:60 3:10"


def parse_points(args: list[str]) -> list[ShockPoint]:
    points = []
    for arg in args:
        seconds, intensity = arg.split(":")
        points.append(ShockPoint(timedelta(seconds=float(seconds)), int(intensity)))
    return points


points = parse_points(sys.argv[1:] or SAMPLE_CURVE.split())
resolution = settings.curve.resolution
steps = interpolate_curve(points, resolution, settings.curve.start_intensity)

# 出力ディレクトリを準備
script_dir = os.path.dirname(__file__)
output_dir = os.path.join(script_dir, 'graphs')
os.makedirs(output_dir, exist_ok=True)

# ========== グラフ描画 ==========

step_seconds = resolution.total_seconds()
step_starts = np.arange(len(steps)) * step_seconds
step_values = [s.intensity for s in steps]

# 制御点の座標（区間の終端に目標強度）
point_times = np.cumsum([0.0] + [p.duration.total_seconds() for p in points])
point_values = [settings.curve.start_intensity] + [p.intensity for p in points]

fig, ax = plt.subplots(figsize=(10, 6))

ax.step(step_starts, step_values, where='post', color='b', linewidth=2.0, label='Dispatched steps')
ax.plot(point_times, point_values, 'r--o', markersize=7, linewidth=1.2, label='Control points')

for t, v in zip(point_times, point_values):
    ax.annotate(f'{v}', xy=(t, v), xytext=(5, 5), textcoords='offset points', fontsize=9,
                bbox=dict(boxstyle='round,pad=0.3', facecolor='yellow', alpha=0.3))

ax.set_xlabel('Time (s)', fontsize=12, fontweight='bold')
ax.set_ylabel('Shock Intensity', fontsize=12, fontweight='bold')
ax.set_title(f'Shock Curve\n(1 step = {resolution // timedelta(milliseconds=1)}ms, {len(steps)} steps)',
             fontsize=13, fontweight='bold')
ax.grid(True, alpha=0.3, linestyle='--')
ax.set_ylim(-2, 102)
ax.legend(loc='upper right', fontsize=10)
plt.tight_layout()

output_file = os.path.join(output_dir, 'shock_curve.png')
plt.savefig(output_file, dpi=150, bbox_inches='tight')
print(f"✓ Graph saved: {output_file}")

# ========== テーブル出力 ==========
print("\n=== Shock Curve Step Table ===")
print(f"{'Step':<6} {'Start(s)':<10} {'Intensity':<10} {'Delta':<8}")
print("-" * 36)

prev = None
for i, (start, value) in enumerate(zip(step_starts, step_values)):
    delta = f"{value - prev:+d}" if prev is not None else "—"
    print(f"{i:<6} {start:<10.2f} {value:<10} {delta:<8}")
    prev = value
