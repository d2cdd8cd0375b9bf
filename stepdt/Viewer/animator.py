"""
Interactive matplotlib front end for the step engine.

    Click anywhere on the axes to add vertices

    <Space> start the triangulation / pause / continue
    <Esc>   stop the animation
    <f>     faster
    <s>     slower
    <c>     one step (while paused)
    <r>     remove all vertices
    <h>     hide/show this help

The animator owns no algorithm: every `frame_duration` frames it calls
`TriangulationEngine.step()` once and draws what the engine reports.
"""
import logging

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.patches import Polygon, Circle

from stepdt.BowyerWatson.engine import TriangulationEngine, as_point_list
from stepdt.Geometry.primitives import Point

logger = logging.getLogger(__name__)

HELP_TEXT = """Click anywhere to add vertices

<Space> to start delaunay triangulation
<Space> to pause animation (if started and running)
<Space> to continue animation (if paused)
<Esc> to stop animation
<f> to make animation faster
<s> to make animation slower
<c> to go frame by frame (if paused)
<r> to remove all vertices
<h> to hide/show help text"""

FRAME_DURATION_STEP = 2
BOUND_KEYS = (" ", "escape", "f", "s", "c", "r", "h")


class StepAnimator:
    """
    Frame throttle, key handling and drawing around one engine.

    Parameters:
        points (iterable of (x, y)): initial live points.
        frame_duration (int): frames between two engine steps.
        interval (int): milliseconds between frames.
        extent (tuple): (xmin, xmax, ymin, ymax) of the drawing area. Defaults
            to the bounding box of `points` with a margin.
    """

    def __init__(self, points=(), frame_duration=4, interval=16, extent=None, engine=None):
        self.points = as_point_list(points)
        self.engine = engine if engine is not None else TriangulationEngine()
        self.frame_duration = max(1, int(frame_duration))
        self.interval = interval
        self.extent = extent if extent is not None else self._default_extent()

        self.frames_since_step = 0
        self.is_animating = False
        self.is_paused = True
        self.show_help = True
        self.last_report = None

        self.fig = None
        self.ax = None
        self._animation = None

    def _default_extent(self):
        if not self.points:
            return (0.0, 100.0, 0.0, 100.0)
        xy = np.array(self.points)
        lo, hi = xy.min(axis=0), xy.max(axis=0)
        margin = max(float((hi - lo).max()) * 0.1, 1.0)
        return (min(0.0, lo[0] - margin), hi[0] + margin,
                min(0.0, lo[1] - margin), hi[1] + margin)

    # ---------- input ----------
    def press(self, key):
        if key == " ":
            if not self.is_animating:
                self.engine.set_point_list(self.points)
                logger.info("animation started with %d points", len(self.points))
            self.is_animating = True
            self.is_paused = not self.is_paused
        elif key == "escape":
            self.is_animating = False
            self.is_paused = True
            self.last_report = None
            self.engine.reset()
        elif key == "f":
            self.frame_duration = max(1, self.frame_duration - FRAME_DURATION_STEP)
        elif key == "s":
            self.frame_duration += FRAME_DURATION_STEP
        elif key == "c":
            self.frames_since_step = self.frame_duration + 1
        elif key == "h":
            self.show_help = not self.show_help
        elif key == "r":
            if not self.is_animating:
                self.points = []

    def click(self, x, y, button=1):
        if button == 1 and not self.is_animating and x is not None and y is not None:
            self.points.append(Point(float(x), float(y)))

    def tick(self):
        """
        One frame of the throttle. Steps the engine when enough frames have
        passed and returns the step's report, otherwise None.
        """
        report = None
        if self.frames_since_step >= self.frame_duration:
            if self.is_animating:
                report = self.engine.step()
                self.last_report = report
            self.frames_since_step = 0

        if not self.is_paused:
            self.frames_since_step += 1
        return report

    # ---------- drawing ----------
    def draw(self, ax):
        ax.clear()
        ax.set_facecolor((10 / 255, 10 / 255, 10 / 255))
        xmin, xmax, ymin, ymax = self.extent
        ax.set_xlim(xmin, xmax)
        ax.set_ylim(ymin, ymax)
        ax.set_aspect("equal")

        if self.is_animating:
            self._draw_run(ax)
        elif self.points:
            xy = np.array(self.points)
            ax.scatter(xy[:, 0], xy[:, 1], s=6, color="yellow", zorder=5)

        if self.show_help:
            ax.text(0.01, 0.99, HELP_TEXT, transform=ax.transAxes, va="top",
                    ha="left", color="white", fontsize=8, family="monospace")

    def _draw_run(self, ax):
        report = self.last_report
        if report is not None and report.circle is not None:
            center, radius = report.circle
            if np.isfinite(center.x) and np.isfinite(center.y) and np.isfinite(radius):
                ax.add_patch(Circle(center, radius, facecolor=(1.0, 215 / 255, 0.0, 50 / 255),
                                    edgecolor="none"))

        for triangle in self.engine.current_triangles():
            ax.add_patch(Polygon(np.array(triangle), closed=True, fill=False,
                                 edgecolor="white", linewidth=0.8))

        if report is not None and report.scanned is not None:
            color = "red" if report.is_bad else "green"
            ax.add_patch(Polygon(np.array(report.scanned), closed=True, fill=False,
                                 edgecolor=color, linewidth=1.5))

        run_points = self.engine.points
        if run_points:
            xy = np.array(run_points)
            ax.scatter(xy[:, 0], xy[:, 1], s=6, color="yellow", zorder=5)

        current = self.engine.current_point
        if current is not None:
            ax.scatter([current.x], [current.y], s=60, color="cyan", zorder=6)

    # ---------- matplotlib wiring ----------
    def _on_key(self, event):
        self.press(event.key)

    def _on_click(self, event):
        if event.inaxes is self.ax:
            self.click(event.xdata, event.ydata, event.button)

    def _on_frame(self, _frame):
        self.tick()
        self.draw(self.ax)
        return []

    def show(self):
        # default toolbar shortcuts would swallow f/s/c/h/r
        for name in ("keymap.fullscreen", "keymap.save", "keymap.back", "keymap.home"):
            plt.rcParams[name] = [k for k in plt.rcParams[name] if k not in BOUND_KEYS]

        self.fig, self.ax = plt.subplots(figsize=(12.8, 7.2))
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title("Delaunay Triangulation")
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self.fig.canvas.mpl_connect("button_press_event", self._on_click)
        self._animation = FuncAnimation(self.fig, self._on_frame, interval=self.interval,
                                        cache_frame_data=False)
        plt.show()
