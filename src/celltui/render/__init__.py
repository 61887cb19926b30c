"""Cell buffers, diff flushing and the frame drawing surface."""

from celltui.render.buffer import Buffer
from celltui.render.frame import RenderFrame, Screen
from celltui.render.hyperlink import Hyperlink
from celltui.render.metrics import MetricsSnapshot, RenderMetrics
from celltui.render.pen import Pen

__all__ = ["Buffer", "RenderFrame", "Screen", "Hyperlink", "MetricsSnapshot", "RenderMetrics", "Pen"]
