"""Window-level state: views, the buffers they share, and viewport size."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from yoers.buffer import Buffer, BufferLoadError
from yoers.render import DEFAULT_STYLE, DisplayCommand, FontMetrics, RenderStyle, render_view
from yoers.runtime import telemetry
from yoers.view import View

PathLike = Union[str, Path]


class EditorWindow:
    """Ordered views over shared buffers plus the pixel size of the viewport.

    A missing initial file is not fatal: the window starts with an empty
    buffer bound to that path. Any other load failure propagates.
    """

    def __init__(
        self,
        width: int,
        height: int,
        font_height: int,
        file: Optional[PathLike] = None,
    ) -> None:
        if font_height <= 0:
            raise ValueError("font_height must be positive")
        self.views: List[View] = []
        self.buffers: List[Buffer] = []
        self.width = width
        self.height = height
        self.font_height = font_height
        self.current_view = 0
        self.open_view(file, missing_ok=True)

    @property
    def page_length(self) -> int:
        return max(1, self.height // self.font_height - 1)

    @property
    def active_view(self) -> View:
        return self.views[self.current_view]

    def open_view(self, path: Optional[PathLike] = None, *, missing_ok: bool = False) -> View:
        """Add a view; a path that is already open shares the existing buffer."""

        buffer = self._buffer_for(path, missing_ok=missing_ok)
        view = View(buffer, page_length=self.page_length)
        self.views.append(view)
        telemetry.record_event(
            "window.open_view",
            data={"buffer": buffer.name, "views": len(self.views)},
        )
        return view

    def focus(self, view_idx: int) -> View:
        if not 0 <= view_idx < len(self.views):
            raise IndexError(f"no view {view_idx} (have {len(self.views)})")
        self.current_view = view_idx
        return self.active_view

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        for view in self.views:
            view.set_page_length(self.page_length)
        telemetry.record_event(
            "window.resize",
            data={"width": width, "height": height, "page_length": self.page_length},
        )

    def draw(
        self, metrics: FontMetrics, style: RenderStyle = DEFAULT_STYLE
    ) -> List[DisplayCommand]:
        view = self.active_view
        return render_view(
            view.buffer, view, metrics, viewport_height=self.height, style=style
        )

    def insert_char(self, ch: str) -> None:
        self.active_view.insert_char(ch)

    def start_selection(self) -> None:
        self.active_view.start_selection()

    def end_selection(self) -> None:
        self.active_view.end_selection()

    def _buffer_for(self, path: Optional[PathLike], *, missing_ok: bool) -> Buffer:
        if path is None:
            buffer = Buffer()
            self.buffers.append(buffer)
            return buffer

        wanted = Path(path).resolve()
        for existing in self.buffers:
            if existing.source_path is not None and existing.source_path.resolve() == wanted:
                return existing

        try:
            buffer = Buffer.from_file(path)
        except BufferLoadError as exc:
            if not (missing_ok and isinstance(exc.__cause__, FileNotFoundError)):
                raise
            telemetry.record_event("buffer.missing_file", data={"path": str(path)})
            buffer = Buffer(source_path=path)
        self.buffers.append(buffer)
        return buffer


__all__ = ["EditorWindow"]
