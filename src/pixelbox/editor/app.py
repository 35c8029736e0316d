from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygame

from pixelbox.canvas import PictureCanvas, clamp_to_picture, pointer_position
from pixelbox.config import EditorSettings, configure_logging, editor_settings, load_config
from pixelbox.errors import ImageLoadError, OutOfBounds, UnknownTool
from pixelbox.history import EditorState
from pixelbox.image_io import load_picture, save_picture
from pixelbox.paths import ensure_directories, get_data_root
from pixelbox.picture import Color, Picture, format_color
from pixelbox.session import EditorSession
from pixelbox.tools import ToolRegistry
from pixelbox.ui.common import (
    Button,
    create_window,
    is_pointer_motion,
    is_primary_pointer_event,
    pointer_event_pos,
)


logger = logging.getLogger(__name__)

Point = Tuple[int, int]

LATEST_NAME = "latest.png"


def initial_state(settings: EditorSettings) -> EditorState:
    return EditorState(
        tool=settings.tool,
        color=settings.color,
        picture=Picture.empty(settings.width, settings.height, settings.background),
    )


def _list_archives(pictures_dir: Path) -> List[Path]:
    files = list(pictures_dir.glob("*.png"))
    files.sort(key=lambda path: (path.stat().st_mtime, path.name), reverse=True)
    return files


def _archive_path(pictures_dir: Path, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
    archive_path = pictures_dir / f"{stamp}.png"
    counter = 1
    while archive_path.exists():
        archive_path = pictures_dir / f"{stamp}_{counter}.png"
        counter += 1
    return archive_path


def _tool_for_key(key_name: str, tools: ToolRegistry) -> Optional[str]:
    if len(key_name) != 1:
        return None
    for name in tools:
        if name.startswith(key_name.lower()):
            return name
    return None


def save_session_picture(picture: Picture, pictures_dir: Path, now: Optional[datetime] = None) -> Path:
    archive = save_picture(picture, _archive_path(pictures_dir, now))
    save_picture(picture, pictures_dir / LATEST_NAME)
    return archive


def load_session_picture(pictures_dir: Path, max_size: int) -> Optional[Picture]:
    for candidate in _list_archives(pictures_dir):
        try:
            return load_picture(candidate, max_size)
        except ImageLoadError:
            continue
    return None


class EditorApp:
    def __init__(
        self,
        *,
        config: Optional[Dict] = None,
        tools: Optional[ToolRegistry] = None,
        screen: Optional[pygame.Surface] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.settings = editor_settings(self.config)
        self.data_root = get_data_root(self.config)
        dirs = ensure_directories(self.data_root)
        self.pictures_dir = dirs["pictures"]

        self.session = EditorSession(
            initial_state(self.settings),
            tools=tools,
            window=self.settings.coalesce_ms,
            max_depth=self.settings.undo_depth,
        )
        self.canvas = PictureCanvas(self.session.state.picture, self.settings.scale)

        self.margin = 12
        self.button_h = 28
        self.button_gap = 6
        self.swatch_size = 24
        self.panel_bg = (238, 234, 226)

        canvas_w, canvas_h = self.canvas.surface.get_size()
        self.panel_height = self.button_h * 2 + self.swatch_size + self.button_gap * 4
        if screen is None:
            self.screen, self.screen_rect = create_window(self._window_size())
        else:
            self.screen = screen
            self.screen_rect = screen.get_rect()
        self.clock = clock or pygame.time.Clock()
        self.font = pygame.font.SysFont("sans", 16)

        self.canvas_rect = pygame.Rect(self.margin, self.margin, canvas_w, canvas_h)
        self.tool_buttons: Dict[str, Button] = {}
        self.action_buttons: Dict[str, Button] = {}
        self.palette_buttons: List[Tuple[Color, Button]] = []
        self.status = ""
        self._build_ui()
        self.session.subscribe(self._sync_state)

    def _window_size(self) -> Tuple[int, int]:
        canvas_w, canvas_h = self.canvas.surface.get_size()
        return (
            max(canvas_w + 2 * self.margin, 560),
            canvas_h + self.panel_height + 3 * self.margin,
        )

    def _build_ui(self) -> None:
        self.tool_buttons.clear()
        self.action_buttons.clear()
        self.palette_buttons.clear()

        left = self.margin
        top = self.canvas_rect.bottom + self.margin
        gap = self.button_gap

        x = left
        for name in self.session.tools:
            width = self.font.size(name)[0] + 16
            rect = pygame.Rect(x, top, width, self.button_h)
            self.tool_buttons[name] = Button(rect=rect, label=name, fill=self.panel_bg)
            x = rect.right + gap

        x = left
        action_top = top + self.button_h + gap
        for key in ("undo", "save", "load"):
            width = self.font.size(key.title())[0] + 16
            rect = pygame.Rect(x, action_top, width, self.button_h)
            self.action_buttons[key] = Button(rect=rect, label=key.title(), fill=(245, 245, 245))
            x = rect.right + gap

        swatch_top = action_top + self.button_h + gap
        for idx, color in enumerate(self.settings.palette):
            rect = pygame.Rect(
                left + idx * (self.swatch_size + gap),
                swatch_top,
                self.swatch_size,
                self.swatch_size,
            )
            self.palette_buttons.append((color, Button(rect=rect, fill=color, border_width=1)))

    def _sync_state(self, state: EditorState) -> None:
        previous = self.canvas.surface.get_size()
        self.canvas.sync(state.picture)
        if self.canvas.surface.get_size() != previous:
            self._resize_canvas()

    def _save(self) -> None:
        try:
            archive = save_session_picture(self.session.state.picture, self.pictures_dir)
        except OSError as exc:
            logger.warning("Save failed: %s", exc)
            self.status = "Save failed"
            return
        self.status = f"Saved {archive.name}"

    def _load(self) -> None:
        picture = load_session_picture(self.pictures_dir, self.settings.max_load_size)
        if picture is None:
            self.status = "Nothing to load"
            return
        self.session.load_picture(picture)
        self.status = "Loaded"

    def _resize_canvas(self) -> None:
        canvas_w, canvas_h = self.canvas.surface.get_size()
        self.canvas_rect = pygame.Rect(self.margin, self.margin, canvas_w, canvas_h)
        needed = self._window_size()
        if needed != self.screen_rect.size and pygame.display.get_surface() is self.screen:
            self.screen = pygame.display.set_mode(needed)
            self.screen_rect = self.screen.get_rect()
        self._build_ui()

    def _canvas_pos(self, pos: Point, *, dragging: bool) -> Optional[Point]:
        picture = self.session.state.picture
        if dragging:
            return clamp_to_picture(pos, self.canvas_rect, self.settings.scale, picture)
        return pointer_position(pos, self.canvas_rect, self.settings.scale, picture)

    def _handle_pointer_down(self, pos: Point) -> None:
        canvas_pos = self._canvas_pos(pos, dragging=False)
        if canvas_pos is not None:
            try:
                self.session.pointer_down(canvas_pos)
            except (OutOfBounds, UnknownTool) as exc:
                logger.warning("Tool %s failed: %s", self.session.state.tool, exc)
            return

        for name, button in self.tool_buttons.items():
            if button.hit(pos):
                self.session.select_tool(name)
                return

        for color, button in self.palette_buttons:
            if button.hit(pos):
                self.session.select_color(color)
                return

        if self.action_buttons["undo"].hit(pos):
            self.session.undo()
        elif self.action_buttons["save"].hit(pos):
            self._save()
        elif self.action_buttons["load"].hit(pos):
            self._load()

    def _handle_pointer_move(self, pos: Point) -> None:
        if not self.session.dragging:
            return
        canvas_pos = self._canvas_pos(pos, dragging=True)
        if canvas_pos is not None:
            self.session.pointer_move(canvas_pos)

    def _handle_key(self, event: pygame.event.Event) -> bool:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_z and event.mod & (pygame.KMOD_CTRL | pygame.KMOD_META):
            self.session.undo()
            return True
        name = _tool_for_key(pygame.key.name(event.key), self.session.tools)
        if name is not None and not event.mod & pygame.KMOD_CTRL:
            self.session.select_tool(name)
        return True

    def _draw(self) -> None:
        state = self.session.state
        self.screen.fill((252, 248, 240))
        self.screen.blit(self.canvas.surface, self.canvas_rect.topleft)
        pygame.draw.rect(self.screen, (200, 200, 200), self.canvas_rect.inflate(2, 2), width=1)

        for name, button in self.tool_buttons.items():
            button.draw(self.screen, self.font)
            if name == state.tool:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=2, border_radius=6)

        for button in self.action_buttons.values():
            button.draw(self.screen, self.font)

        for color, button in self.palette_buttons:
            button.draw(self.screen)
            if color == state.color:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=3)

        label = f"{format_color(state.color)}  undo: {len(state.history)}  {self.status}"
        text = self.font.render(label, True, (40, 40, 40))
        last_action = list(self.action_buttons.values())[-1].rect
        self.screen.blit(text, (last_action.right + self.margin, last_action.top + 6))

    def run(self) -> None:
        running = True
        pointer_down = False
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event)
                elif is_primary_pointer_event(event, is_down=True):
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    pointer_down = True
                    self._handle_pointer_down(pos)
                elif is_pointer_motion(event):
                    if not pointer_down:
                        continue
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    self._handle_pointer_move(pos)
                elif is_primary_pointer_event(event, is_down=False):
                    pointer_down = False
                    self.session.pointer_up()

            self._draw()
            pygame.display.flip()
            self.clock.tick(60)

        pygame.quit()


def main() -> None:
    config = load_config()
    configure_logging(config)
    try:
        EditorApp(config=config).run()
    except Exception:
        logger.exception("PixelBox editor crashed")
        pygame.quit()
        raise


if __name__ == "__main__":
    main()
