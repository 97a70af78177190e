# engine/window_manager.py
# Standard library imports
import time
from typing import TYPE_CHECKING, Any
from typing import Dict as PyDict

# Third-party imports
from PIL import Image

# PySide6 imports
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QColor, QImage, QKeyEvent, QPalette, QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget

# --- Modularized Imports ---
from engine.console import Console
from engine.font_loader import FontAtlas, load_font
from engine.renderer import compose_image
from engine.window_manager_modules.input_handler import InputHandler
from utils.config import DisplayConfig

# --- Type Checking ---
if TYPE_CHECKING:
    from engine.main_loop import MainLoop

# --- Logging Setup ---
import structlog
log = structlog.get_logger(__name__)
# ---


class WindowManager(QWidget):
    """Owns the window, the root console, the font and the frame limiter."""

    def __init__(
        self,
        display_config: DisplayConfig,
        keybindings_config: PyDict[str, Any],
        font_atlas: FontAtlas | None = None,
    ):
        super().__init__()
        self.display_config = display_config
        log.info("Initializing WindowManager...", title=display_config.title)

        self.font_atlas: FontAtlas = font_atlas or load_font(
            display_config.font_path,
            display_config.font_layout,
            display_config.font_type,
            display_config.cell_width,
            display_config.cell_height,
        )
        self.root = Console(display_config.screen_width, display_config.screen_height)
        self.window_closed: bool = False

        # --- UI Setup ---
        self.setWindowTitle(display_config.title)
        pixel_w, pixel_h = display_config.pixel_size
        atlas_cell = (self.font_atlas.cell_width, self.font_atlas.cell_height)
        if atlas_cell != (display_config.cell_width, display_config.cell_height):
            # The atlas image decides the real cell size
            log.warning(
                "Font atlas cell size differs from config",
                configured=(display_config.cell_width, display_config.cell_height),
                atlas=atlas_cell,
            )
            pixel_w = display_config.screen_width * atlas_cell[0]
            pixel_h = display_config.screen_height * atlas_cell[1]
        self.resize(pixel_w, pixel_h)
        self.layout = QVBoxLayout()
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.setLayout(self.layout)

        self.label = QLabel()  # Shows the composed root console
        self.label.setScaledContents(False)  # 1:1, never scaled
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.label.setAutoFillBackground(True)
        pal = self.label.palette()
        pal.setColor(QPalette.ColorRole.Window, QColor(Qt.GlobalColor.black))
        self.label.setPalette(pal)
        self.layout.addWidget(self.label)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        # --- End UI Setup ---

        self.main_loop: "MainLoop | None" = None
        self.last_rendered_image: Image.Image | None = None

        # Frame limiter: redraw requests within one frame interval coalesce
        self._frame_timer = QTimer(self)
        self._frame_timer.setSingleShot(True)
        self._frame_timer.setInterval(max(1, 1000 // display_config.limit_fps))
        self._frame_timer.timeout.connect(self.update_frame)

        self.input_handler = InputHandler(keybindings_config, self)

        log.debug(
            "WindowManager __init__ complete",
            cells=(display_config.screen_width, display_config.screen_height),
            pixels=(pixel_w, pixel_h),
            fps=display_config.limit_fps,
        )

    def set_main_loop(self, main_loop: "MainLoop") -> None:
        self.main_loop = main_loop
        log.info("MainLoop instance set in WindowManager")
        self.request_frame()

    def request_frame(self) -> None:
        if not self._frame_timer.isActive():
            self._frame_timer.start()

    def update_frame(self) -> None:
        """Renders the game state into the root console and presents it."""
        if self.main_loop is None or self.window_closed:
            log.debug("Skipping frame update: no main loop or window closed.")
            return
        frame_start_time = time.perf_counter()
        self.main_loop.render_frame(self.root)
        self.flush()
        log.debug(
            "Frame update finished",
            duration_ms=(time.perf_counter() - frame_start_time) * 1000,
        )

    def flush(self) -> None:
        """Presents the root console in the window."""
        image = compose_image(self.root, self.font_atlas)
        self.last_rendered_image = image
        data = image.tobytes("raw", "RGB")
        qimg = QImage(
            data, image.width, image.height, image.width * 3,
            QImage.Format.Format_RGB888,
        )
        if qimg.isNull():
            log.error("QImage conversion failed.")
            self.label.clear()
            return
        self.label.setPixmap(QPixmap.fromImage(qimg))

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if self.main_loop is None:
            event.ignore(); return
        should_exit = self.input_handler.process_key_event(
            event, self.main_loop.game_state, self.main_loop
        )
        if should_exit:
            self.ui_quit_game()
        else:
            self.request_frame()

    def closeEvent(self, event: QCloseEvent) -> None:
        log.info("Window closed")
        self.window_closed = True
        self._frame_timer.stop()
        if self.main_loop is not None:
            self.main_loop.game_state.request_exit()
        event.accept()

    # --- Fullscreen ---
    def is_fullscreen(self) -> bool:
        return self.isFullScreen()

    def set_fullscreen(self, fullscreen: bool) -> None:
        if fullscreen:
            self.showFullScreen()
        else:
            self.showNormal()
        log.info("Fullscreen toggled", enabled=fullscreen)

    # --- UI Callback methods ---
    def ui_toggle_fullscreen(self) -> None:
        self.set_fullscreen(not self.is_fullscreen())

    def ui_quit_game(self) -> None:
        if not self.window_closed:
            self.close()
        app_instance = QApplication.instance()
        if app_instance:
            app_instance.quit()
