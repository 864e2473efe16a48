import os
import threading
from pystray import Icon, MenuItem, Menu
from PIL import Image, ImageDraw
from logger import get_logger
from utils import format_label, format_tooltip


class SystemTray:
    def __init__(self, app_logic):
        self.app_logic = app_logic
        self.logger = get_logger('SystemTray')
        self.icon = None
        self.icon_thread = None

    def _render_image(self, temperature):
        icon_image = None
        if os.path.exists("app.ico"):
            try:
                icon_image = Image.open("app.ico")
            except OSError as e:
                self.logger.warning(f"Failed to load app.ico: {e}")

        if not icon_image:
            # Draw the rounded reading when no icon file is shipped
            icon_image = Image.new('RGB', (64, 64), 'black')
            draw = ImageDraw.Draw(icon_image)
            draw.text((8, 24), format_label(temperature), fill='white')

        return icon_image

    def create_icon(self):
        temperature = self.app_logic.monitor.temperature
        menu = Menu(
            MenuItem("Show", self.on_show, default=True),
            MenuItem("Quit", self.on_exit)
        )

        self.icon = Icon("cputemp", self._render_image(temperature), format_tooltip(temperature), menu)

        self.icon_thread = threading.Thread(target=self.icon.run, daemon=True)
        self.icon_thread.start()

    def update(self, temperature):
        if not self.icon:
            return
        self.icon.title = format_tooltip(temperature)
        if not os.path.exists("app.ico"):
            self.icon.icon = self._render_image(temperature)

    # Menu callbacks run on the pystray thread; Tk is only touched from its own loop
    def on_show(self, icon, item):
        self.app_logic.tray_requests.put("show")

    def on_exit(self, icon, item):
        self.app_logic.tray_requests.put("quit")

    def stop(self):
        if self.icon:
            self.icon.stop()
