import argparse
import logging
import queue
import sys
from typing import Any, Optional

from logger import setup_logger, get_logger, set_console_level
from config import AppConfig
from hardware import ThermalZoneSensor
from plugin_manager import PluginManager
from temperature_monitor import TemperatureMonitor
from ui.panel_window import PanelWindow
from utils import format_label
from advanced_logging import init_detailed_logging, get_detailed_logger

TRAY_POLL_MS = 200


class AppLogic:
    def __init__(self, config_path: str = "settings.json") -> None:
        self.logger = get_logger('AppLogic')
        self.config: AppConfig = AppConfig(config_path)
        set_console_level(self.config.get("log_level"))

        detailed_logging_enabled = self.config.get("detailed_logging", False)
        init_detailed_logging(detailed_logging_enabled)
        if detailed_logging_enabled:
            logging.getLogger('CpuTemp').setLevel(logging.DEBUG)

        # Thermal zone is always the last resort, after every plugin sensor
        self.default_sensor: ThermalZoneSensor = ThermalZoneSensor(self.config.get("thermal_zone_path"))
        self.monitor: TemperatureMonitor = TemperatureMonitor(fallback=self.default_sensor)

        self.plugin_manager: PluginManager = PluginManager(self)
        self.plugin_manager.discover_plugins()

        self.main_window: Optional[PanelWindow] = None
        self.system_tray: Optional[Any] = None
        self._refresh_job: Optional[str] = None
        self._tray_job: Optional[str] = None
        self.tray_requests: queue.Queue = queue.Queue()

    def register_sensor(self, sensor_instance: Any) -> None:
        self.logger.info(f"New sensor registered: {getattr(sensor_instance, 'name', sensor_instance)}")
        self.monitor.add_sensor(sensor_instance)

    def refresh(self) -> float:
        temperature = self.monitor.sample()
        if self.main_window:
            self.main_window.update_temp_reading(temperature)
        if self.system_tray:
            self.system_tray.update(temperature)
        return temperature

    def _schedule_refresh(self) -> None:
        self._refresh_job = self.main_window.after(self.config.update_interval_ms, self._on_timer)

    def _on_timer(self) -> None:
        try:
            self.refresh()
        finally:
            self._schedule_refresh()

    def _process_tray_requests(self) -> None:
        self._tray_job = None
        while True:
            try:
                request = self.tray_requests.get_nowait()
            except queue.Empty:
                break
            if request == "show":
                self.main_window.deiconify()
            elif request == "quit":
                self.quit()
                return
        self._tray_job = self.main_window.after(TRAY_POLL_MS, self._process_tray_requests)

    def _start_tray(self) -> None:
        try:
            # pystray picks its backend on import and fails without a usable one
            from system_tray import SystemTray
            self.system_tray = SystemTray(self)
            self.system_tray.create_icon()
            self._tray_job = self.main_window.after(TRAY_POLL_MS, self._process_tray_requests)
        except Exception as e:
            self.logger.warning(f"System tray unavailable: {e}")
            self.system_tray = None

    def on_closing(self) -> None:
        if self.system_tray:
            self.main_window.withdraw()
        else:
            self.quit()

    def shutdown(self) -> None:
        self.plugin_manager.shutdown_plugins()
        self.default_sensor.shutdown()

        detailed_logger = get_detailed_logger()
        if detailed_logger:
            detailed_logger.shutdown()

    def quit(self) -> None:
        if self._refresh_job:
            self.main_window.after_cancel(self._refresh_job)
            self._refresh_job = None
        if self._tray_job:
            self.main_window.after_cancel(self._tray_job)
            self._tray_job = None
        self.shutdown()
        if self.system_tray:
            self.system_tray.stop()
        self.main_window.quit()

    def run(self) -> None:
        # First reading before the window appears; 0°C if nothing answers yet
        self.monitor.sample()
        self.main_window = PanelWindow(self)
        if self.config.get("show_tray_icon", True):
            self._start_tray()
        self._schedule_refresh()
        self.main_window.mainloop()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CPU package temperature panel applet")
    parser.add_argument("--config", default="settings.json", help="path to settings.json")
    parser.add_argument("--once", action="store_true", help="print one reading and exit")
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    setup_logger()
    app = AppLogic(args.config)
    if args.once:
        temperature = app.monitor.sample()
        app.shutdown()
        print(format_label(temperature))
        sys.exit(0 if app.monitor.has_reading else 1)
    app.run()


if __name__ == "__main__":
    main()
