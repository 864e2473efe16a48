import json
import os
from logger import get_logger

DEFAULT_THERMAL_ZONE = "/sys/class/thermal/thermal_zone0/temp"


class AppConfig:
    def __init__(self, file_name="settings.json"):
        self.logger = get_logger('Config')
        self.file_name = file_name
        self.defaults = {
            "theme": "dark",
            "log_level": "INFO",
            "detailed_logging": False,
            "update_interval_secs": 2,
            "show_tray_icon": True,
            "active_plugins": ["lm_sensors", "psutil_sensor"],
            "sensors_command": ["sensors", "-j"],
            "sensors_timeout_secs": 5.0,
            "thermal_zone_path": DEFAULT_THERMAL_ZONE,
            # Label matching data, see utils.SensorKeywords
            "preferred_sensor_path": ["k10temp-pci-00c3", "Tctl", "temp1_input"],
            "chip_keywords": ["cpu", "k10", "coretemp"],
            "metric_keys": ["temp1_input", "input"],
            "priority_labels": ["package id 0", "tctl"],
            "cpu_label_keywords": ["cpu", "core"],
        }
        self.config = self.defaults.copy()
        self.load()

    def load(self):
        if os.path.exists(self.file_name):
            try:
                with open(self.file_name, 'r', encoding='utf-8') as f:
                    loaded_config = json.load(f)
                if not isinstance(loaded_config, dict):
                    raise TypeError(f"expected a JSON object, got {type(loaded_config).__name__}")
                self.config.update(loaded_config)
                self.logger.info(f"Config loaded from {self.file_name}")
            except (json.JSONDecodeError, TypeError, OSError) as e:
                self.logger.error(f"Error reading config: {e}")
                self.config = self.defaults.copy()
        else:
            self.logger.info("Config file not found, using defaults")

    def get(self, key, default=None):
        if key in self.config:
            return self.config[key]
        if key in self.defaults:
            return self.defaults[key]
        return default

    @property
    def update_interval_ms(self) -> int:
        """Timer period for the refresh cycle, in milliseconds."""
        interval = self.get("update_interval_secs")
        if not isinstance(interval, (int, float)) or isinstance(interval, bool) or interval <= 0:
            self.logger.warning(f"Invalid update_interval_secs: {interval}. Using default.")
            interval = self.defaults["update_interval_secs"]
        return int(interval * 1000)
