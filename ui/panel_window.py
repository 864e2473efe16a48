import customtkinter as ctk
from CTkToolTip import CTkToolTip
from logger import get_logger
from utils import format_label, format_tooltip


class PanelWindow(ctk.CTk):
    """Compact always-on-top window: one label, details in the tooltip."""

    def __init__(self, app_logic):
        super().__init__()
        self.app_logic = app_logic
        self.logger = get_logger('PanelWindow')

        ctk.set_appearance_mode(self.app_logic.config.get("theme", "dark"))

        self.title("CPU Temperature")
        self.resizable(False, False)
        self.attributes('-topmost', True)

        container = ctk.CTkFrame(self, corner_radius=8)
        container.pack(fill="both", expand=True)

        temperature = self.app_logic.monitor.temperature
        self.temp_label = ctk.CTkLabel(container, text=format_label(temperature),
                                       font=ctk.CTkFont(size=14))
        self.temp_label.pack(padx=8, pady=4)
        self.tooltip = CTkToolTip(self.temp_label, message=format_tooltip(temperature))

        self.protocol("WM_DELETE_WINDOW", self.app_logic.on_closing)
        self.logger.info("PanelWindow initialized")

    def update_temp_reading(self, temperature: float):
        self.temp_label.configure(text=format_label(temperature))
        self.tooltip.configure(message=format_tooltip(temperature))
