"""
Централізована система логування для CPU Temp applet
"""
import logging
import os
from datetime import datetime

LOG_NAMESPACE = 'CpuTemp'


def setup_logger(log_dir="logs", console_level=logging.INFO):
    """Налаштування логера з файлом та консоллю"""

    # Створити папку для логів
    os.makedirs(log_dir, exist_ok=True)

    # Файл логу з датою
    log_file = os.path.join(log_dir, f"cputemp_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")

    log_format = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)

    logging.basicConfig(
        level=logging.DEBUG,
        format=log_format,
        datefmt=date_format,
        handlers=[file_handler, console_handler]
    )

    logger = logging.getLogger(LOG_NAMESPACE)
    logger.info("=== CPU Temp Started ===")
    logger.info(f"Log file: {log_file}")

    return logger


def set_console_level(level_name: str) -> None:
    """Змінити рівень консольного виводу (наприклад, з налаштувань)"""
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        logging.getLogger(LOG_NAMESPACE).warning(f"Unknown log level '{level_name}', keeping current")
        return
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def get_logger(name):
    """Отримати logger для модуля"""
    return logging.getLogger(f'{LOG_NAMESPACE}.{name}')
