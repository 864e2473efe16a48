import logging
import logging.handlers
import queue
import json
import os
from typing import Optional
from datetime import datetime

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logs.
    Produces one JSON object per line for easy parsing.
    """
    extra_fields = ['source', 'temperature', 'success', 'duration_ms',
                    'sources_tried']

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3],
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage()
        }

        for field in self.extra_fields:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, ensure_ascii=False)

class DetailedLogger:
    """
    Detailed sensor logging:
    - Async queue-based logging (non-blocking for the UI loop)
    - Rotating file handler (10 MB total limit)
    - Structured JSON output
    - Disabled unless turned on in config
    """
    def __init__(self, enabled: bool = False, log_dir: str = 'logs'):
        self.enabled = enabled
        self.log_queue: queue.Queue = queue.Queue(-1)
        self.listener: Optional[logging.handlers.QueueListener] = None

        if not enabled:
            return

        os.makedirs(log_dir, exist_ok=True)

        self.logger = logging.getLogger('CpuTemp.Detailed')
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False  # Don't propagate to root logger

        self.queue_handler = logging.handlers.QueueHandler(self.log_queue)
        self.logger.addHandler(self.queue_handler)

        # 5 files × 2 MB = 10 MB maximum total
        self.file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'cputemp_detailed.log'),
            maxBytes=2*1024*1024,
            backupCount=4,
            encoding='utf-8'
        )
        self.file_handler.setFormatter(StructuredFormatter())

        self.listener = logging.handlers.QueueListener(
            self.log_queue,
            self.file_handler,
            respect_handler_level=True
        )
        self.listener.start()

        self.logger.info('detailed_logging_started')

    def log_sensor_read(self, source: str, temperature: Optional[float], success: bool):
        """Log one acquisition attempt"""
        if not self.enabled:
            return

        self.logger.debug('sensor_read', extra={
            'source': source,
            'temperature': temperature,
            'success': success
        })

    def log_cycle(self, sources_tried: int, temperature: float, success: bool):
        """Log the outcome of a full refresh cycle"""
        if not self.enabled:
            return

        self.logger.debug('refresh_cycle', extra={
            'sources_tried': sources_tried,
            'temperature': temperature,
            'success': success
        })

    def log_performance(self, operation: str, duration_ms: float):
        """Log performance metrics"""
        if not self.enabled:
            return

        # A refresh runs on the UI thread, so anything slow is visible
        level = logging.WARNING if duration_ms > 500 else logging.DEBUG
        self.logger.log(level, f'performance_{operation}', extra={
            'duration_ms': round(duration_ms, 2)
        })

    def shutdown(self):
        """Clean shutdown of logging system"""
        if self.enabled and self.listener:
            self.logger.info('detailed_logging_stopped')
            self.listener.stop()
            self.listener = None
            self.logger.removeHandler(self.queue_handler)
            self.file_handler.close()

# Global instance (initialized in main.py)
detailed_logger: Optional[DetailedLogger] = None

def init_detailed_logging(enabled: bool, log_dir: str = 'logs'):
    """Initialize detailed logging system"""
    global detailed_logger
    detailed_logger = DetailedLogger(enabled=enabled, log_dir=log_dir)

def get_detailed_logger() -> Optional[DetailedLogger]:
    """Get the global detailed logger instance"""
    return detailed_logger
