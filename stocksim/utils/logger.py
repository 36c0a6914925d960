"""
Standardized logging utilities for the stocksim package.
Provides consistent logging across the generator, simulator and scenario runner.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime


class SimLogger:
    """
    Centralized logging for the stocksim package with workflow-aware features.

    Features:
    - Hierarchical logging with module names
    - Workflow step tracking
    - File and console output
    - Performance timing
    """

    # Global configuration
    _global_config: Dict[str, Any] = {
        'level': 'INFO',
        'log_file': None,
        'console_output': True,
        'file_output': True,
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'max_file_size': 10 * 1024 * 1024,  # 10MB
        'backup_count': 5
    }

    # Registry of all loggers
    _loggers: Dict[str, 'SimLogger'] = {}

    def __init__(self, name: str, level: str = None, log_file: Optional[str] = None):
        """
        Initialize the logger

        Args:
            name: Logger name (usually __name__)
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file path for logging
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self._level_override = level
        self._log_file_override = log_file

        self._configure_handlers()

        # Prevent propagation to root logger to avoid duplicate messages
        self.logger.propagate = False

        SimLogger._loggers[name] = self

    def _configure_handlers(self):
        """(Re)build handlers from the global config"""
        level = self._level_override or self._global_config['level']
        log_file = self._log_file_override or self._global_config['log_file']

        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            self._global_config['format'],
            datefmt=self._global_config['date_format']
        )

        if self._global_config['console_output']:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self._global_config['file_output'] and log_file:
            self._setup_file_handler(log_file, formatter)

    def _setup_file_handler(self, log_file: str, formatter: logging.Formatter):
        """Setup rotating file handler"""
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=self._global_config['max_file_size'],
            backupCount=self._global_config['backup_count']
        )
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    # Standard logging methods
    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message"""
        self.logger.error(message)

    def is_enabled_for(self, level: str) -> bool:
        return self.logger.isEnabledFor(getattr(logging, level.upper()))

    # Workflow-specific logging methods
    def log_workflow_step(self, step_name: str, step_number: Optional[int] = None,
                          total_steps: Optional[int] = None, description: str = ""):
        """Log workflow step information"""
        if step_number is not None and total_steps is not None:
            message = f"Step {step_number}/{total_steps}: {step_name}"
        else:
            message = f"Step: {step_name}"
        if description:
            message += f" - {description}"
        self.info(message)

    def log_step_completion(self, step_name: str, duration: float,
                           details: Dict[str, Any] = None):
        """Log step completion with timing and details"""
        message = f"✅ {step_name} in {duration:.2f}s"
        if details:
            detail_str = ", ".join([f"{k}: {v}" for k, v in details.items()])
            message += f" - {detail_str}"
        self.info(message)

    def log_processing_progress(self, current: int, total: int,
                               operation: str, details: str = ""):
        """Log processing progress"""
        percentage = (current / total) * 100 if total > 0 else 0
        message = f"📊 {operation}: {current:,}/{total:,} ({percentage:.1f}%)"
        if details:
            message += f" - {details}"
        self.info(message)

    def log_performance_metrics(self, operation: str, metrics: Dict[str, Any]):
        """Log performance metrics"""
        metric_str = ", ".join([f"{k}: {v}" for k, v in metrics.items()])
        self.info(f"📈 {operation}: {metric_str}")

    def log_error_with_context(self, error: Exception, context: str = ""):
        """Log error with context information"""
        message = f"❌ Error in {context}: {str(error)}" if context else f"❌ Error: {str(error)}"
        self.error(message)

    # Configuration methods
    @classmethod
    def configure_global(cls, **kwargs):
        """Configure global logging settings"""
        cls._global_config.update(kwargs)

        # Update existing loggers
        for logger in cls._loggers.values():
            logger._configure_handlers()


def get_logger(name: str = None, level: str = None,
               log_file: Optional[str] = None) -> SimLogger:
    """
    Get or create a logger instance

    Args:
        name: Logger name (defaults to 'stocksim')
        level: Logging level
        log_file: Optional log file path

    Returns:
        SimLogger instance
    """
    if name is None:
        name = "stocksim"

    existing = SimLogger._loggers.get(name)
    if existing is None:
        return SimLogger(name, level, log_file)

    # An explicit level or file replaces the one the logger was registered with
    if level is not None or log_file is not None:
        if level is not None:
            existing._level_override = level
        if log_file is not None:
            existing._log_file_override = log_file
        existing._configure_handlers()
    return existing


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  console_output: bool = True, file_output: bool = True):
    """
    Setup global logging configuration

    Args:
        level: Logging level
        log_file: Optional log file path
        console_output: Enable console output
        file_output: Enable file output
    """
    SimLogger.configure_global(
        level=level,
        log_file=log_file,
        console_output=console_output,
        file_output=file_output
    )

    # Also configure the root logger so third-party modules inherit the level
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        SimLogger._global_config['format'],
        datefmt=SimLogger._global_config['date_format']
    )

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=SimLogger._global_config['max_file_size'],
            backupCount=SimLogger._global_config['backup_count']
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def configure_workflow_logging(workflow_name: str, log_level: str = "INFO",
                              log_dir: Optional[str] = "output/logs"):
    """
    Configure logging specifically for workflow runs

    Args:
        workflow_name: Name of the workflow
        log_level: Logging level
        log_dir: Directory for log files (None disables the log file)
    """
    log_file = None
    if log_dir:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"{log_dir}/{workflow_name}_{timestamp}.log"

    setup_logging(
        level=log_level,
        log_file=log_file,
        console_output=True,
        file_output=log_file is not None
    )

    logger = get_logger("workflow")
    logger.info(f"🚀 {workflow_name} workflow started")
    if log_file:
        logger.info(f"📝 Log file: {log_file}")
    logger.info(f"🔧 Log level: {log_level}")

    return logger
