"""
Logging configuration for the MediConnect backend.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from mediconnect.core.config import settings


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_file: Optional[str] = None) -> None:
    """Configure application logging."""
    log_file = log_file or settings.LOG_FILE

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler with rotation
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=settings.LOG_MAX_SIZE,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    setup_specific_loggers()

    logging.info("Logging configuration completed")
    logging.info(f"Log level: {settings.LOG_LEVEL}")
    if log_file:
        logging.info(f"Log file: {log_file}")


def setup_specific_loggers() -> None:
    """Configure specific module loggers."""
    sqlalchemy_logger = logging.getLogger('sqlalchemy.engine')
    sqlalchemy_logger.setLevel(logging.INFO if settings.DEBUG else logging.WARNING)

    logging.getLogger('uvicorn').setLevel(logging.INFO)
    logging.getLogger('mediconnect').setLevel(logging.INFO)

    # Security events (sign-in, permission denials, approvals)
    logging.getLogger('mediconnect.security').setLevel(logging.INFO)


class SecurityLogger:
    """Specialized logger for security events."""

    def __init__(self):
        self.logger = logging.getLogger('mediconnect.security')

    def log_signup(self, user_id: str, email: str, role: str):
        """Log account registration."""
        self.logger.info(f"SIGNUP - User {user_id} - {email} - role {role}")

    def log_login_attempt(self, email: str, success: bool, reason: str = ""):
        """Log login attempt."""
        status = "SUCCESS" if success else "FAILED"
        suffix = f" - {reason}" if reason else ""
        self.logger.info(f"LOGIN_ATTEMPT - {status} - {email}{suffix}")

    def log_logout(self, user_id: Optional[str]):
        """Log user logout."""
        self.logger.info(f"LOGOUT - User {user_id}")

    def log_status_change(self, actor_id: str, user_id: str, status: str):
        """Log an admin approval decision."""
        self.logger.info(f"STATUS_CHANGE - Admin {actor_id} - User {user_id} - {status}")

    def log_password_change(self, user_id: str):
        """Log password change."""
        self.logger.info(f"PASSWORD_CHANGE - User {user_id}")

    def log_document_upload(self, user_id: str, filename: str, file_size: int):
        """Log verification document upload."""
        self.logger.info(f"DOCUMENT_UPLOAD - User {user_id} - {filename} - {file_size} bytes")

    def log_permission_denied(self, user_id: Optional[str], resource: str, reason: str):
        """Log permission denied."""
        self.logger.warning(f"PERMISSION_DENIED - User {user_id} - {resource} - {reason}")


# Global instances
security_logger = SecurityLogger()


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
