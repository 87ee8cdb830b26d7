import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from plugin_endpoints.config import settings

log_dir = Path(settings.LOG_DIR)
log_dir.mkdir(parents=True, exist_ok=True)

# Log file path
log_file = log_dir / "server.log"

formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# File handler with rotation (10MB per file, keep 5 backups)
# Only WARNING and ERROR reach server.log
file_handler = RotatingFileHandler(
    log_file,
    maxBytes=10 * 1024 * 1024,  # 10MB
    backupCount=5,
    encoding='utf-8'
)
file_handler.setLevel(logging.WARNING)
file_handler.setFormatter(formatter)

# Application logger
logger = logging.getLogger("plugin_endpoints")
logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
    logger.addHandler(file_handler)

# Suppress noisy loggers
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("casbin").setLevel(logging.WARNING)
logging.getLogger("casbin.policy").setLevel(logging.WARNING)
logging.getLogger("casbin.role").setLevel(logging.WARNING)

logger.info(f"Logging initialized. Logs will be written to: {log_file.absolute()}")
