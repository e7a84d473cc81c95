import logging
from logging.handlers import RotatingFileHandler

from env import LOG_FILE, LOG_LEVEL, LOG_CONSOLE_LEVEL

# Configure logging
logger = logging.getLogger("slips_api")
logger.setLevel(LOG_LEVEL)

# handlers are attached once per process
if not logger.handlers:
    # Rotating file for everything at LOG_LEVEL and above
    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5*1024*1024, backupCount=3)
    file_handler.setLevel(LOG_LEVEL)

    # Console only shows errors unless configured otherwise
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_CONSOLE_LEVEL)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(pathname)s:%(lineno)d")
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

def log_debug(message: str):
    logger.debug(message)

def log_info(message: str):
    logger.info(message)

def log_warning(message: str):
    logger.warning(message)

def log_error(message: str, exc: Exception = None):
    # pass the exception to get the traceback in the log file
    if exc:
        logger.error(message, exc_info=True)
    else:
        logger.error(message)

def log_critical(message: str):
    logger.critical(message)
