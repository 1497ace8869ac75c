import logging
import os

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO'),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)

SECURITY = 'scoreguard.security'

def get_logger(name: str = 'scoreguard') -> logging.Logger:
    """Operational logger by default; pass SECURITY for the security channel."""
    return logging.getLogger(name)
