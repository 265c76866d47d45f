from .logger import logger
