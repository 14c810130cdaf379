from rteman import metadata
from rteman.loggers.logger import logger as log

__version__ = metadata.version
