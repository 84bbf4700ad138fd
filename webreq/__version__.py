__title__ = "webreq"
__description__ = "Human-friendly web requests for command-line tools."
__version__ = "0.3.0"
