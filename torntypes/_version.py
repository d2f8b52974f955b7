version = "0.3.0"
__version__ = version
