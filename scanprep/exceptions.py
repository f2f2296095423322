"""
Exceptions raised at the outer surface of scanprep.

The analysis engine itself never raises past its own boundary: analyzer
failures, missing artifacts and unmatched scanner errors all become data.
These exceptions are reserved for explicit user input (a settings file
named on the command line) and for file writes.
"""


class ScanprepError(Exception):
    """Base exception for scanprep errors."""
    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        super().__init__(f"{message}: {path}" if path else message)


class ConfigurationError(ScanprepError):
    """Invalid or unreadable settings file."""
    pass


class PropertiesWriteError(ScanprepError):
    """Failure while writing a scanner configuration file."""
    pass
