"""Train route discovery on top of the TCDD booking service."""

__version__ = "0.1.0"
