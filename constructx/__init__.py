"""View-model service for the construction project management web app."""

__version__ = "0.1.0"
