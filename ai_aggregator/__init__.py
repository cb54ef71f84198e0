"""Fan one prompt out to several text-generation providers and compare the answers."""

__version__ = "0.1.0"
