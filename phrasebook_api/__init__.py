"""Arabic/English phrasebook backend: translation proxy and anonymous phrase sync."""

__version__ = "1.0.0"
