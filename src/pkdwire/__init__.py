"""pkdwire: typed wire schema and canonical codec for the Public Key Directory protocol."""

__version__ = "0.3.0"
