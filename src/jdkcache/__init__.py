"""local cache of JDK/JRE builds resolved from the Adoptium release API."""

__version__ = "0.1.0"
