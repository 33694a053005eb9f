"""Interactive Pokedex shell backed by the PokeAPI, with its cache and HTTP client."""

__version__ = "0.1.0"
__all__ = ["cache", "client", "cli"]