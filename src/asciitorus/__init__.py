"""ASCII torus: a text-masked, character-rendered torus that explodes on click."""

__version__ = "0.1.0"
