"""Code generation: call the binding generator against the freshly built library."""

from .bindgen import generate_bindings, generator_command

__all__ = [
    "generate_bindings",
    "generator_command",
]
