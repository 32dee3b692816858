"""
Minilang Command-Line Interface
===============================

- **mlc**: minilang compiler (source → .wat → .wasm)

Implemented as a Click application with help and error reporting.
"""

__all__ = ["mlc"]
