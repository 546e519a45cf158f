"""Instruction encoding, constant pool, bytecode buffer and emitter for a register-based VM."""

__version__ = "0.1.0"

__all__ = [
    "assembler",
    "bytecode",
    "constant_pool",
    "emitter",
    "function",
    "instruction",
    "modules",
]