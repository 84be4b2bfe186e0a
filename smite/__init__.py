"""Fuzzing toolkit for Lightning Network nodes: BOLT 8 Noise transport, secp256k1 keys, BOLT types, process control and scenario runners."""

__version__ = "0.0.0"