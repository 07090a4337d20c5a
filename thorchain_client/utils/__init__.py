"""
Utility helpers for the client.

Submodules:
- bech32: address codec primitives
- hash: sha256 / ripemd160 / hash160
- retry: async retry with backoff
"""
