"""
Normalize -> wrap -> dispatch -> pack pipeline behind ``hashimage.abi``.
"""
