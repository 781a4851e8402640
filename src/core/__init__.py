"""
Core building blocks: RPC client, keypair store, balances and errors.
"""
