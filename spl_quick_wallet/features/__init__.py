"""Feature modules for SPL Quick Wallet.

- session: Wallet connection, balances and the session state observers
- token: SPL token mint and transfer
"""
