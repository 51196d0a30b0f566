"""In-memory, rule-checked token and native-coin transfers with allowlists, fee limits and statistics."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "state",
    "token_helpers",
    "initialize",
    "transfer_sol",
    "transfer_token",
    "transfer_with_authority",
    "batch_transfer",
]