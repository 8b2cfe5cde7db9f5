from solind.clients.rpc import SolanaRPC

__all__ = ["SolanaRPC"]
