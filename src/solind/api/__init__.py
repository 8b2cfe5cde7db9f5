from solind.api.export_data import export_accounts

__all__ = ["export_accounts"]
