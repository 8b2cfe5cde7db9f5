from __future__ import annotations

# Rejected at startup; the program id has to be supplied explicitly.
PROGRAM_ID_PLACEHOLDER = "Enter Program ID here"

DEVNET_RPC_URL = "https://api.devnet.solana.com"

# Application account layout: 8-byte Anchor discriminator + 64 bytes of record.
ACCOUNT_DATA_SIZE = 72
DISCRIMINATOR_SIZE = 8
ADDRESS_SIZE = 32

# getMultipleAccounts accepts at most 100 keys per call.
MAX_MULTIPLE_ACCOUNTS = 100

OUTPUT_DIR = "./output"
ACCOUNTS_PREFIX = "application_accounts"
TIMESTAMPED_PREFIX = "time_stamped_accounts"
