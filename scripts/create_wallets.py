# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Create facilitator signing keys
Generate an EVM key and a Solana keypair for the facilitator, and save to .env file
"""

import os
import sys

import base58
from dotenv import load_dotenv, set_key
from eth_account import Account
from solders.keypair import Keypair

# Load existing environment variables
load_dotenv()

ENV_FILE = ".env"


def _evm_address(key: str) -> str:
    return Account.from_key(key if key.startswith("0x") else f"0x{key}").address


def _svm_address(key: str) -> str:
    return str(Keypair.from_bytes(base58.b58decode(key)).pubkey())


def create_wallets():
    """Create new facilitator EVM and SVM keys"""

    print("""
╔══════════════════════════════════════════════════════════╗
║            GX402 Facilitator Key Generator               ║
║                                                          ║
║  Create the EVM and Solana keys used to settle payments  ║
╚══════════════════════════════════════════════════════════╝
    """)

    existing_evm_key = os.getenv("EVM_PRIVATE_KEY")
    existing_svm_key = os.getenv("SVM_PRIVATE_KEY")

    if existing_evm_key or existing_svm_key:
        print("\n⚠️  Existing facilitator keys detected:")

        if existing_evm_key:
            try:
                print(f"  EVM address: {_evm_address(existing_evm_key)}")
            except Exception:
                print("  Invalid EVM private key")

        if existing_svm_key:
            try:
                print(f"  SVM address: {_svm_address(existing_svm_key)}")
            except Exception:
                print("  Invalid SVM private key")

        response = input("\nCreate new keys? (y/n): ").lower()
        if response != "y":
            print("Keeping existing key configuration")
            return

    print("\n🔑 Creating new keys...")

    evm_account = Account.create()
    print("\nEVM facilitator:")
    print(f"  Address: {evm_account.address}")

    svm_keypair = Keypair()
    print("\nSVM facilitator (fee payer):")
    print(f"  Address: {svm_keypair.pubkey()}")

    if not os.path.exists(ENV_FILE):
        open(ENV_FILE, "a").close()
        print(f"\n✅ Created {ENV_FILE} file")

    set_key(ENV_FILE, "EVM_PRIVATE_KEY", "0x" + evm_account.key.hex().removeprefix("0x"))
    set_key(ENV_FILE, "SVM_PRIVATE_KEY", str(svm_keypair))

    print(f"\n✅ Keys saved to {ENV_FILE}")

    print("\n" + "=" * 60)
    print("Next steps:")
    print("=" * 60)

    print("\n1. Fund the EVM address with gas on every chain you settle on:")
    print("   Base Sepolia: https://www.coinbase.com/faucets/base-sepolia-faucet")

    print("\n2. Fund the SVM fee payer with SOL:")
    print(f"   solana airdrop 1 {svm_keypair.pubkey()} --url devnet")

    print("\n3. Start the facilitator:")
    print("   python run_facilitator.py")


def show_existing_wallets():
    """Show the addresses behind the configured keys"""

    print("\n📋 Current facilitator configuration:")
    print("=" * 60)

    evm_key = os.getenv("EVM_PRIVATE_KEY")
    svm_key = os.getenv("SVM_PRIVATE_KEY")

    if evm_key:
        try:
            print(f"\nEVM address: {_evm_address(evm_key)}")
        except Exception:
            print("\nEVM: Invalid private key")
    else:
        print("\nEVM: Not configured")

    if svm_key:
        try:
            print(f"\nSVM fee payer: {_svm_address(svm_key)}")
        except Exception:
            print("\nSVM: Invalid private key")
    else:
        print("\nSVM: Not configured")

    chain_id = os.getenv("CUSTOM_EVM_CHAIN_ID")
    if chain_id and chain_id != "0":
        print(f"\nCustom EVM network: eip155:{chain_id} via {os.getenv('CUSTOM_EVM_RPC_URL', '(no RPC URL)')}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--show":
        show_existing_wallets()
    else:
        create_wallets()
