# Helper to encrypt passwords for the .env file
# Usage: encrypt-secret <plain-text-password>
import getpass
import sys
from typing import List, Optional

from cryptography.fernet import Fernet
from rich import print

from shared_modules.config import Config


def encrypt(secret: str, fernet_key: str) -> str:
    return Fernet(fernet_key.encode()).encrypt(secret.encode()).decode()


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) == 1:
        password = argv[0]
    else:
        # Interactive prompt when started without argument (e.g. from the IDE)
        print("No password passed as argument.")
        password = getpass.getpass("Enter password (hidden): ")
        if not password:
            print("No password entered. Aborting.")
            return 1

    fernet_key = Config().get_secret("FERNET_KEY")
    if not fernet_key:
        fernet_key = Fernet.generate_key().decode()
        print("\nNo FERNET_KEY found in the environment/.env.")
        print("A new key was generated:")
        print(f"FERNET_KEY={fernet_key}")
        print("Add this key to your .env and run the helper again.\n")
        return 1

    print(f"Encrypted value for .env (e.g. OMNIHR_PASSWORD_ENC): {encrypt(password, fernet_key)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
