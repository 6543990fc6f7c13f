import argparse
import os
import sys

# Add parent directory to path so the script can be run directly
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from security import create_access_token

def main():
    parser = argparse.ArgumentParser(description="Print a bearer token for a user id.")
    parser.add_argument("user_id", help="id of an existing user, e.g. 'admin' after seeding")
    parser.add_argument("--days", type=int, default=30, help="token lifetime in days")
    args = parser.parse_args()

    print(create_access_token({"sub": args.user_id}, expires_delta=args.days * 24 * 60 * 60))

if __name__ == "__main__":
    main()
