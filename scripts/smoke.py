"""
Creates one mobile money purchase against a running instance.

    python scripts/smoke.py --base-url http://localhost:3000 --user-id 1
"""
import argparse
import sys

import httpx


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a test crypto purchase")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--user-id", type=int, default=1)
    parser.add_argument("--amount", default="5000")
    parser.add_argument("--currency", default="KES")
    parser.add_argument("--crypto-currency", default="btc")
    parser.add_argument("--wallet", default="3FZbgi29cpjq2GjdwV8eyHuJJnkLtktZc5")
    args = parser.parse_args()

    try:
        response = httpx.post(
            f"{args.base_url.rstrip('/')}/api/transactions",
            json={
                "userId": args.user_id,
                "amount": args.amount,
                "currency": args.currency,
                "cryptoCurrency": args.crypto_currency,
                "paymentMethod": "mobile_money",
                "userDetails": {"walletAddress": args.wallet},
            },
            timeout=60,
        )
    except httpx.RequestError as e:
        print(f"Error: {e}")
        return 1

    if response.status_code != 200:
        print(f"Error {response.status_code}: {response.text}")
        return 1

    data = response.json()
    print("Transaction created:", data["transaction"])
    print("Complete payment at:", data["moonpayUrl"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
