# backend/rentbook/cli/__main__.py
from __future__ import annotations

import argparse

from rentbook.cli.seed_demo import seed_demo


def main() -> None:
    p = argparse.ArgumentParser(prog="rentbook.cli", description="Seed a demo landlord account")
    p.add_argument("--user-email", default="demo@rentbook.local")
    p.add_argument("--user-name", default="Demo")
    p.add_argument("--password", default="demo1234")
    p.add_argument("--no-sample-property", action="store_true")
    args = p.parse_args()

    out = seed_demo(
        user_email=args.user_email,
        user_name=args.user_name,
        password=args.password,
        create_sample_property=(not args.no_sample_property),
    )
    print(
        {
            "ok": True,
            "user_email": out.user_email,
            "sample_property_id": out.property_id,
            "unit_ids": out.unit_ids,
            "person_ids": out.person_ids,
        }
    )


if __name__ == "__main__":
    main()
