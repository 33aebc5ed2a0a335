#!/usr/bin/env python3
"""run_demo.py: Exercise the GTM Alpha gateway against a running server.

Usage:
    python scripts/run_demo.py              # default: http://localhost:3000
    python scripts/run_demo.py --base-url http://localhost:3000
    python scripts/run_demo.py --skip-consultation
"""

from __future__ import annotations

import argparse
import sys

import httpx

SAMPLE_CONSULTATION = {
    "client_name": "Jane Doe",
    "client_designation": "Founder & CEO",
    "company_name": "Acme Analytics",
    "company_description": "B2B analytics platform for mid-market retailers.",
    "gtm_challenge": "Expanding from India into the EU mid-market",
    "business_stage": "seed",
    "industry": "SaaS",
    "current_team_size": "12",
    "budget_range": "$50k-$100k",
    "specific_focus": "Outbound pipeline generation",
}


def run_demo(base_url: str, skip_consultation: bool = False) -> None:
    print("═" * 60)
    print(" GTM Alpha Gateway: Demo")
    print("═" * 60)
    print(f"Target: {base_url}\n")

    # Health check
    try:
        resp = httpx.get(f"{base_url}/health", timeout=5)
        resp.raise_for_status()
        print(f"✅ Health check: {resp.json()}\n")
    except httpx.HTTPError as exc:
        print(f"❌ Health check failed: {exc}")
        print("   Make sure the server is running: uvicorn gtm_gateway.main:app --port 3000")
        sys.exit(1)

    # Actor status
    resp = httpx.get(f"{base_url}/api/actor-status", timeout=30)
    data = resp.json()
    if data.get("success"):
        actor = data["actor"]
        print(f"✅ Actor: {actor.get('username')}/{actor.get('name')} (public={actor.get('isPublic')})\n")
    else:
        print(f"⚠️  Actor status [{resp.status_code}]: {data.get('message')}: {data.get('error')}\n")

    if skip_consultation:
        return

    print("─── Consultation " + "─" * 43)
    print(f"  Client:    {SAMPLE_CONSULTATION['client_name']} @ {SAMPLE_CONSULTATION['company_name']}")
    print(f"  Challenge: {SAMPLE_CONSULTATION['gtm_challenge']}")
    print("  (waiting for the actor run, this can take several minutes)")

    resp = httpx.post(
        f"{base_url}/api/gtm-consultation",
        json=SAMPLE_CONSULTATION,
        timeout=700,
    )
    data = resp.json()
    print(f"  → HTTP:       {resp.status_code}")
    print(f"  → Success:    {data.get('success')}")
    print(f"  → Run:        {data.get('runId')}")
    print(f"  → Console:    {data.get('consoleUrl')}")
    if data.get("success"):
        result = data["data"]
        print(f"  → Report:     {result.get('report_url')}")
        print(f"  → Epic focus: {result.get('primary_epic_focus')}")
    else:
        print(f"  → Error:      {data.get('message')}: {data.get('error')}")
    print("═" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run GTM Alpha gateway demo")
    parser.add_argument("--base-url", default="http://localhost:3000", help="API base URL")
    parser.add_argument("--skip-consultation", action="store_true", help="Only run the read-only checks")
    args = parser.parse_args()
    run_demo(args.base_url, skip_consultation=args.skip_consultation)
