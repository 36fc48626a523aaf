#!/usr/bin/env python3
"""run_demo.py — Generate one message of each type against the live API.

Usage:
    python scripts/run_demo.py              # default: http://localhost:8000
    python scripts/run_demo.py --base-url http://localhost:8000
"""

from __future__ import annotations

import argparse
import sys

import httpx

DEMO_SCENARIOS = [
    {
        "name": "Email — internship request",
        "payload": {
            "messageType": "Email",
            "goal": "ask for an internship",
            "keyPoints": "I am a CS student with two Python projects",
            "tone": "Professional & Formal",
            "wordLimit": 150,
        },
    },
    {
        "name": "LinkedIn Message — reconnect",
        "payload": {
            "messageType": "LinkedIn Message",
            "goal": "reconnect with a former colleague",
            "keyPoints": "We worked on the payments team in 2021; I am now exploring ML roles",
            "tone": "Friendly & Approachable",
            "recipient": "Priya",
        },
    },
    {
        "name": "Resume Bullet Point",
        "payload": {
            "messageType": "Resume Bullet Point",
            "goal": "describe my migration project",
            "keyPoints": "Moved 40 services to Kubernetes, cut infra cost by 30%",
            "tone": "Concise & Direct",
            "wordLimit": 30,
        },
    },
]


def run_demo(base_url: str) -> None:
    print("═" * 60)
    print(" TypeWise AI — Demo")
    print("═" * 60)
    print(f"Target: {base_url}\n")

    # Health check
    try:
        resp = httpx.get(f"{base_url}/api/v1/health", timeout=5)
        resp.raise_for_status()
        print(f"✅ Health check: {resp.json()}\n")
    except httpx.HTTPError as exc:
        print(f"❌ Health check failed: {exc}")
        print("   Make sure the server is running: uvicorn typewise.main:app --reload")
        sys.exit(1)

    completed = 0
    for scenario in DEMO_SCENARIOS:
        print(f"─── {scenario['name']} {'─' * max(0, 40 - len(scenario['name']))}")
        try:
            resp = httpx.post(f"{base_url}/api/v1/generate", json=scenario["payload"], timeout=60)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            print(f"  ❌ Error: {exc}\n")
            continue

        if data.get("subject"):
            print(f"  → Subject: {data['subject']}")
        print(f"  → Message:\n{data['message']}\n")
        completed += 1

    print("═" * 60)
    print(f" Results: {completed}/{len(DEMO_SCENARIOS)} messages generated")
    print("═" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run TypeWise demo scenarios")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    args = parser.parse_args()
    run_demo(args.base_url)
