"""
Quick smoke test against a running service
"""

import asyncio
import sys

import httpx

SAMPLE_ARTICLE = (
    "Government announces new climate measures after summit in London\n"
    "The government announced on March 5, 2024 a package of climate measures, according to officials "
    "who spoke after the international summit in London. The minister said in a statement that the "
    "plan would cut national emissions over the next decade. Reporters from several countries attended "
    "the briefing, where the president of the summit outlined the timeline and the funding model. "
    "Officials added that an update on the plan would follow later in the year once the consultation "
    "with industry groups and regional authorities had concluded."
)


async def smoke_api(base_url: str):
    """Exercise the public endpoints once"""

    print("Testing News Verification API...")
    print("=" * 50)

    async with httpx.AsyncClient(timeout=60.0) as client:
        print("\n1. Health check...")
        response = await client.get(f"{base_url}/health")
        print(f"Status: {response.status_code}")
        print(f"Response: {response.json()}")

        print("\n2. Stage 1...")
        payload = {"content": SAMPLE_ARTICLE, "source_url": "https://www.bbc.com/news/x"}
        response = await client.post(f"{base_url}/stage1", json=payload)
        decision = response.json()
        print(f"Status: {response.status_code}")
        print(f"Decision: {decision.get('decision')} - {decision.get('reason')}")

        print("\n3. Full analysis...")
        response = await client.post(f"{base_url}/analyze", json=payload)
        print(f"Status: {response.status_code}")
        report = response.json()
        stage2 = report.get("stage2") if isinstance(report, dict) else None
        if stage2:
            print(f"Verdict: {stage2['overall_verdict']} ({stage2['overall_score']})")
        else:
            print(f"Response: {report}")

    print("\n" + "=" * 50)
    print("Smoke test completed")


if __name__ == "__main__":
    asyncio.run(smoke_api(sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8001"))
