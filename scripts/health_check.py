"""Health check script for all environments"""
import asyncio
import sys

import httpx

from app.core.config import settings


async def check_health() -> bool:
    urls = {
        "local": "http://localhost:8084/health",
        "dev": "http://localhost:8084/health",
        "staging": "https://staging.yourapp.com/health",
        "prod": "https://api.yourapp.com/health",
    }

    env = settings.ENVIRONMENT.value
    url = urls.get(env)
    if not url:
        print(f"Unknown environment: {env}")
        return False

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(url)
            data = response.json()

            print(f"Environment: {env}")
            print(f"Status: {data['status']}")
            print(f"Events transport: {data.get('events_transport')}")
            print("Services:")
            for service, status in data["services"].items():
                mark = "ok" if status else "DOWN"
                print(f"  {service}: {mark}")

            return data["status"] == "healthy"

    except Exception as e:
        print(f"Health check failed: {e}")
        return False


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_health()) else 1)
