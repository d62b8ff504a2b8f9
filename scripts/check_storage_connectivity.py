import asyncio
import sys
import os

# Ensure the package is importable when run from a checkout
sys.path.append(os.getcwd())

from upload_manager.config import settings
from upload_manager.services.storage_service import StorageService


async def check_storage_connectivity():
    print("--- Checking Storage Connectivity ---")
    print(f"Endpoint: {settings.endpoint}")
    print(f"Bucket: {settings.bucket}")

    try:
        service = StorageService()
    except Exception as e:
        print(f"❌ Failed to initialize client: {e}")
        return 1

    if await service.check_connectivity():
        print("✅ Bucket reachable")
        return 0
    print("❌ Bucket not reachable with the configured credentials")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(check_storage_connectivity()))
