import asyncio
import sys
import os

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from perangkat_ajar.config import Config
from perangkat_ajar.database import init_db

async def main():
    print(f"Initializing document table on {Config.DATABASE_URL.split('@')[-1]}...")
    try:
        await init_db()
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise
    print("✅ Table 'documents' ready.")

if __name__ == "__main__":
    asyncio.run(main())
