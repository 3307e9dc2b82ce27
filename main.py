"""
Main entry point for the object storage gateway

Creates a .env template on first run, then serves the gateway until
interrupted. Configure via environment variables or .env file.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.config import ensure_env_file, get_settings
from services.service import GatewayService


async def main():
    """Main entry point"""
    if ensure_env_file():
        print(".env file created with default values.")
    else:
        print(".env file already exists.")

    service = GatewayService(config=get_settings())

    try:
        await service.start()
    except KeyboardInterrupt:
        print("Received interrupt signal, shutting down...")
    except Exception as e:
        service._logger.critical("Fatal error: %s", e, exc_info=True)
        sys.exit(1)
    finally:
        try:
            await service.stop()
        except Exception as e:
            print(f"Error during shutdown: {e}")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
