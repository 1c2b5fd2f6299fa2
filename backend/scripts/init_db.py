import asyncio
import os
import sys

# Add project root to path so we can import from backend.app
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from backend.app.core.database import create_tables, get_database_url
# IMPORT ALL MODELS
from backend.app.models.team_model import Team
from backend.app.models.tournament_model import Tournament
from backend.app.models.match_model import Match

async def init_models():
    # Safe create (only creates if missing)
    await create_tables()
    print(f"Database tables ready at {get_database_url()}")

if __name__ == "__main__":
    asyncio.run(init_models())
