"""
CandidateRepository - MongoDB access for candidates collection.
"""

import logging
import re
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.models.team import Candidate

logger = logging.getLogger(__name__)


class CandidateRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["candidates"]

    async def get_by_ids(self, candidate_ids: list[str]) -> dict[str, Candidate]:
        """Get candidates keyed by ID, skipping malformed documents."""
        if not candidate_ids:
            return {}

        cursor = self.collection.find({"_id": {"$in": list(candidate_ids)}})
        docs = await cursor.to_list(length=None)
        candidates = {}
        for doc in docs:
            try:
                candidate = Candidate(**doc)
                candidates[candidate.id] = candidate
            except ValidationError:
                logger.warning("Skipping malformed candidate document %s", doc.get("_id"))
        return candidates

    async def get_in_team_by_name(self, team_id: str, name: str) -> Optional[Candidate]:
        """Lookup scoped by team + name to avoid collisions between teams."""
        doc = await self.collection.find_one({
            "team_id": team_id,
            "name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}
        })
        return Candidate(**doc) if doc else None

    async def create(self, name: str, team_id: Optional[str] = None) -> Candidate:
        candidate = Candidate(_id=str(ObjectId()), name=name, team_id=team_id)
        await self.collection.insert_one(candidate.model_dump(by_alias=True))
        return candidate
