"""
TeamRepository - MongoDB access for teams collection.
"""

import logging
import re
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.models.team import Team

logger = logging.getLogger(__name__)


class TeamRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["teams"]

    async def get_by_id(self, team_id: str) -> Optional[Team]:
        """Get team by ID."""
        doc = await self.collection.find_one({"_id": team_id})
        return Team(**doc) if doc else None

    async def get_by_name(self, name: str) -> Optional[Team]:
        """Get team by name, case insensitive."""
        doc = await self.collection.find_one({
            "name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}
        })
        return Team(**doc) if doc else None

    async def get_all_docs(self) -> list[dict]:
        """
        Raw team documents sorted by name.

        The points recompute validates each one on its own so a single
        malformed team is reported instead of aborting the batch.
        """
        cursor = self.collection.find().sort("name", 1)
        return await cursor.to_list(length=None)

    async def get_all(self) -> list[Team]:
        """All valid teams; malformed documents are logged and skipped."""
        teams = []
        for doc in await self.get_all_docs():
            try:
                teams.append(Team(**doc))
            except ValidationError:
                logger.warning("Skipping malformed team document %s", doc.get("_id"))
        return teams

    async def get_by_ids(self, team_ids: list[str]) -> dict[str, Team]:
        """Get teams keyed by ID, skipping malformed documents."""
        if not team_ids:
            return {}

        cursor = self.collection.find({"_id": {"$in": list(team_ids)}})
        docs = await cursor.to_list(length=None)

        teams = {}
        for doc in docs:
            try:
                team = Team(**doc)
                teams[team.id] = team
            except ValidationError:
                logger.warning("Skipping malformed team document %s", doc.get("_id"))
        return teams

    async def create(self, name: str) -> Team:
        """Create a new team."""
        team = Team(_id=str(ObjectId()), name=name)
        await self.collection.insert_one(team.model_dump(by_alias=True))
        return team

    async def update_total_points(self, team_id: str, total_points: int) -> bool:
        """Persist the recomputed points cache."""
        result = await self.collection.update_one(
            {"_id": team_id},
            {"$set": {"total_points": total_points}}
        )
        return result.matched_count > 0
