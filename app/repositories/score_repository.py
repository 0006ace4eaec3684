"""
ScoreRepository - lectura de los scores crudos de los jueces.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.score import ScoreRecord


class ScoreRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["scores"]

    async def get_by_program(self, program_id: str) -> list[ScoreRecord]:
        """Todas las filas (participant, judge, rule) de un programa."""
        cursor = self.collection.find({"program_id": program_id})
        docs = await cursor.to_list(length=None)
        return [ScoreRecord(**doc) for doc in docs]
