"""
🏆 ProgramRepository - acceso a la colección de programas (competencias)
"""

import re
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.program import Program


class ProgramRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["programs"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(
        self,
        name: str,
        participant_type: str = "individual",
        status: str = "upcoming",
        max_score_per_judge: Optional[float] = None
    ) -> Program:
        """Crea un programa con ID generado"""
        program = Program(
            _id=str(ObjectId()),
            name=name,
            participant_type=participant_type,
            status=status,
            max_score_per_judge=max_score_per_judge,
        )
        await self.collection.insert_one(program.model_dump(by_alias=True))
        return program

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, program_id: str) -> Optional[Program]:
        """Obtiene un programa por ID"""
        doc = await self.collection.find_one({"_id": program_id})
        return Program(**doc) if doc else None

    async def get_by_name(self, name: str) -> Optional[Program]:
        """Busca un programa por nombre exacto, sin distinguir mayúsculas"""
        doc = await self.collection.find_one({
            "name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}
        })
        return Program(**doc) if doc else None

    async def get_completed(self) -> list[Program]:
        """Todos los programas finalizados (fuente oficial de puntos)"""
        cursor = self.collection.find({"status": "completed"})
        docs = await cursor.to_list(length=None)
        return [Program(**doc) for doc in docs]

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def update_status(self, program_id: str, status: str) -> bool:
        result = await self.collection.update_one(
            {"_id": program_id},
            {"$set": {"status": status}}
        )
        return result.matched_count > 0
