"""
🎯 ParticipantRepository - entradas de cada programa (program_participants)

Los campos rank y total_score solo son oficiales una vez que el
programa está completed.
"""

import logging
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import UpdateOne

from app.models.participant import ProgramParticipant
from app.models.results import RankedResult

logger = logging.getLogger(__name__)


class ParticipantRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["program_participants"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(
        self,
        program_id: str,
        candidate_id: Optional[str] = None,
        team_id: Optional[str] = None
    ) -> ProgramParticipant:
        participant = ProgramParticipant(
            _id=str(ObjectId()),
            program_id=program_id,
            candidate_id=candidate_id,
            team_id=team_id,
        )
        await self.collection.insert_one(participant.model_dump(by_alias=True))
        return participant

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_program(self, program_id: str) -> list[ProgramParticipant]:
        """
        Participantes de un programa en el orden en que fueron inscritos.

        El orden importa: es el desempate estable entre puntajes idénticos.
        """
        cursor = self.collection.find({"program_id": program_id}).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [ProgramParticipant(**doc) for doc in docs]

    async def get_ranked_for_programs(
        self,
        program_ids: list[str]
    ) -> list[ProgramParticipant]:
        """
        Participantes con rank persistido en los programas indicados.

        Los documentos malformados se loguean y se omiten.
        """
        if not program_ids:
            return []

        cursor = self.collection.find({
            "program_id": {"$in": program_ids},
            "rank": {"$ne": None}
        })
        docs = await cursor.to_list(length=None)
        participants = []
        for doc in docs:
            try:
                participants.append(ProgramParticipant(**doc))
            except ValidationError:
                logger.warning("Skipping malformed participant document %s", doc.get("_id"))
        return participants

    async def get_for_candidate(
        self,
        program_id: str,
        candidate_id: str
    ) -> Optional[ProgramParticipant]:
        doc = await self.collection.find_one({
            "program_id": program_id,
            "candidate_id": candidate_id
        })
        return ProgramParticipant(**doc) if doc else None

    async def get_for_team(
        self,
        program_id: str,
        team_id: str
    ) -> Optional[ProgramParticipant]:
        """Entrada de equipo (sin candidato) en un programa"""
        doc = await self.collection.find_one({
            "program_id": program_id,
            "team_id": team_id,
            "candidate_id": None
        })
        return ProgramParticipant(**doc) if doc else None

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def update_result(
        self,
        participant_id: str,
        rank: int,
        total_score: float
    ) -> bool:
        """Persiste rank y total de un participante"""
        result = await self.collection.update_one(
            {"_id": participant_id},
            {"$set": {"rank": rank, "total_score": total_score}}
        )
        return result.matched_count > 0

    async def save_rankings(self, rankings: list[RankedResult]) -> int:
        """
        🔥 Persiste rank y total_score de todo un programa en un solo batch

        Retorna cuántos participantes se encontraron.
        """
        if not rankings:
            return 0

        operations = [
            UpdateOne(
                {"_id": r.participant_id},
                {"$set": {"rank": r.rank, "total_score": round(r.score, 2)}}
            )
            for r in rankings
        ]
        result = await self.collection.bulk_write(operations, ordered=True)
        return result.matched_count
