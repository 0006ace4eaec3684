"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
            )

            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/programs/{program_id}/rankings")
        async def get_rankings(program_id: str, db: Database):
            service = RankingService(db)
            return await service.calculate_program_rankings(program_id)
    """
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes():
    """
    Crea los índices necesarios para optimizar queries

    El índice único de scores garantiza una sola fila por
    (participant, judge, rule); los jueces hacen upsert sobre él.
    """
    db = Database.get_db()

    # Índices para programs
    await db.programs.create_index("status")
    await db.programs.create_index("name")

    # Índices para program_participants
    await db.program_participants.create_index("program_id")
    await db.program_participants.create_index("candidate_id")
    await db.program_participants.create_index("team_id")
    await db.program_participants.create_index([("program_id", 1), ("rank", 1)])

    # Índices para scores
    await db.scores.create_index("program_id")
    await db.scores.create_index(
        [("participant_id", 1), ("judge_id", 1), ("rule_id", 1)],
        unique=True
    )

    # Índices para candidates y teams
    await db.candidates.create_index("team_id")
    await db.candidates.create_index([("team_id", 1), ("name", 1)])
    await db.teams.create_index("name")

    logger.info("Indexes created successfully")
