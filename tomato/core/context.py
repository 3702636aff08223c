"""
Application context: everything a request handler needs, built once per app.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from tomato.core.config import Settings
from tomato.database import create_engine, create_session_maker
from tomato.services.payment import BasePaymentGateway, build_payment_gateway


@dataclass
class AppContext:
    """
    Attributes:
        settings: Validated configuration
        engine: Async database engine
        session_maker: Factory for per-request sessions
        payment_gateway: Razorpay, or the unavailable placeholder
    """
    settings: Settings
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    payment_gateway: BasePaymentGateway

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        payment_gateway: Optional[BasePaymentGateway] = None,
    ) -> "AppContext":
        engine = create_engine(settings.database_url, echo=settings.debug)
        return cls(
            settings=settings,
            engine=engine,
            session_maker=create_session_maker(engine),
            payment_gateway=payment_gateway or build_payment_gateway(settings),
        )

    async def close(self) -> None:
        await self.engine.dispose()
