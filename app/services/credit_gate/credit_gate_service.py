"""
Credit Gate Service Module

This module gates session starts on the user's credit balance and applies the
per-session accounting: one credit is consumed and a fixed experience reward is
granted every time a session is allowed to start.

The two writes go to different tables through separate commits. Either can fail
on its own; a failure aborts the session start, but whatever was already committed
stays committed.

Dependencies:
- sqlalchemy: For database reads and updates.
- loguru: For logging operations.
- app.database: For the session factory.
- app.models.user_models: For the User and Profile models.
- app.errors.exceptions: For InsufficientCredits and CreditUpdateError.

Author: @kcaparas1630
"""

from typing import Callable, Optional
from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger
from app.database import SessionLocal
from app.models.user_models import User, Profile
from app.constants.session_constants import SESSION_CREDIT_COST, SESSION_EXPERIENCE_REWARD
from app.errors.exceptions import InsufficientCredits, CreditUpdateError


class CreditGate:
    """
    Reads and spends a user's session credits.

    Attributes:
        session_factory (Callable[[], Session]): Opens a new database session per operation.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def get_balance(self, user_id: str) -> Optional[int]:
        """
        Read the current credit balance.

        Returns:
            Optional[int]: The stored balance, or None when the user or the value is missing.

        Raises:
            CreditUpdateError: If the read fails.
        """
        try:
            with self.session_factory() as db:
                return db.execute(select(User.credits).where(User.id == user_id)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch credits for user {user_id}: {e}")
            raise CreditUpdateError("Failed to fetch credits.") from e

    def authorize(self, user_id: str) -> int:
        """
        Check that the user may start a session.

        Returns:
            int: The balance the decrement will be computed from.

        Raises:
            InsufficientCredits: If the balance is None or not positive.
        """
        balance = self.get_balance(user_id)
        if balance is None or balance <= 0:
            logger.info(f"Session start rejected for user {user_id}: balance={balance}")
            raise InsufficientCredits()
        return balance

    def charge_session(self, user_id: str, balance: int) -> int:
        """
        Consume one credit and grant the experience reward.

        Args:
            user_id (str): The user starting the session.
            balance (int): Balance returned by authorize().

        Returns:
            int: The new credit balance.

        Raises:
            CreditUpdateError: If either write fails. Earlier writes are not rolled back.
        """
        new_balance = balance - SESSION_CREDIT_COST
        self._set_credits(user_id, new_balance)
        self._add_experience(user_id, SESSION_EXPERIENCE_REWARD)
        logger.info(f"Charged session for user {user_id}: credits {balance} -> {new_balance}")
        return new_balance

    def _set_credits(self, user_id: str, credits: int) -> None:
        try:
            with self.session_factory() as db:
                db.execute(update(User).where(User.id == user_id).values(credits=credits))
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to decrement credits: {e}")
            raise CreditUpdateError("Failed to decrement credits.") from e

    def _add_experience(self, user_id: str, amount: int) -> None:
        try:
            with self.session_factory() as db:
                profile = db.get(Profile, user_id)
                if profile is None:
                    # First session for this user
                    db.add(Profile(id=user_id, experience=amount))
                else:
                    profile.experience = (profile.experience or 0) + amount
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update experience: {e}")
            raise CreditUpdateError("Failed to update experience.") from e


credit_gate = CreditGate()
