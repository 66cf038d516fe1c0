"""SQLAlchemy implementation of AccountRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from papertrade.core.exceptions import PersistenceError, ValidationError
from papertrade.core.timezone import from_storage, to_storage
from papertrade.domain.models import Account
from papertrade.repositories.sqlalchemy.orm_models import AccountORM
from papertrade.repositories.sqlalchemy.unit_of_work import flush_or_raise


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            user_id=account.user_id,
            cash_balance=account.cash_balance,
            initial_balance=account.initial_balance,
            created_at_utc=to_storage(account.created_at_est),
        )
        self._db.add(orm_account)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            if self.get_by_id(account.user_id):
                raise ValidationError(f"Account for '{account.user_id}' already exists") from exc
            raise PersistenceError(f"Failed to create account for {account.user_id}") from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError(f"Failed to create account for {account.user_id}") from exc
        self._db.refresh(orm_account)
        return self._to_domain(orm_account)

    def get_by_id(self, user_id: str) -> Optional[Account]:
        """Retrieve account by user ID."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.user_id == user_id
        ).first()
        return self._to_domain(orm_account) if orm_account else None

    def get_for_update(self, user_id: str) -> Optional[Account]:
        """Retrieve account by user ID with a row lock (ignored by SQLite)."""
        orm_account = (
            self._db.query(AccountORM)
            .filter(AccountORM.user_id == user_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        return self._to_domain(orm_account) if orm_account else None

    def update_cash_balance(self, user_id: str, new_cash: Decimal) -> None:
        """Stage a new cash balance in the current transaction."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.user_id == user_id
        ).first()
        if not orm_account:
            raise ValueError(f"Account not found: {user_id}")
        orm_account.cash_balance = new_cash
        flush_or_raise(self._db, f"update cash balance for {user_id}")

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            user_id=orm.user_id,
            cash_balance=Decimal(str(orm.cash_balance)) if orm.cash_balance else Decimal("0"),
            initial_balance=Decimal(str(orm.initial_balance)) if orm.initial_balance else Decimal("0"),
            created_at_est=from_storage(orm.created_at_utc),
        )
