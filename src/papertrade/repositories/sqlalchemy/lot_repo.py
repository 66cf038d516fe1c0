"""SQLAlchemy implementation of LotRepository."""

from decimal import Decimal

from sqlalchemy.orm import Session

from papertrade.core.timezone import from_storage, to_storage
from papertrade.domain.models import Lot
from papertrade.repositories.sqlalchemy.orm_models import LotORM
from papertrade.repositories.sqlalchemy.unit_of_work import flush_or_raise


class SqlAlchemyLotRepository:
    """SQLAlchemy-backed open-lot repository. Writes flush but never commit."""

    def __init__(self, db: Session):
        self._db = db

    def list_open_lots(self, user_id: str, symbol: str) -> list[Lot]:
        """List open lots for one symbol in FIFO order."""
        orm_lots = (
            self._db.query(LotORM)
            .filter(LotORM.user_id == user_id, LotORM.symbol == symbol)
            .order_by(LotORM.acquired_at_utc, LotORM.lot_id)
            .all()
        )
        return [self._to_domain(lot) for lot in orm_lots]

    def list_by_user(self, user_id: str) -> list[Lot]:
        """List all open lots for a user, oldest first."""
        orm_lots = (
            self._db.query(LotORM)
            .filter(LotORM.user_id == user_id)
            .order_by(LotORM.acquired_at_utc, LotORM.lot_id)
            .all()
        )
        return [self._to_domain(lot) for lot in orm_lots]

    def create(self, lot: Lot) -> Lot:
        """Stage a new lot; the flush assigns its lot_id."""
        orm_lot = LotORM(
            user_id=lot.user_id,
            symbol=lot.symbol,
            quantity=lot.quantity,
            unit_cost=lot.unit_cost,
            acquired_at_utc=to_storage(lot.acquired_at_est),
        )
        self._db.add(orm_lot)
        flush_or_raise(self._db, f"record lot of {lot.symbol}")
        return Lot(
            lot_id=orm_lot.lot_id,
            user_id=lot.user_id,
            symbol=lot.symbol,
            quantity=lot.quantity,
            unit_cost=lot.unit_cost,
            acquired_at_est=lot.acquired_at_est,
        )

    def update_quantity(self, lot_id: int, new_quantity: Decimal) -> None:
        """Stage a reduced quantity for a partially consumed lot."""
        orm_lot = self._db.query(LotORM).filter(LotORM.lot_id == lot_id).first()
        if not orm_lot:
            raise ValueError(f"Lot not found: {lot_id}")
        orm_lot.quantity = new_quantity
        flush_or_raise(self._db, f"update lot {lot_id}")

    def delete(self, lot_id: int) -> None:
        """Stage removal of a fully consumed lot."""
        self._db.query(LotORM).filter(LotORM.lot_id == lot_id).delete()
        flush_or_raise(self._db, f"delete lot {lot_id}")

    @staticmethod
    def _to_domain(orm: LotORM) -> Lot:
        """Convert ORM model to domain model."""
        return Lot(
            lot_id=orm.lot_id,
            user_id=orm.user_id,
            symbol=orm.symbol,
            quantity=Decimal(str(orm.quantity)),
            unit_cost=Decimal(str(orm.unit_cost)) if orm.unit_cost else Decimal("0"),
            acquired_at_est=from_storage(orm.acquired_at_utc),
        )
