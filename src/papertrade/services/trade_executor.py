"""Trade executor: buy and sell against the cash account and FIFO lots."""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Union

from papertrade.core.exceptions import (
    InsufficientFundsError,
    InsufficientSharesError,
    NotFoundError,
    ValidationError,
)
from papertrade.core.money import (
    MAX_QUANTITY,
    QUANTITY_PLACES,
    ZERO,
    decimal_places,
    quantize_cash,
    quantize_price,
    to_decimal,
)
from papertrade.core.timezone import now_eastern
from papertrade.domain.models import Account, Lot, TradeSide, TransactionLogEntry
from papertrade.domain.views import BuyResult, FifoPlan, LotConsumption, SellResult
from papertrade.repositories.protocols import AccountRepository, LotRepository, UnitOfWork
from papertrade.services.locks import UserLockRegistry
from papertrade.services.price_oracle import PriceOracle
from papertrade.services.transaction_log import TransactionLog

logger = logging.getLogger(__name__)

_SYMBOL_RE = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,19}$")


def normalize_symbol(symbol: Optional[str]) -> str:
    """Trim and upper-case a ticker symbol, rejecting empty or malformed ones."""
    cleaned = (symbol or "").strip().upper()
    if not cleaned:
        raise ValidationError("Stock symbol is required")
    if not _SYMBOL_RE.match(cleaned):
        raise ValidationError(f"Invalid stock symbol: {cleaned}")
    return cleaned


def normalize_quantity(quantity: Union[Decimal, float, int, str, None]) -> Decimal:
    """Convert a share quantity to Decimal; it must be finite, positive and storable."""
    if quantity is None:
        raise ValidationError("Valid quantity (number of shares) is required")
    try:
        value = to_decimal(quantity)
    except ValueError:
        raise ValidationError("Valid quantity (number of shares) is required") from None
    if value <= 0:
        raise ValidationError("Quantity must be greater than zero")
    if decimal_places(value) > QUANTITY_PLACES:
        raise ValidationError(f"Quantity supports at most {QUANTITY_PLACES} decimal places")
    if value >= MAX_QUANTITY:
        raise ValidationError(f"Quantity must be less than {MAX_QUANTITY:,}")
    return value


def plan_fifo_sale(symbol: str, lots: list[Lot], quantity: Decimal) -> FifoPlan:
    """
    Decide which lots a sale of ``quantity`` shares consumes.

    ``lots`` must be in FIFO order. Lots are closed oldest first; the lot in
    which the sale ends is reduced in place and every later lot is left
    untouched.
    """
    owned = sum((lot.quantity for lot in lots), ZERO)
    if owned < quantity:
        raise InsufficientSharesError(symbol, owned=owned, requested=quantity)

    plan = FifoPlan()
    remaining = quantity
    for lot in lots:
        if remaining <= 0:
            break
        if lot.quantity <= remaining:
            taken = lot.quantity
        else:
            taken = remaining
        consumption = LotConsumption(
            lot_id=lot.lot_id,
            quantity=taken,
            unit_cost=lot.unit_cost,
            remaining=lot.quantity - taken,
        )
        plan.consumptions.append(consumption)
        plan.cost_removed += consumption.cost
        remaining -= taken
    return plan


class TradeExecutor:
    """
    Executes market orders for one user at a time.

    Each trade fetches a fresh price, then reads and rewrites the account and
    its lots inside a single unit of work while holding the user's lock.
    Validation, quote and balance failures change nothing. The transaction
    log entry is written after the commit and its failure never undoes the
    trade.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        lot_repo: LotRepository,
        unit_of_work: UnitOfWork,
        price_oracle: PriceOracle,
        transaction_log: TransactionLog,
        lock_registry: Optional[UserLockRegistry] = None,
        clock: Callable[[], datetime] = now_eastern,
    ):
        self._account_repo = account_repo
        self._lot_repo = lot_repo
        self._uow = unit_of_work
        self._oracle = price_oracle
        self._log = transaction_log
        self._locks = lock_registry or UserLockRegistry()
        self._clock = clock

    def buy(
        self,
        user_id: str,
        symbol: str,
        quantity: Union[Decimal, float, int, str],
    ) -> BuyResult:
        """Buy ``quantity`` shares at the current price, opening a new lot."""
        symbol = normalize_symbol(symbol)
        quantity = normalize_quantity(quantity)

        with self._locks.hold(user_id):
            quote = self._oracle.quote(symbol)
            total_cost = quantize_cash(quote.price * quantity)
            executed_at = self._clock()

            try:
                account = self._load_account(user_id)
                if account.cash_balance < total_cost:
                    raise InsufficientFundsError(
                        held=account.cash_balance,
                        required=total_cost,
                        symbol=symbol,
                        quantity=quantity,
                    )

                new_balance = account.cash_balance - total_cost
                self._account_repo.update_cash_balance(user_id, new_balance)
                lot = self._lot_repo.create(
                    Lot(
                        user_id=user_id,
                        symbol=symbol,
                        quantity=quantity,
                        unit_cost=quote.price,
                        acquired_at_est=executed_at,
                    )
                )
                self._uow.commit()
            except Exception as exc:
                self._uow.rollback()
                logger.info("Buy of %s %s for %s rejected: %s", quantity, symbol, user_id, exc)
                raise

        logger.info(
            "Bought %s %s @ %s for %s (cost %s, cash %s)",
            quantity, symbol, quote.price, user_id, total_cost, new_balance,
        )
        logged = self._log.append(
            TransactionLogEntry(
                user_id=user_id,
                symbol=symbol,
                side=TradeSide.BUY,
                quantity=quantity,
                price=quote.price,
                total_amount=total_cost,
                executed_at_est=executed_at,
            )
        )

        return BuyResult(
            symbol=symbol,
            quantity=quantity,
            price=quote.price,
            total_cost=total_cost,
            new_balance=new_balance,
            lot_id=lot.lot_id,
            executed_at=executed_at,
            logged=logged,
        )

    def sell(
        self,
        user_id: str,
        symbol: str,
        quantity: Union[Decimal, float, int, str],
    ) -> SellResult:
        """Sell ``quantity`` shares at the current price, consuming lots FIFO."""
        symbol = normalize_symbol(symbol)
        quantity = normalize_quantity(quantity)

        with self._locks.hold(user_id):
            quote = self._oracle.quote(symbol)
            total_proceeds = quantize_cash(quote.price * quantity)
            executed_at = self._clock()

            try:
                account = self._load_account(user_id)
                lots = self._lot_repo.list_open_lots(user_id, symbol)
                plan = plan_fifo_sale(symbol, lots, quantity)

                for lot_id in plan.lots_to_delete:
                    self._lot_repo.delete(lot_id)
                for lot_id, remaining in plan.lots_to_reduce:
                    self._lot_repo.update_quantity(lot_id, remaining)

                new_balance = account.cash_balance + total_proceeds
                self._account_repo.update_cash_balance(user_id, new_balance)
                self._uow.commit()
            except Exception as exc:
                self._uow.rollback()
                logger.info("Sell of %s %s for %s rejected: %s", quantity, symbol, user_id, exc)
                raise

        cost_removed = quantize_cash(plan.cost_removed)
        average_cost = quantize_price(plan.cost_removed / quantity)
        profit_loss = total_proceeds - cost_removed

        logger.info(
            "Sold %s %s @ %s for %s (proceeds %s, P/L %s, cash %s)",
            quantity, symbol, quote.price, user_id, total_proceeds, profit_loss, new_balance,
        )
        logged = self._log.append(
            TransactionLogEntry(
                user_id=user_id,
                symbol=symbol,
                side=TradeSide.SELL,
                quantity=quantity,
                price=quote.price,
                total_amount=total_proceeds,
                executed_at_est=executed_at,
            )
        )

        return SellResult(
            symbol=symbol,
            quantity=quantity,
            price=quote.price,
            total_value=total_proceeds,
            average_cost=average_cost,
            profit_loss=profit_loss,
            new_balance=new_balance,
            lots_consumed=list(plan.consumptions),
            executed_at=executed_at,
            logged=logged,
        )

    def _load_account(self, user_id: str) -> Account:
        account = self._account_repo.get_for_update(user_id)
        if not account:
            raise NotFoundError("Account", user_id)
        return account
