"""
Tests for trade booking, positions and risk
"""

import pytest

from bond_desk.engine.dto import Product, Side, Trade
from bond_desk.packages.booking import (
    PositionService,
    PositionServiceListener,
    RiskService,
    RiskServiceListener,
    TradeBookingService,
)
from bond_desk.packages.soa import BookNotFoundError, FunctionListener, ProductNotFoundError

BOOKS = ('TRSY1', 'TRSY2', 'TRSY3')


def make_trade(product, trade_id, quantity, side, book='TRSY1', price=99.5):
    return Trade(product, trade_id, price, book, quantity, side)


class TestPositionService:
    """Test per-book position keeping."""

    @pytest.fixture
    def positions(self, instruments):
        return PositionService(instruments.get_products(), BOOKS)

    def test_every_product_starts_flat(self, positions, instruments):
        for product_id in instruments.get_tickers():
            position = positions.get_data(product_id)
            assert position.quantities == (0, 0, 0)
            assert position.aggregate == 0

    def test_buy_and_sell_move_book(self, positions, b02y):
        positions.add_trade(make_trade(b02y, 'T1', 1_000_000, Side.BUY))
        positions.add_trade(make_trade(b02y, 'T2', 250_000, Side.SELL, book='TRSY2'))

        position = positions.get_data('B02y')
        assert position.get_position('TRSY1') == 1_000_000
        assert position.get_position('TRSY2') == -250_000
        assert position.aggregate == 750_000

    def test_aggregate_equals_sum_of_books(self, positions, b02y):
        for i, (qty, side, book) in enumerate([
            (3, Side.BUY, 'TRSY1'), (5, Side.SELL, 'TRSY3'), (2, Side.BUY, 'TRSY2'), (1, Side.SELL, 'TRSY1'),
        ]):
            positions.add_trade(make_trade(b02y, f'T{i}', qty, side, book=book))

        position = positions.get_data('B02y')
        assert position.aggregate == sum(position.quantities) == -1

    def test_unknown_product_raises_without_publish(self, positions):
        published = []
        positions.add_listener(FunctionListener(published.append))
        ghost = Product('B99y', 'B99y', 0.01, None)

        with pytest.raises(ProductNotFoundError):
            positions.add_trade(make_trade(ghost, 'T1', 1, Side.BUY))
        assert published == []

    def test_unknown_book_raises(self, positions, b02y):
        with pytest.raises(BookNotFoundError):
            positions.add_trade(make_trade(b02y, 'T1', 1, Side.BUY, book='TRSY9'))
        assert positions.get_data('B02y').aggregate == 0

    def test_position_is_replaced_not_mutated(self, positions, b02y):
        """Listeners keep the value they were given."""
        published = []
        positions.add_listener(FunctionListener(published.append))

        positions.add_trade(make_trade(b02y, 'T1', 10, Side.BUY))
        positions.add_trade(make_trade(b02y, 'T2', 10, Side.BUY))

        assert [p.aggregate for p in published] == [10, 20]

    def test_listener_counts_lookup_misses(self, positions, b02y):
        listener = PositionServiceListener(positions)

        listener.process_add(make_trade(b02y, 'T1', 1, Side.BUY, book='NOPE'))

        assert positions.stats['lookup_misses'] == 1
        assert positions.get_data('B02y').aggregate == 0


class TestRiskService:
    """Test PV01 and bucketed risk."""

    @pytest.fixture
    def chain(self, instruments):
        booking = TradeBookingService()
        positions = PositionService(instruments.get_products(), BOOKS)
        risk = RiskService(0.02)
        booking.add_listener(PositionServiceListener(positions))
        positions.add_listener(RiskServiceListener(risk))
        return booking, positions, risk

    def test_buy_then_sell_end_to_end(self, chain, b02y):
        """1,000,000 bought then 400,000 sold leaves 600,000 and PV01 12,000."""
        booking, positions, risk = chain

        booking.on_message(make_trade(b02y, 'T1', 1_000_000, Side.BUY))
        booking.on_message(make_trade(b02y, 'T2', 400_000, Side.SELL))

        assert positions.get_data('B02y').get_position('TRSY1') == 600_000
        assert positions.get_aggregate_position('B02y') == 600_000
        assert risk.get_data('B02y').value == pytest.approx(12_000.0)

    def test_risk_tracks_aggregate(self, chain, instruments):
        booking, positions, risk = chain
        b10y = instruments.get_instrument('B10y')

        booking.on_message(make_trade(b10y, 'T1', 2_000_000, Side.SELL, book='TRSY3'))

        pv01 = risk.get_data('B10y')
        assert pv01.quantity == -2_000_000
        assert pv01.value == pytest.approx(0.02 * -2_000_000)

    def test_bucketed_risk_sums_sector(self, chain, instruments):
        booking, _, risk = chain
        booking.on_message(make_trade(instruments.get_instrument('B05y'), 'T1', 1_000_000, Side.BUY))
        booking.on_message(make_trade(instruments.get_instrument('B07y'), 'T2', 500_000, Side.SELL))
        booking.on_message(make_trade(instruments.get_instrument('B30y'), 'T3', 9_000_000, Side.BUY))

        belly = risk.get_bucketed_risk(instruments.get_sector('Belly'))

        assert belly.quantity == 500_000
        assert belly.value == pytest.approx(10_000.0)

    def test_bucketed_risk_empty_sector_is_zero(self, chain, instruments):
        _, _, risk = chain

        front = risk.get_bucketed_risk(instruments.get_sector('FrontEnd'))

        assert front.value == 0.0
        assert front.quantity == 0


class TestTradeBookingService:

    def test_books_and_publishes(self, b02y):
        booking = TradeBookingService()
        published = []
        booking.add_listener(FunctionListener(published.append))
        trade = make_trade(b02y, 'T1', 5, Side.SELL)

        booking.on_message(trade)

        assert booking.get_data('T1') == trade
        assert published == [trade]
        assert booking.stats['sell_volume'] == 5

    def test_trade_requires_positive_quantity(self, b02y):
        with pytest.raises(ValueError):
            make_trade(b02y, 'T1', 0, Side.BUY)
