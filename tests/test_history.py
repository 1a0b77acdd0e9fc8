"""
Tests for the historical data recorder
"""

from bond_desk.engine.dto import Price
from bond_desk.packages.history import HistoricalDataListener, HistoricalDataService
from bond_desk.packages.pricing import PricingService


def price_key(price):
    return price.product.product_id


class TestHistoricalDataService:

    def test_keeps_latest_value_per_key(self, connector, b02y, instruments):
        service = HistoricalDataService(connector, name="PriceHistory")
        b05y = instruments.get_instrument('B05y')

        service.persist_data('B02y', Price(b02y, 99.5, 1 / 128))
        service.persist_data('B05y', Price(b05y, 99.0, 1 / 32))
        service.persist_data('B02y', Price(b02y, 99.75, 1 / 64))

        assert service.get_data('B02y').mid == 99.75
        assert service.get_data('B05y').mid == 99.0
        assert sorted(service.keys()) == ['B02y', 'B05y']
        assert [p.mid for p in connector.published] == [99.5, 99.0, 99.75]

    def test_identical_publishes_written_twice(self, connector, b02y):
        """No dedup: the same value persisted twice gives two records."""
        service = HistoricalDataService(connector)
        price = Price(b02y, 99.5, 1 / 128)

        service.persist_data('B02y', price)
        service.persist_data('B02y', price)

        assert connector.published == [price, price]
        assert service.stats['records_persisted'] == 2
        assert service.get_stats()['store_size'] == 1

    def test_listener_records_upstream_publishes(self, connector, b02y):
        pricing = PricingService()
        history = HistoricalDataService(connector, name="PriceHistory")
        pricing.add_listener(HistoricalDataListener(history, price_key))

        pricing.on_message(Price(b02y, 99.5, 1 / 128))
        pricing.on_message(Price(b02y, 99.5, 1 / 128))

        assert len(connector.published) == 2
        assert history.get_data('B02y').mid == 99.5
