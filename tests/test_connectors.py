"""
Tests for the fractional codec, file readers and file sinks
"""

import pytest

from bond_desk.engine.dto import Inquiry, InquiryState, Price, Side
from bond_desk.packages.connectors import (
    FileSink,
    InquiryFileReader,
    MarketDataFileReader,
    PriceFileReader,
    TradeFileReader,
    format_fractional,
    format_gui_price,
    format_inquiry,
    parse_fractional,
)
from bond_desk.packages.soa import MalformedRecordError, SinkUnavailableError


class TestFractionalPrice:

    @pytest.mark.parametrize('text, expected', [
        ('99-16', 99.5),
        ('100-08+', 100.265625),
        ('99-00', 99.0),
        ('99-163', 99.51171875),
        ('100-31+', 100.984375),
    ])
    def test_parse(self, text, expected):
        assert parse_fractional(text) == expected

    @pytest.mark.parametrize('text', ['', '99', '99-', '99-1', '99-32', '99-16++', 'abc-16', '99-16x'])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(MalformedRecordError):
            parse_fractional(text)

    def test_format(self):
        assert format_fractional(99.5) == '99-16'
        assert format_fractional(100.265625) == '100-08+'
        assert format_fractional(99.51171875) == '99-163'


class TestReaders:
    """Test line decoding and skip accounting."""

    def write(self, tmp_path, name, lines):
        path = tmp_path / name
        path.write_text('\n'.join(lines) + '\n')
        return str(path)

    def test_trade_reader(self, tmp_path, instruments):
        path = self.write(tmp_path, 'trades.txt', [
            'B02y,T1,TRSY1,1000000,99-16,BUY',
            'B03y,T2,TRSY2,2000000,100-08+,SELL',
        ])
        reader = TradeFileReader(instruments)
        trades = []

        assert reader.read(path, trades.append) == 2
        assert trades[0].price == 99.5
        assert trades[0].side is Side.BUY
        assert trades[1].quantity == 2_000_000
        assert trades[1].book == 'TRSY2'

    def test_malformed_lines_skipped(self, tmp_path, instruments):
        path = self.write(tmp_path, 'trades.txt', [
            'B02y,T1,TRSY1,1000000,99-16,BUY',
            'B99y,T2,TRSY1,1000000,99-16,BUY',
            'B02y,T3,TRSY1,lots,99-16,BUY',
            'B02y,T4,TRSY1,1000000,99-16,HOLD',
            'B02y,T5,TRSY1,0,99-16,BUY',
            'B02y,T6',
            '',
            'B02y,T7,TRSY1,500000,99-16,SELL',
        ])
        reader = TradeFileReader(instruments)
        trades = []

        reader.read(path, trades.append)

        assert [t.trade_id for t in trades] == ['T1', 'T7']
        assert reader.stats['records_skipped'] == 5
        assert reader.stats['lines_read'] == 7

    def test_price_reader_derives_mid_and_spread(self, tmp_path, instruments):
        path = self.write(tmp_path, 'prices.txt', ['B02y,99-16,99-17', 'B02y,99-17,99-16'])
        reader = PriceFileReader(instruments)
        prices = []

        reader.read(path, prices.append)

        assert len(prices) == 1
        assert prices[0].mid == pytest.approx(99.515625)
        assert prices[0].bid_offer_spread == pytest.approx(1 / 32)
        assert reader.stats['records_skipped'] == 1

    def test_market_data_reader(self, tmp_path, instruments):
        path = self.write(tmp_path, 'marketdata.txt', [
            'B02y,99-16,99-162,99-15,99-17,99-14,99-18,99-13,99-19,99-12,99-20',
            'B02y,99-16,99-17',
        ])
        reader = MarketDataFileReader(instruments, level_size_multiplier=1_000_000)
        books = []

        reader.read(path, books.append)

        assert len(books) == 1
        assert books[0].best_bid.price == 99.5
        assert books[0].best_offer.price == 99.5078125
        assert books[0].offer_stack[4].quantity == 5_000_000
        assert reader.stats['records_skipped'] == 1

    def test_inquiry_reader_ignores_status_column(self, tmp_path, instruments):
        path = self.write(tmp_path, 'inquiries.txt', ['1,B02y,BUY,RECEIVED', '2,B10y,SELL'])
        reader = InquiryFileReader(instruments, quantity=1_000_000)
        inquiries = []

        reader.read(path, inquiries.append)

        assert [i.inquiry_id for i in inquiries] == ['1', '2']
        assert all(i.state is InquiryState.RECEIVED for i in inquiries)
        assert inquiries[0].quantity == 1_000_000
        assert inquiries[1].price is None

    def test_missing_file_reads_nothing(self, tmp_path, instruments):
        reader = TradeFileReader(instruments)
        assert reader.read(str(tmp_path / 'absent.txt'), lambda r: None) == 0


class TestFileSink:

    def test_lines_prefixed_with_epoch_ms(self, tmp_path, clock, b02y):
        path = tmp_path / 'gui.txt'
        with FileSink(str(path), format_gui_price, clock) as sink:
            sink.publish(Price(b02y, 99.5, 0.0078125))
            sink.publish(Price(b02y, 99.5, 0.0078125))

        lines = path.read_text().splitlines()
        assert lines == [f'{clock.epoch_ms()},B02y,99.5,0.0078125'] * 2

    def test_truncates_on_open(self, tmp_path, clock, b02y):
        path = tmp_path / 'gui.txt'
        path.write_text('stale\n')

        sink = FileSink(str(path), format_gui_price, clock)
        sink.close()

        assert path.read_text() == ''

    def test_unopenable_destination_fails_fast(self, tmp_path, clock):
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')

        with pytest.raises(SinkUnavailableError):
            FileSink(str(blocker / 'out.txt'), format_gui_price, clock)

    def test_inquiry_without_price_has_empty_field(self, b02y):
        assert format_inquiry(Inquiry('5', b02y, Side.SELL, 1)) == 'TID_5,B02y,SELL,,RECEIVED'
