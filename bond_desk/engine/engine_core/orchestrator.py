"""
Trading system - wires the desk service graph and drives the input files through it
Only coordination lives here; every decision belongs to a service
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from ...packages.booking import (
    PositionService,
    PositionServiceListener,
    RiskService,
    RiskServiceListener,
    TradeBookingService,
)
from ...packages.connectors import (
    FileSink,
    InquiryFileReader,
    MarketDataFileReader,
    PriceFileReader,
    TradeFileReader,
    format_execution,
    format_gui_price,
    format_inquiry,
    format_position,
    format_risk,
    format_stream,
)
from ...packages.execution import (
    AlgoExecutionListener,
    AlgoExecutionService,
    AlternatingSidePolicy,
    ExecutionService,
    ExecutionServiceListener,
    ExecutionTradeListener,
    FixedSidePolicy,
    InventorySidePolicy,
    MarketDataService,
    SidePolicy,
)
from ...packages.history import HistoricalDataListener, HistoricalDataService
from ...packages.inquiry import FixedQuotePolicy, InquiryService
from ...packages.pricing import (
    AlgoStreamingListener,
    AlgoStreamingService,
    GUIListener,
    GUIService,
    PricingService,
    StreamingListener,
    StreamingService,
)
from ...packages.soa import ActorListener, Service, ServiceActor, ServiceListener
from ...packages.utils.clock import Clock
from ...packages.utils.sequence import SequenceGenerator
from ...services.instrument_master import InstrumentMaster
from ..config_loader import DeskConfig

logger = logging.getLogger(__name__)

INPUT_FILES = {
    'trades': 'trades.txt',
    'prices': 'prices.txt',
    'marketdata': 'marketdata.txt',
    'inquiries': 'inquiries.txt',
}

OUTPUT_FILES = {
    'positions': ('positions.txt', format_position),
    'risk': ('risk.txt', format_risk),
    'gui': ('gui.txt', format_gui_price),
    'streaming': ('streaming.txt', format_stream),
    'executions': ('executions.txt', format_execution),
    'execution_positions': ('execution_positions.txt', format_position),
    'execution_risk': ('execution_risk.txt', format_risk),
    'inquiries': ('allinquiries.txt', format_inquiry),
}

# records fed before a feeder yields to the actors
FEED_BATCH = 64


def _product_key(value) -> str:
    return value.product.product_id


def _order_key(order) -> str:
    return order.order_id


def _inquiry_key(inquiry) -> str:
    return inquiry.inquiry_id


class TradingSystem:
    """
    Four pipelines over one clock and one product table

        trades     -> TradeBooking -> Position -> Risk
        prices     -> Pricing -> {GUI, AlgoStreaming -> Streaming}
        marketdata -> MarketData -> AlgoExecution -> Execution -> TradeBooking -> Position -> Risk
        inquiries  -> Inquiry

    File trades and execution fills are kept in separate booking/position/risk
    instances and written to separate sinks.
    """

    def __init__(self, config: DeskConfig, clock: Optional[Clock] = None,
                 instrument_master: Optional[InstrumentMaster] = None):
        """
        Args:
            config: validated desk configuration
            clock: shared clock, wall clock by default
            instrument_master: product table, default bonds when None

        Raises:
            SinkUnavailableError: an output file cannot be opened
        """
        self.config = config
        self.clock = clock or Clock()
        self.instruments = instrument_master or InstrumentMaster()
        self.concurrent = config.concurrent

        self.actors: List[ServiceActor] = []
        self.head_actors: Dict[str, ServiceActor] = {}

        self.sinks: Dict[str, FileSink] = {}
        self._closed = False
        self._open_sinks()
        self._build_services()
        self._build_readers()
        self._wire()

        logger.info(
            f"[TradingSystem] ready: {len(self.instruments)} products, "
            f"{len(self.sinks)} sinks, mode={'concurrent' if self.concurrent else 'sync'}"
        )

    # ------------------------------------------------------------------ build

    def _open_sinks(self) -> None:
        try:
            for key, (filename, formatter) in OUTPUT_FILES.items():
                path = os.path.join(self.config.output_dir, filename)
                self.sinks[key] = FileSink(path, formatter, self.clock, name=f"{key}Sink")
        except Exception:
            self.close()
            raise

    def _build_services(self) -> None:
        cfg = self.config
        products = self.instruments.get_products()

        # trades pipeline
        self.trade_booking_service = TradeBookingService()
        self.position_service = PositionService(products, cfg.books)
        self.risk_service = RiskService(cfg.pv01_per_unit)
        self.position_history = HistoricalDataService(self.sinks['positions'], name="PositionHistory")
        self.risk_history = HistoricalDataService(self.sinks['risk'], name="RiskHistory")

        # prices pipeline
        self.pricing_service = PricingService()
        self.gui_service = GUIService(self.sinks['gui'], self.clock, cfg.gui_throttle_ms)
        self.algo_streaming_service = AlgoStreamingService(cfg.stream_visible_size, cfg.stream_hidden_size)
        self.streaming_service = StreamingService()
        self.streaming_history = HistoricalDataService(self.sinks['streaming'], name="StreamingHistory")

        # market data / execution pipeline
        self.execution_trade_booking_service = TradeBookingService(name="ExecutionTradeBookingService")
        self.execution_position_service = PositionService(products, cfg.books, name="ExecutionPositionService")
        self.execution_risk_service = RiskService(cfg.pv01_per_unit, name="ExecutionRiskService")
        self.market_data_service = MarketDataService()
        self.algo_execution_service = AlgoExecutionService(
            side_policy=self._side_policy(),
            sequence=SequenceGenerator(),
            tolerance=cfg.spread_tolerance,
            hidden_ratio=cfg.hidden_ratio,
            market=cfg.execution_market,
        )
        self.execution_service = ExecutionService()
        self.execution_history = HistoricalDataService(self.sinks['executions'], name="ExecutionHistory")
        self.execution_position_history = HistoricalDataService(
            self.sinks['execution_positions'], name="ExecutionPositionHistory")
        self.execution_risk_history = HistoricalDataService(
            self.sinks['execution_risk'], name="ExecutionRiskHistory")

        # inquiries pipeline
        self.inquiry_service = InquiryService(FixedQuotePolicy(cfg.quote_price))
        self.inquiry_history = HistoricalDataService(self.sinks['inquiries'], name="InquiryHistory")

    def _side_policy(self) -> SidePolicy:
        policy = self.config.side_policy
        if policy == 'inventory':
            return InventorySidePolicy(self.execution_position_service.get_aggregate_position)
        if policy == 'fixed':
            return FixedSidePolicy(self.config.fixed_side)
        return AlternatingSidePolicy()

    def _build_readers(self) -> None:
        cfg = self.config
        self.readers = {
            'trades': (TradeFileReader(self.instruments, cfg.progress_interval),
                       self.trade_booking_service),
            'prices': (PriceFileReader(self.instruments, cfg.progress_interval),
                       self.pricing_service),
            'marketdata': (MarketDataFileReader(self.instruments, cfg.level_size_multiplier,
                                                cfg.progress_interval),
                           self.market_data_service),
            'inquiries': (InquiryFileReader(self.instruments, cfg.inquiry_quantity, cfg.progress_interval),
                          self.inquiry_service),
        }

    def _link(self, upstream: Service, listener: ServiceListener, inline: bool = False) -> None:
        """Register listener on upstream; in concurrent mode the hop goes through an actor unless inline"""
        if not self.concurrent or inline:
            upstream.add_listener(listener)
            return
        actor = ServiceActor(f"{upstream.name}->{listener!r}", listener.process_add)
        self.actors.append(actor)
        upstream.add_listener(ActorListener(actor))

    def _wire(self) -> None:
        self._link(self.trade_booking_service, PositionServiceListener(self.position_service))
        self._link(self.position_service, RiskServiceListener(self.risk_service))
        self._link(self.position_service, HistoricalDataListener(self.position_history, _product_key))
        self._link(self.risk_service, HistoricalDataListener(self.risk_history, _product_key))

        self._link(self.pricing_service, GUIListener(self.gui_service))
        self._link(self.pricing_service, AlgoStreamingListener(self.algo_streaming_service))
        self._link(self.algo_streaming_service, StreamingListener(self.streaming_service))
        self._link(self.streaming_service, HistoricalDataListener(self.streaming_history, _product_key))

        # the inventory policy reads the execution position, so each fill must land
        # before the algo actor takes its next book
        inline = self.config.side_policy == 'inventory'
        self._link(self.market_data_service, AlgoExecutionListener(self.algo_execution_service))
        self._link(self.algo_execution_service, ExecutionServiceListener(self.execution_service), inline)
        self._link(self.execution_service,
                   HistoricalDataListener(self.execution_history, _order_key))
        self._link(self.execution_service,
                   ExecutionTradeListener(self.execution_trade_booking_service, self.config.execution_book),
                   inline)
        self._link(self.execution_trade_booking_service, PositionServiceListener(self.execution_position_service),
                   inline)
        self._link(self.execution_position_service, RiskServiceListener(self.execution_risk_service))
        self._link(self.execution_position_service,
                   HistoricalDataListener(self.execution_position_history, _product_key))
        self._link(self.execution_risk_service, HistoricalDataListener(self.execution_risk_history, _product_key))

        self._link(self.inquiry_service,
                   HistoricalDataListener(self.inquiry_history, _inquiry_key))

        if self.concurrent:
            for key, (_, head) in self.readers.items():
                actor = ServiceActor(f"{key}->{head.name}", head.on_message)
                self.head_actors[key] = actor
                self.actors.append(actor)

    # ------------------------------------------------------------------ run

    def _input_path(self, key: str) -> str:
        return os.path.join(self.config.input_dir, INPUT_FILES[key])

    def run(self) -> Dict[str, Any]:
        """
        Process every input file and close the sinks

        Returns:
            run statistics, see get_stats()
        """
        if self.concurrent:
            return asyncio.run(self.run_async())
        self._check_open()

        logger.info(f"[TradingSystem] sync run over {self.config.input_dir}")
        try:
            for key, (reader, head) in self.readers.items():
                reader.read(self._input_path(key), head.on_message)
        finally:
            self.close()
        return self.get_stats()

    async def run_async(self) -> Dict[str, Any]:
        """Concurrent run: pipelines interleave, each service still sees its input in order"""
        if not self.concurrent:
            raise RuntimeError("[TradingSystem] built in sync mode, use run()")
        self._check_open()

        logger.info(f"[TradingSystem] concurrent run over {self.config.input_dir}, {len(self.actors)} actors")
        for actor in self.actors:
            await actor.start()
        try:
            await asyncio.gather(*(self._feed(key) for key in self.readers))
            await self._wait_quiescent()
        finally:
            for actor in self.actors:
                await actor.stop()
            self.close()
        return self.get_stats()

    async def _feed(self, key: str) -> None:
        reader, _ = self.readers[key]
        actor = self.head_actors[key]
        for count, record in enumerate(reader.iter_records(self._input_path(key)), 1):
            actor.submit(record)
            if count % FEED_BATCH == 0:
                await asyncio.sleep(0)

    async def _wait_quiescent(self) -> None:
        # a drained actor can be refilled by an upstream one, so sweep until all idle
        while not all(actor.idle for actor in self.actors):
            for actor in self.actors:
                await actor.join()

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("[TradingSystem] already run, sinks are closed")

    def close(self) -> None:
        self._closed = True
        for sink in self.sinks.values():
            sink.close()

    # ------------------------------------------------------------------ stats

    def services(self) -> List[Service]:
        return [
            self.trade_booking_service, self.position_service, self.risk_service,
            self.pricing_service, self.gui_service, self.algo_streaming_service, self.streaming_service,
            self.market_data_service, self.algo_execution_service, self.execution_service,
            self.execution_trade_booking_service, self.execution_position_service, self.execution_risk_service,
            self.inquiry_service,
            self.position_history, self.risk_history, self.streaming_history, self.execution_history,
            self.execution_position_history, self.execution_risk_history, self.inquiry_history,
        ]

    def bucketed_risk(self, risk_service: Optional[RiskService] = None) -> Dict[str, float]:
        """Sector name -> PV01 total for the given risk service (file trades by default)"""
        risk_service = risk_service or self.risk_service
        return {
            name: risk_service.get_bucketed_risk(sector).value
            for name, sector in self.instruments.sectors.items()
        }

    def get_stats(self) -> Dict[str, Any]:
        stats = {
            'services': {s.name: s.get_stats() for s in self.services()},
            'readers': {key: reader.get_stats() for key, (reader, _) in self.readers.items()},
            'sinks': {key: sink.get_stats() for key, sink in self.sinks.items()},
            'bucketed_risk': self.bucketed_risk(),
            'records_skipped': sum(reader.stats['records_skipped'] for reader, _ in self.readers.values()),
        }
        if self.actors:
            stats['actors'] = {a.name: a.get_stats() for a in self.actors}
        return stats
