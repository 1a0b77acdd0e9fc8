"""
Risk Service - PV01 per product and bucketed across sectors
"""

import logging

from ...engine.dto.core_dtos import PV01, BucketedRisk, BucketedSector, Position
from ..soa.service import Service, ServiceListener

logger = logging.getLogger(__name__)


class RiskService(Service[str, PV01]):
    """
    Keyed on product id

    PV01 per unit is a flat configured sensitivity, not derived from the
    bond's duration.
    """

    name = "RiskService"

    def __init__(self, pv01_per_unit: float = 0.02, name: str = None):
        super().__init__()
        if name:
            self.name = name
        self.pv01_per_unit = pv01_per_unit
        self.stats['positions_received'] = 0

    def add_position(self, position: Position) -> PV01:
        pv01 = PV01(position.product, self.pv01_per_unit, position.aggregate)
        self._store[position.product.product_id] = pv01
        self.stats['positions_received'] += 1

        logger.debug(f"[{self.name}] {position.product.product_id} pv01={pv01.value:.2f}")
        self.notify(pv01)
        return pv01

    def get_bucketed_risk(self, sector: BucketedSector) -> BucketedRisk:
        """Sum of the latest PV01 of every product in the sector, zero where none yet"""
        value = 0.0
        quantity = 0
        for product in sector.products:
            pv01 = self._store.get(product.product_id)
            if pv01 is None:
                continue
            value += pv01.value
            quantity += pv01.quantity
        return BucketedRisk(sector=sector, value=value, quantity=quantity)


class RiskServiceListener(ServiceListener[Position]):
    """PositionService -> RiskService"""

    def __init__(self, risk_service: RiskService):
        self.risk_service = risk_service

    def process_add(self, data: Position) -> None:
        self.risk_service.add_position(data)

    def __repr__(self) -> str:
        return f"RiskServiceListener({self.risk_service.name})"
