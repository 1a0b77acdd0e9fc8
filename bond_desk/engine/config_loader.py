"""
Config loader - loads desk settings from an env file
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from ..packages.soa.errors import ConfigError
from .dto.core_dtos import Market, PricingSide

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = '.env'
DEFAULT_BOOKS = ('TRSY1', 'TRSY2', 'TRSY3')
SIDE_POLICIES = ('alternating', 'inventory', 'fixed')


@dataclass
class DeskConfig:
    """Desk configuration"""
    # Position / risk
    books: Tuple[str, ...] = DEFAULT_BOOKS
    pv01_per_unit: float = 0.02

    # Pricing
    gui_throttle_ms: float = 300.0
    stream_visible_size: int = 1_000_000
    stream_hidden_size: int = 1_000_000

    # Market data / algo execution
    level_size_multiplier: int = 1_000_000
    spread_tolerance: float = 1.0 / 127.0
    hidden_ratio: float = 0.9
    side_policy: str = 'alternating'
    fixed_side: PricingSide = PricingSide.BID
    execution_market: Market = Market.CME
    execution_book: str = 'TRSY1'

    # Inquiries
    quote_price: float = 100.0
    inquiry_quantity: int = 1_000_000

    # Files
    input_dir: str = 'data'
    output_dir: str = 'output'

    # Runtime
    concurrent: bool = False
    log_level: str = 'INFO'
    progress_interval: int = 100_000

    def validate(self) -> 'DeskConfig':
        if not self.books:
            raise ConfigError("at least one book is required")
        if len(set(self.books)) != len(self.books):
            raise ConfigError(f"duplicate book names: {self.books}")
        if self.execution_book not in self.books:
            raise ConfigError(f"execution book {self.execution_book} not in books {self.books}")
        if self.gui_throttle_ms < 0:
            raise ConfigError(f"gui throttle must be >= 0, got {self.gui_throttle_ms}")
        if not 0.0 <= self.hidden_ratio <= 1.0:
            raise ConfigError(f"hidden ratio must be in [0, 1], got {self.hidden_ratio}")
        if self.spread_tolerance < 0:
            raise ConfigError(f"spread tolerance must be >= 0, got {self.spread_tolerance}")
        if self.side_policy not in SIDE_POLICIES:
            raise ConfigError(f"unknown side policy {self.side_policy!r}, expected one of {SIDE_POLICIES}")
        if self.level_size_multiplier <= 0 or self.inquiry_quantity <= 0:
            raise ConfigError("sizes must be positive")
        if self.progress_interval <= 0:
            raise ConfigError(f"progress interval must be positive, got {self.progress_interval}")
        return self


def _get(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    raw = raw.strip()
    try:
        # allow fractions such as 1/127
        if '/' in raw:
            num, den = raw.split('/', 1)
            return float(num) / float(den)
        return float(raw)
    except (ValueError, ZeroDivisionError):
        raise ConfigError(f"{name}: expected a number, got {raw!r}") from None


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip().replace('_', ''))
    except ValueError:
        raise ConfigError(f"{name}: expected an integer, got {raw!r}") from None


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _get_enum(name: str, enum_cls, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return enum_cls[raw.strip().upper()]
    except KeyError:
        raise ConfigError(f"{name}: unknown value {raw!r}") from None


def load_desk_config(env_file: Optional[str] = DEFAULT_ENV_FILE) -> DeskConfig:
    """
    Load desk configuration

    Args:
        env_file: env file to load first; missing files fall back to the
            process environment and defaults

    Returns:
        validated DeskConfig
    """
    if env_file:
        if os.path.exists(env_file):
            load_dotenv(env_file, override=True)
            logger.info(f"[Config] loaded {env_file}")
        else:
            logger.warning(f"[Config] env file not found: {env_file}, using environment/defaults")

    books_raw = _get('DESK_BOOKS', ','.join(DEFAULT_BOOKS))
    books = tuple(b.strip() for b in books_raw.split(',') if b.strip())

    config = DeskConfig(
        books=books,
        pv01_per_unit=_get_float('DESK_PV01_PER_UNIT', 0.02),

        gui_throttle_ms=_get_float('DESK_GUI_THROTTLE_MS', 300.0),
        stream_visible_size=_get_int('DESK_STREAM_VISIBLE_SIZE', 1_000_000),
        stream_hidden_size=_get_int('DESK_STREAM_HIDDEN_SIZE', 1_000_000),

        level_size_multiplier=_get_int('DESK_LEVEL_SIZE_MULTIPLIER', 1_000_000),
        spread_tolerance=_get_float('DESK_SPREAD_TOLERANCE', 1.0 / 127.0),
        hidden_ratio=_get_float('DESK_HIDDEN_RATIO', 0.9),
        side_policy=_get('DESK_SIDE_POLICY', 'alternating').lower(),
        fixed_side=_get_enum('DESK_FIXED_SIDE', PricingSide, PricingSide.BID),
        execution_market=_get_enum('DESK_EXECUTION_MARKET', Market, Market.CME),
        execution_book=_get('DESK_EXECUTION_BOOK', 'TRSY1'),

        quote_price=_get_float('DESK_QUOTE_PRICE', 100.0),
        inquiry_quantity=_get_int('DESK_INQUIRY_QUANTITY', 1_000_000),

        input_dir=_get('DESK_INPUT_DIR', 'data'),
        output_dir=_get('DESK_OUTPUT_DIR', 'output'),

        concurrent=_get_bool('DESK_CONCURRENT', False),
        log_level=_get('DESK_LOG_LEVEL', 'INFO').upper(),
        progress_interval=_get_int('DESK_PROGRESS_INTERVAL', 100_000),
    )

    config.validate()
    logger.info(
        f"[Config] books={','.join(config.books)} pv01={config.pv01_per_unit} "
        f"throttle={config.gui_throttle_ms}ms side_policy={config.side_policy} "
        f"concurrent={config.concurrent}"
    )
    return config
