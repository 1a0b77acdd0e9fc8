"""
Tests for the env-file config loader
"""

import pytest

from bond_desk.engine.config_loader import DEFAULT_BOOKS, DeskConfig, load_desk_config
from bond_desk.engine.dto import Market, PricingSide
from bond_desk.packages.soa import ConfigError


class TestLoadDeskConfig:

    def test_defaults_without_env_file(self, clean_env, tmp_path):
        config = load_desk_config(str(tmp_path / 'missing.env'))

        assert config.books == DEFAULT_BOOKS
        assert config.pv01_per_unit == 0.02
        assert config.gui_throttle_ms == 300.0
        assert config.spread_tolerance == pytest.approx(1 / 127)
        assert config.hidden_ratio == 0.9
        assert config.execution_market is Market.CME
        assert config.side_policy == 'alternating'
        assert not config.concurrent

    def test_env_file_values(self, clean_env, tmp_path):
        env = tmp_path / 'desk.env'
        env.write_text(
            'DESK_BOOKS=ALPHA,BETA\n'
            'DESK_EXECUTION_BOOK=BETA\n'
            'DESK_SPREAD_TOLERANCE=1/64\n'
            'DESK_EXECUTION_MARKET=brokertec\n'
            'DESK_SIDE_POLICY=fixed\n'
            'DESK_FIXED_SIDE=OFFER\n'
            'DESK_CONCURRENT=true\n'
            'DESK_INQUIRY_QUANTITY=2_000_000\n'
        )

        config = load_desk_config(str(env))

        assert config.books == ('ALPHA', 'BETA')
        assert config.execution_book == 'BETA'
        assert config.spread_tolerance == pytest.approx(1 / 64)
        assert config.execution_market is Market.BROKERTEC
        assert config.fixed_side is PricingSide.OFFER
        assert config.concurrent
        assert config.inquiry_quantity == 2_000_000

    @pytest.mark.parametrize('name, value', [
        ('DESK_PV01_PER_UNIT', 'abc'),
        ('DESK_SIDE_POLICY', 'random'),
        ('DESK_EXECUTION_MARKET', 'NYSE'),
        ('DESK_HIDDEN_RATIO', '1.5'),
        ('DESK_EXECUTION_BOOK', 'TRSY9'),
        ('DESK_PROGRESS_INTERVAL', 'often'),
    ])
    def test_invalid_values_raise(self, clean_env, tmp_path, name, value):
        clean_env.setenv(name, value)
        with pytest.raises(ConfigError):
            load_desk_config(str(tmp_path / 'missing.env'))

    def test_validate_rejects_duplicate_books(self):
        with pytest.raises(ConfigError):
            DeskConfig(books=('A', 'A'), execution_book='A').validate()
