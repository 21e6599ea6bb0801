"""
Configuration Unit Tests

Config sections read the environment when instantiated, so each test sets
variables with monkeypatch and builds a fresh section.
"""

import logging

import pytest

from clmm_swap.config import (
    Config,
    RpcConfig,
    ContractsConfig,
    SignerConfig,
    TxConfig,
    TradingConfig,
    LoggingConfig,
    setup_logging,
    enable_file_logging,
    get_config,
)


class TestEnvDefaults:

    def test_tx_defaults(self, monkeypatch):
        for key in ("TX_DEADLINE_SECONDS", "TX_SWAP_GAS_LIMIT", "TX_BASE_FEE_MULTIPLIER"):
            monkeypatch.delenv(key, raising=False)
        tx = TxConfig()

        assert tx.deadline_seconds == 1200
        assert tx.swap_gas_limit == 500_000
        assert tx.base_fee_multiplier == 2.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TX_DEADLINE_SECONDS", "600")
        monkeypatch.setenv("RPC_RETRY_DELAY", "0.25")
        monkeypatch.setenv("CLMM_SWAP_ROUTER", "0x00000000000000000000000000000000000000bb")

        assert TxConfig().deadline_seconds == 600
        assert RpcConfig().retry_delay == 0.25
        assert ContractsConfig().swap_router == "0x00000000000000000000000000000000000000bb"

    def test_invalid_number_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("TX_DEADLINE_SECONDS", "twenty")

        with caplog.at_level(logging.WARNING):
            assert TxConfig().deadline_seconds == 1200
        assert "TX_DEADLINE_SECONDS" in caplog.text

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("yes", True), ("false", False), ("0", False)])
    def test_approve_exact_amount_flag(self, monkeypatch, value, expected):
        monkeypatch.setenv("APPROVE_EXACT_AMOUNT", value)
        assert TradingConfig().approve_exact_amount is expected

    def test_unlimited_approval_by_default(self, monkeypatch):
        monkeypatch.delenv("APPROVE_EXACT_AMOUNT", raising=False)
        assert TradingConfig().approve_exact_amount is False

    def test_signer_env_var_name(self, monkeypatch):
        monkeypatch.delenv("CLMM_PRIVATE_KEY_ENV", raising=False)
        assert SignerConfig().private_key_env == "EVM_PRIVATE_KEY"

    def test_config_sections(self):
        cfg = Config()
        assert isinstance(cfg.rpc, RpcConfig)
        assert isinstance(cfg.trading, TradingConfig)
        assert isinstance(get_config(), Config)


class TestLogging:

    def test_level_property(self):
        assert LoggingConfig(log_level="debug").level == logging.DEBUG
        assert LoggingConfig(log_level="bogus").level == logging.INFO

    def test_setup_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "swap.log"
        log_config = LoggingConfig(log_file=str(log_file), log_level="DEBUG", console_output=False)

        logger = setup_logging(log_config, logger_name="clmm_swap_test")
        try:
            logging.getLogger("clmm_swap_test.modules").info("hello from modules")
            for handler in logger.handlers:
                handler.flush()

            assert log_file.exists()
            assert "hello from modules" in log_file.read_text(encoding="utf-8")
            assert len(logger.handlers) == 1
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)

    def test_setup_logging_replaces_handlers(self, tmp_path):
        log_config = LoggingConfig(log_file=str(tmp_path / "a.log"), console_output=True)

        logger = setup_logging(log_config, logger_name="clmm_swap_test2")
        logger = setup_logging(log_config, logger_name="clmm_swap_test2")
        try:
            assert len(logger.handlers) == 2
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)

    def test_enable_file_logging(self, tmp_path):
        log_file = tmp_path / "quick.log"

        logger = enable_file_logging(str(log_file), level="WARNING", console=False)
        try:
            assert logger.name == "clmm_swap"
            assert logger.level == logging.WARNING
            assert [type(h).__name__ for h in logger.handlers] == ["RotatingFileHandler"]
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)
            for name in ("clmm_swap", "clmm_swap.infra", "clmm_swap.modules", "clmm_swap.contracts", "clmm_swap.routing"):
                logging.getLogger(name).setLevel(logging.NOTSET)
