from __future__ import annotations

import asyncio
import logging
from typing import Any

from utils.logging_context import configure_logging, log_context, set_session_id
from wizard import StepDefinition, StepFlowEngine


def _render(_ctx: Any) -> None:
    return None


async def _submit(_data: dict[str, Any]) -> None:
    return None


def test_engine_logs_include_flow_context(caplog: Any) -> None:
    configure_logging()
    set_session_id("session-123")
    caplog.set_level(logging.INFO, logger="wizard.navigation.router")
    engine = StepFlowEngine(
        [StepDefinition("origin", "Origin", _render), StepDefinition("cargo", "Cargo", _render)],
        {},
        on_submit=_submit,
        flow_id="quote",
    )

    asyncio.run(engine.advance())

    records = [record for record in caplog.records if "Advanced from" in record.message]
    assert records, "Expected a navigation log entry"
    record = records[0]
    assert record.session_id == "session-123"
    assert record.flow_id == "quote"
    assert record.wizard_step == "origin"


def test_log_context_restores_previous_values(caplog: Any) -> None:
    configure_logging()
    logger = logging.getLogger("test.logging.context")
    caplog.set_level(logging.INFO, logger=logger.name)

    with log_context(flow_id="outer", wizard_step="first"):
        with log_context(wizard_step="  "):
            logger.info("inner")
        logger.info("outer")
    logger.info("after")

    by_message = {record.message: record for record in caplog.records}
    assert by_message["inner"].flow_id == "outer"
    assert by_message["inner"].wizard_step == "-"
    assert by_message["outer"].wizard_step == "first"
    assert by_message["after"].flow_id == "-"
