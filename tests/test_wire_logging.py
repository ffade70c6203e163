import logging

import pytest

from swedbankjson import AuthSession, LoggingUnavailable, UnAuthFlow
from swedbankjson.app import ClientConfig
from swedbankjson.infrastructure.observability import (
    close_wire_log,
    configure_wire_log,
    get_logger,
    log_context,
)
from swedbankjson.infrastructure.observability.logging import (
    PACKAGE_LOGGER_NAME,
    WIRE_LOGGER_NAME,
    ContextualFormatter,
)


def test_debug_session_writes_wire_log(adapter, private_app_data, tmp_path):
    log_file = tmp_path / "swedbankjson.log"
    config = ClientConfig(debug=True, log_path=str(log_file))
    session = AuthSession(UnAuthFlow(private_app_data), config=config, adapter=adapter).login()
    adapter.queue(200, '{"transactionAccounts": []}')

    session.post("engagement/overview", {"a": 1})

    assert log_file.exists()
    contents = log_file.read_text(encoding="utf-8")
    assert "POST https://auth.api.swedbank.se/TDE_DAP_Portal_REST_WEB/api/v4/engagement/overview?dsid=" in contents
    assert "User-Agent: SwedbankMOBPrivateIOS" in contents
    assert '{"a":1}' in contents
    assert "HTTP 200" in contents
    assert '{"transactionAccounts": []}' in contents


def test_no_wire_log_without_debug(adapter, private_app_data, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    session = AuthSession(UnAuthFlow(private_app_data), adapter=adapter).login()
    session.get("profile/")
    assert not (tmp_path / "swedbankjson.log").exists()


def test_unwritable_wire_log_is_fatal(adapter, private_app_data, tmp_path):
    config = ClientConfig(debug=True, log_path=str(tmp_path / "missing" / "wire.log"))
    session = AuthSession(UnAuthFlow(private_app_data), config=config, adapter=adapter).login()

    with pytest.raises(LoggingUnavailable):
        session.get("profile/")
    assert session.client is None
    assert adapter.requests == []


def test_debug_sessions_write_only_their_own_wire_log(make_adapter, private_app_data, tmp_path):
    logs = {}
    sessions = {}
    for name in ("first", "second"):
        logs[name] = tmp_path / f"{name}.log"
        config = ClientConfig(debug=True, log_path=str(logs[name]))
        sessions[name] = AuthSession(
            UnAuthFlow(private_app_data), config=config, adapter=make_adapter()).login()

    sessions["first"].get("only-first/")
    sessions["second"].get("only-second/")

    first = logs["first"].read_text(encoding="utf-8")
    second = logs["second"].read_text(encoding="utf-8")
    assert "only-first/" in first
    assert "only-second/" not in first
    assert "only-second/" in second
    assert "only-first/" not in second


def test_cleanup_closes_wire_log_handler(adapter, private_app_data, tmp_path):
    config = ClientConfig(debug=True, log_path=str(tmp_path / "wire.log"))
    session = AuthSession(UnAuthFlow(private_app_data), config=config, adapter=adapter).login()
    wire_logger = logging.getLogger(WIRE_LOGGER_NAME)

    session.get("profile/")
    assert len(wire_logger.handlers) == 1
    handler = wire_logger.handlers[0]

    session.cleanup()
    assert wire_logger.handlers == []
    assert handler.stream is None

    session.get("profile/")
    assert len(wire_logger.handlers) == 1


def test_configure_wire_log_filters_by_owner(tmp_path):
    path = tmp_path / "wire.log"
    handler = configure_wire_log(str(path), "owner-a")
    wire_logger = logging.getLogger(WIRE_LOGGER_NAME)
    assert wire_logger.propagate is False

    wire_logger.debug("for a", extra={"wire_owner": "owner-a"})
    wire_logger.debug("for b", extra={"wire_owner": "owner-b"})
    close_wire_log(handler)

    contents = path.read_text(encoding="utf-8")
    assert "for a" in contents
    assert "for b" not in contents



def test_log_context_appends_fields():
    record = logging.LogRecord("swedbankjson", logging.INFO, __file__, 1, "Logging in", None, None)
    formatter = ContextualFormatter("%(message)s")
    with log_context(flow="UnAuthFlow"):
        assert formatter.format(record) == "Logging in [flow=UnAuthFlow]"


def test_get_logger_returns_named_logger():
    assert get_logger("swedbankjson.services.auth").name == "swedbankjson.services.auth"


def test_unconfigured_package_logger_is_silent():
    logger = get_logger("swedbankjson.services.auth")
    assert not any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    package_handlers = logging.getLogger(PACKAGE_LOGGER_NAME).handlers
    assert any(isinstance(h, logging.NullHandler) for h in package_handlers)
