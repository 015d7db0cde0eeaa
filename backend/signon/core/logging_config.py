"""
Structured logging configuration.

Sets up structlog on top of stdlib logging. Development gets human-readable
console output; production (or LOG_FORMAT=json) gets JSON lines for log
aggregation.

Usage:
    from signon.core.logging_config import setup_logging, get_logger

    # At application startup
    setup_logging()

    # In your code
    logger = get_logger(__name__)
    logger.info("auth_callback", provider="google", outcome="first_login")
"""

import ipaddress
import logging
import re
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from signon.config import settings

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_IPV4_RE = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")

# Event keys whose values are never logged in clear text
_SECRET_KEYS = frozenset({"access_token", "client_secret", "secret", "code", "state"})
_EMAIL_KEYS = frozenset({"email"})
_SUBJECT_KEYS = frozenset({"sub", "subject", "identity_subject"})
_ADDRESS_KEYS = frozenset({"ip", "client_ip", "client_host"})


def mask_email(email: Optional[str]) -> str:
    """Keep the first character and the domain of a claims email.

    >>> mask_email("h.wurst@finn.de")
    'h***@finn.de'
    """
    if not email:
        return "N/A"
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain:
        return "[EMAIL]"
    return f"{local[0]}***@{domain}"


def mask_subject(subject: Optional[str]) -> str:
    """Provider ``sub`` values keep their last four characters only."""
    if not subject:
        return "N/A"
    return f"***{subject[-4:]}" if len(subject) > 4 else "***"


def mask_ip(address: Optional[str]) -> str:
    """Reduce a client address to its network: /24 for IPv4, /48 for IPv6."""
    if not address:
        return "N/A"
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return "unknown"
    prefix = 24 if ip.version == 4 else 48
    return str(ipaddress.ip_network(f"{ip}/{prefix}", strict=False))


def _mask_text(value: str) -> str:
    value = _EMAIL_RE.sub(lambda m: mask_email(m.group(0)), value)
    return _IPV4_RE.sub(lambda m: mask_ip(m.group(0)), value)


def pii_redaction_processor(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor masking claims, client addresses and provider secrets."""
    for key, value in list(event_dict.items()):
        if not value:
            continue
        if key in _SECRET_KEYS:
            event_dict[key] = "[REDACTED]"
        elif not isinstance(value, str):
            continue
        elif key in _EMAIL_KEYS:
            event_dict[key] = mask_email(value)
        elif key in _SUBJECT_KEYS:
            event_dict[key] = mask_subject(value)
        elif key in _ADDRESS_KEYS:
            event_dict[key] = mask_ip(value)
        else:
            event_dict[key] = _mask_text(value)
    return event_dict


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    Sets up both stdlib logging and structlog. In production, logs are JSON
    formatted; in development, they are human-readable text.
    """
    use_json = settings.LOG_FORMAT == "json" or settings.ENVIRONMENT == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        pii_redaction_processor,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_uvicorn_logging(use_json)

    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _configure_uvicorn_logging(use_json: bool = False) -> None:
    """Configure uvicorn's access and error logs with JSON formatting."""
    if use_json:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
            logger = logging.getLogger(logger_name)
            logger.handlers.clear()
            logger.addHandler(handler)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger with context support
    """
    return structlog.get_logger(name)


def log_auth_event(
    logger: structlog.stdlib.BoundLogger,
    event: str,
    provider: str,
    **kwargs,
) -> None:
    """Log one step of the sign-on flow with structured data."""
    logger.info(event, provider=provider, **kwargs)
