"""Observability configuration using Logfire.

Everything the service does is logged through logfire directly:

    import logfire

    logfire.info("Comment created", comment_id=str(comment.id))

    with logfire.span("comment_service.delete_comment", comment_id=str(comment_id)):
        ...

Hub delivery details are logged at debug level and only show up on the
console when ``DEBUG=true``.
"""

from typing import Any

import logfire
from fastapi import FastAPI, Request, WebSocket
from sqlalchemy.ext.asyncio import AsyncEngine

from chorus.config import ObservabilitySettings, Settings

SERVICE_NAME = "chorus-backend"
SERVICE_VERSION = "0.1.0"

# Polled by load balancers; not worth a trace per probe
UNTRACED_URLS = ["/health"]


def should_send_to_logfire(observability: ObservabilitySettings) -> bool:
    """Decide whether telemetry leaves the process.

    An explicit ``OBSERVABILITY__SEND_TO_LOGFIRE`` wins; otherwise telemetry
    is sent exactly when a token is configured.
    """
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the process.

    Args:
        settings: Application settings
    """
    send_to_logfire = should_send_to_logfire(settings.observability)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
            min_log_level="debug" if settings.debug else "info",
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        git_sha=settings.git_sha,
    )


def request_attributes(
    request: Request | WebSocket, attributes: dict[str, Any]
) -> dict[str, Any]:
    """Span attributes for a request or a realtime session.

    A realtime session is one long-lived span, so it is tagged to tell it
    apart from ordinary requests.
    """
    result = {**attributes, "path": request.url.path}

    if isinstance(request, WebSocket):
        result["realtime"] = True
    else:
        result["method"] = request.method

    if request.client:
        result["client_host"] = request.client.host

    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace comment requests and realtime sessions.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(
        app,
        request_attributes_mapper=request_attributes,
        excluded_urls=UNTRACED_URLS,
    )
    logfire.info("FastAPI instrumented", excluded_urls=UNTRACED_URLS)


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace comment store queries.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")
