import logging
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db

logger = logging.getLogger(__name__)

_provider = None


def _build_provider(app):
    service_name = app.config.get("OTEL_SERVICE_NAME", "hokies-thrift")
    exporter = (app.config.get("OTEL_EXPORTER") or "otlp").lower()
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if exporter == "console":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    elif exporter == "otlp":
        endpoint = app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT")
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    # "none": spans are still created so trace ids propagate, nothing is exported
    return provider


def init_tracing(app):
    """Initialize OpenTelemetry tracing for the Flask app."""
    global _provider
    if _provider is None:
        _provider = _build_provider(app)
        trace.set_tracer_provider(_provider)
        set_global_textmap(TraceContextTextMapPropagator())
        RequestsInstrumentor().instrument()
        logger.info("Tracing enabled (%s exporter)", app.config.get("OTEL_EXPORTER"))

    FlaskInstrumentor().instrument_app(app)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)
