import logging
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from evcharge.configuration.config import Config

# Configure logger
logger = logging.getLogger(__name__)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logger.addHandler(handler)
logger.setLevel(logging.INFO)

# Resource to identify this service
resource = Resource(attributes={
    SERVICE_NAME: Config.OTEL_SERVICE_NAME
})

def setup_tracing():
    """Set up OpenTelemetry tracing, exporting over OTLP when an endpoint is configured."""
    try:
        trace_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(trace_provider)

        if Config.OTEL_EXPORTER_OTLP_ENDPOINT:
            otlp_exporter = OTLPSpanExporter(
                endpoint=f"{Config.OTEL_EXPORTER_OTLP_ENDPOINT.rstrip('/')}/v1/traces"
            )
            trace_provider.add_span_processor(
                BatchSpanProcessor(otlp_exporter)
            )
        else:
            logger.info("OTLP endpoint not configured, spans are not exported")

        # Token key lookups go through httpx
        HTTPXClientInstrumentor().instrument()

        tracer = trace.get_tracer(__name__)

        logger.info("Tracing setup completed successfully")
        return tracer
    except Exception as e:
        logger.error(f"Failed to set up tracing: {str(e)}")
        # Return a no-op tracer if setup fails
        return trace.get_tracer(__name__)

# Initialize tracer
tracer = setup_tracing()

def instrument_fastapi(app):
    """Instrument a FastAPI application for monitoring."""
    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI app instrumented successfully")
    except Exception as e:
        logger.error(f"Failed to instrument FastAPI app: {str(e)}")

def start_span(name, context=None, kind=None, attributes=None):
    """Start a new trace span with the specified name and attributes."""
    return tracer.start_as_current_span(name, context=context, kind=kind, attributes=attributes)

def log_event(event_name, properties=None):
    """Record a custom event as a span and a log line."""
    try:
        with tracer.start_as_current_span(event_name) as span:
            if properties:
                for key, value in properties.items():
                    span.set_attribute(key, str(value))
        logger.info(f"Event: {event_name}", extra={"custom_properties": properties})
    except Exception as e:
        logger.error(f"Failed to log event '{event_name}': {str(e)}")

def log_exception(exception, properties=None):
    """Record an exception on a span and log it with its traceback."""
    try:
        with tracer.start_as_current_span("exception") as span:
            span.record_exception(exception)
            if properties:
                for key, value in properties.items():
                    span.set_attribute(key, str(value))
            span.set_status(trace.StatusCode.ERROR, str(exception))
        logger.exception(f"Exception: {str(exception)}", exc_info=exception,
                        extra={"custom_properties": properties})
    except Exception as e:
        logger.error(f"Failed to log exception: {str(e)}")

def log_metric(metric_name, value, properties=None):
    """Record a custom metric value."""
    try:
        with tracer.start_as_current_span(f"metric:{metric_name}") as span:
            span.set_attribute("metric.value", value)
            if properties:
                for key, val in properties.items():
                    span.set_attribute(key, str(val))
        logger.info(f"Metric: {metric_name}={value}",
                   extra={"custom_properties": properties})
    except Exception as e:
        logger.error(f"Failed to log metric '{metric_name}': {str(e)}")
