from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings

SERVICE_NAME = "shiftpay-api"
RESOURCE = Resource.create({"service.name": SERVICE_NAME, "deployment.env": settings.env})

# Instruments are resolved through the global proxy, so they follow whichever
# provider configure_metrics installs.
_meter = metrics.get_meter(SERVICE_NAME)
attendance_events = _meter.create_counter(
    "shiftpay.attendance.events", unit="1", description="Check-in and check-out events recorded"
)
auto_checkouts = _meter.create_counter(
    "shiftpay.attendance.auto_checkouts", unit="1", description="Open shifts closed by the sweeper"
)
payroll_generations = _meter.create_counter(
    "shiftpay.payroll.generated", unit="1", description="Payroll records created or recalculated"
)
timesheets_generated = _meter.create_counter(
    "shiftpay.timesheets.generated", unit="1", description="Timesheets created or refreshed from attendance"
)


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(SERVICE_NAME)


def configure_tracing(otlp_endpoint: Optional[str] = None) -> None:
    tracer_provider = TracerProvider(resource=RESOURCE)
    endpoint = otlp_endpoint or settings.otlp_endpoint
    if endpoint:
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(tracer_provider)


def configure_metrics(otlp_endpoint: Optional[str] = None) -> None:
    endpoint = otlp_endpoint or settings.otlp_endpoint
    provider_kwargs = {"resource": RESOURCE}
    if endpoint:
        provider_kwargs["metric_readers"] = [PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=endpoint))]
    metrics.set_meter_provider(MeterProvider(**provider_kwargs))


def configure_observability() -> None:
    configure_tracing()
    configure_metrics()
