# SPDX-License-Identifier: Apache-2.0

"""
Logging and OpenTelemetry configuration.

Services create spans through the global tracer; without a configured
provider those spans are no-ops.
"""

import logging
from typing import Optional
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from . import __version__
from .config import LicensingSettings

SERVICE_NAME = 'fisheries-licensing-core'


def setup_observability(settings: LicensingSettings) -> Optional[TracerProvider]:
    """
    Configure logging and, when enabled, tracing.

    Returns:
        The installed TracerProvider, or None when tracing is disabled
    """
    setup_logging(settings)

    if not settings.otel_enabled:
        return None

    # Environment-specific sampling
    if settings.environment == 'production':
        sampler = TraceIdRatioBased(0.1)
    elif settings.environment == 'staging':
        sampler = TraceIdRatioBased(0.5)
    else:
        sampler = TraceIdRatioBased(1.0)

    resource = Resource.create({
        "service.name": SERVICE_NAME,
        "service.version": __version__,
        "deployment.environment": settings.environment
    })

    tracer_provider = TracerProvider(sampler=sampler, resource=resource)

    if settings.environment == 'development':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def setup_logging(settings: LicensingSettings) -> None:
    """Configure the root logger and the package logger level."""
    level = getattr(logging, settings.log_level)

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    package_logger = logging.getLogger('fisheries_licensing')
    if settings.environment == 'development':
        # Development: Verbose logging for domain services
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(level)
