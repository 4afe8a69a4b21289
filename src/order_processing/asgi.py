from __future__ import annotations

from order_processing.adapters.inbound.web.fastapi_app import create_app
from order_processing.bootstrap import build_application, configure_logging
from order_processing.config import load_settings

settings = load_settings()
configure_logging(settings.log_level)

application = build_application(settings)
app = create_app(application.processor, on_shutdown=application.aclose)
