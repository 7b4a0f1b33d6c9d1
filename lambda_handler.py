"""AWS Lambda entry point.

Mangum translates API Gateway proxy events into ASGI so the FastAPI app in
main.py serves the function. The app and its store are built once per
container, on cold start.
"""

from mangum import Mangum

from config import get_settings
from main import create_app

settings = get_settings()

handler = Mangum(
    create_app(settings),
    lifespan="off",
    api_gateway_base_path=settings.API_GATEWAY_BASE_PATH,
)
